"""
Legacy ID3v1 trailer reader

Files without an ID3v2 header may still carry the old fixed-layout tag in
their last 128 bytes:

    TAG | title 30 | artist 30 | album 30 | year 4 | comment 30 | genre 1

Text fields are NUL/space padded and stored in whatever code page the tagger
used, so they go through the same transcoder as ID3v2 frames, using the
regional legacy encoding.
"""

import struct
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from mutagen.id3 import TCON

from .encoding import DEFAULT_LEGACY_ENCODING, Transcoder, transcode
from .models import DecodedField, EncodingTag
from ..exceptions import TranscodeFailure
from ..utils.logger import get_logger


logger = get_logger(__name__)

LEGACY_TAG_SIZE = 128
LEGACY_MAGIC = b"TAG"

_LEGACY_FORMAT = ">3s30s30s30s4s30sB"

# (attribute, label) pairs in display order
LEGACY_FIELDS = [
    ("title", "Title"),
    ("artist", "Artist"),
    ("album", "Album"),
    ("year", "Published year"),
    ("genre", "Genre"),
]


@dataclass(frozen=True)
class LegacyTag:
    """Decoded ID3v1 fields; a field is None when it could not be decoded"""
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    year: Optional[str] = None
    genre: Optional[str] = None

    def to_fields(self) -> List[DecodedField]:
        """Return the non-empty fields as DecodedField records"""
        fields = []
        for attribute, label in LEGACY_FIELDS:
            value = getattr(self, attribute)
            if value:
                fields.append(DecodedField(frame_id=f"ID3v1:{attribute}", label=label, text=value))
        return fields


def genre_name(index: int) -> Optional[str]:
    """Map an ID3v1 genre byte to its name (255 means unset)"""
    if index < len(TCON.GENRES):
        return TCON.GENRES[index]
    return None


def read_legacy_tag(
    fileobj: BinaryIO,
    transcoder: Optional[Transcoder] = None,
    legacy_encoding: str = DEFAULT_LEGACY_ENCODING
) -> Optional[LegacyTag]:
    """
    Read the ID3v1 trailer of a file

    Args:
        fileobj: Seekable binary file object
        transcoder: Text transcoder, defaults to ``transcode``
        legacy_encoding: Codec for the text fields

    Returns:
        LegacyTag, or None when the file has no "TAG" trailer
    """
    transcoder = transcoder or transcode

    fileobj.seek(0, 2)
    if fileobj.tell() < LEGACY_TAG_SIZE:
        logger.debug("File too small for an ID3v1 tag")
        return None

    fileobj.seek(-LEGACY_TAG_SIZE, 2)
    data = fileobj.read(LEGACY_TAG_SIZE)

    magic, title, artist, album, year, _comment, genre = struct.unpack(_LEGACY_FORMAT, data)
    if magic != LEGACY_MAGIC:
        logger.debug("No TAG ID")
        return None

    values = {}
    for attribute, raw in (("title", title), ("artist", artist), ("album", album), ("year", year)):
        try:
            values[attribute] = transcoder(raw, EncodingTag.LEGACY_REGIONAL, legacy_encoding).rstrip(" ")
        except TranscodeFailure as e:
            logger.warning(f"Cannot decode ID3v1 {attribute}: {e}")
            values[attribute] = None

    return LegacyTag(genre=genre_name(genre), **values)
