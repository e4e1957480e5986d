"""
ID3v2.3 frame walker

Iterates the frames inside a tag body and turns the interesting ones into
DecodedField records. Each frame is a 10-byte sub-header followed by its
payload:

    +----------+------------+-------+----------------------+
    | frame id | size       | flags | payload (size bytes) |
    |    4     |    4       |   2   |                      |
    +----------+------------+-------+----------------------+

Walk rules:

- The walk ends normally when fewer than 10 bytes of the body remain.
- The first frame id that is not recognized ends the walk. Tags are usually
  followed by zero padding, and "\\0\\0\\0\\0" is never a frame id, so this is
  how the end of the real tag data is found. It is not an error.
- A frame whose declared size runs past the end of the body ends the walk.
- Text frames start with an encoding selector byte that is resolved through
  the configured EncodingPolicy. PRIV frames have no selector byte and are
  decoded whole as Latin-1. APIC (picture) frames are never decoded; only
  their size is reported.
- A frame that fails to transcode is skipped; the walk continues.

Frame size decoding is configurable: ID3v2.4 sizes are synchsafe, ID3v2.3
writers normally use plain 32-bit big endian. The two agree for frames
smaller than 128 bytes.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Set

from mutagen.id3 import Frames

from .encoding import DEFAULT_LEGACY_ENCODING, Transcoder, resolve_encoding, transcode
from .models import (
    DecodedField,
    EncodingPolicy,
    EncodingTag,
    FrameHeader,
    FrameSizeMode,
    TagHeader,
    WalkResult,
    WalkTermination,
    FRAME_HEADER_SIZE,
)
from .synchsafe import decode_big_endian, decode_synchsafe
from ..exceptions import TranscodeFailure
from ..utils.logger import get_logger


# Human readable labels for the frames reported to the user
FRAME_LABELS = {
    "TIT2": "Title",
    "TALB": "Album",
    "TPE2": "Band",
    "TPE1": "Performer",
    "TCON": "Content Type",
    "TRCK": "Track Number",
    "TYER": "Year",
    "PRIV": "Private Frame",
    "TCOM": "Composer",
    "TCOP": "Copyright",
    "TEXT": "Lyricist",
    "APIC": "Picture",
}

PICTURE_FRAME = "APIC"
PRIVATE_FRAME = "PRIV"

# Every four-character frame id mutagen knows about, plus the labelled ones
RECOGNIZED_FRAME_IDS = frozenset(
    frame_id for frame_id in Frames if len(frame_id) == 4
) | frozenset(FRAME_LABELS)


@dataclass
class WalkerConfig:
    """
    Explicit configuration for one frame walk

    The header flags are copied in from the TagHeader of the session rather
    than read from shared state.
    """
    frame_size_mode: FrameSizeMode = FrameSizeMode.SYNCHSAFE
    encoding_policy: EncodingPolicy = EncodingPolicy.REGIONAL_LEGACY_OVERRIDE
    legacy_encoding: str = DEFAULT_LEGACY_ENCODING
    emit_unlabeled: bool = False
    unsynchronisation: bool = False
    extended_header: bool = False

    def with_header(self, header: TagHeader) -> "WalkerConfig":
        """Return a copy carrying the flags of ``header``"""
        return WalkerConfig(
            frame_size_mode=self.frame_size_mode,
            encoding_policy=self.encoding_policy,
            legacy_encoding=self.legacy_encoding,
            emit_unlabeled=self.emit_unlabeled,
            unsynchronisation=header.unsynchronisation,
            extended_header=header.extended_header,
        )


def parse_frame_header(data: bytes, mode: FrameSizeMode = FrameSizeMode.SYNCHSAFE) -> FrameHeader:
    """
    Decode a 10-byte frame sub-header

    Args:
        data: At least 10 bytes starting at the frame id
        mode: Frame size decoding mode

    Returns:
        FrameHeader (the id is decoded as Latin-1 so any byte value survives)
    """
    frame_id = data[0:4].decode("latin-1")
    if mode is FrameSizeMode.SYNCHSAFE:
        size = decode_synchsafe(data[4:8])
    else:
        size = decode_big_endian(data[4:8])
    flags = (data[8] << 8) | data[9]
    return FrameHeader(frame_id=frame_id, size=size, flags=flags)


class FrameWalker:
    """
    Walks the frames of one ID3v2 tag body

    Args:
        config: Walk configuration; defaults reproduce the regional legacy
                behaviour with synchsafe frame sizes
        transcoder: Callable ``(data, encoding_tag, legacy_encoding) -> str``
                    raising TranscodeFailure; defaults to ``transcode``
        recognized_ids: Frame ids that keep the walk going
    """

    def __init__(
        self,
        config: Optional[WalkerConfig] = None,
        transcoder: Optional[Transcoder] = None,
        recognized_ids: Optional[Set[str]] = None
    ):
        self.config = config or WalkerConfig()
        self.transcoder = transcoder or transcode
        self.recognized_ids = recognized_ids if recognized_ids is not None else RECOGNIZED_FRAME_IDS
        self.logger = get_logger(__name__)

    def walk(self, body: bytes) -> WalkResult:
        """
        Walk a complete tag body and collect the decoded fields

        Args:
            body: The ``tagsize`` bytes that follow the tag header

        Returns:
            WalkResult with the fields in encounter order and the reason the
            walk stopped
        """
        result = WalkResult()
        for decoded in self._walk(body, result):
            result.fields.append(decoded)
        return result

    def iter_fields(self, body: bytes) -> Iterator[DecodedField]:
        """Yield decoded fields one at a time; stop iterating to abort"""
        yield from self._walk(body, WalkResult())

    def _walk(self, body: bytes, result: WalkResult) -> Iterator[DecodedField]:
        if self.config.unsynchronisation:
            self.logger.warning("Tag uses unsynchronisation, which is not undone; fields may be garbled")
        if self.config.extended_header:
            self.logger.warning("Tag has an extended header, which is not skipped; the walk may stop early")

        tagsize = len(body)
        offset = 0

        while offset + FRAME_HEADER_SIZE <= tagsize:
            header = parse_frame_header(body[offset:offset + FRAME_HEADER_SIZE], self.config.frame_size_mode)

            if header.frame_id not in self.recognized_ids:
                self.logger.debug(f"Unrecognized frame id {header.frame_id!r} at offset {offset}, end of tag data")
                result.termination = WalkTermination.UNRECOGNIZED_FRAME
                result.offset = offset
                return

            start = offset + FRAME_HEADER_SIZE
            end = start + header.size
            if end > tagsize:
                self.logger.warning(
                    f"Frame {header.frame_id} at offset {offset} declares {header.size} bytes, "
                    f"only {tagsize - start} left in tag"
                )
                result.termination = WalkTermination.TRUNCATED_FRAME
                result.offset = offset
                return

            result.frames_seen += 1
            offset = end
            result.offset = offset

            decoded = self._decode_frame(header, body[start:end])
            if decoded is None:
                result.frames_skipped += 1
            else:
                yield decoded

        result.termination = WalkTermination.END_OF_TAG

    def _decode_frame(self, header: FrameHeader, payload: bytes) -> Optional[DecodedField]:
        """
        Decode one frame payload

        Returns:
            DecodedField, or None when the frame is skipped
        """
        frame_id = header.frame_id
        label = FRAME_LABELS.get(frame_id)

        if label is None:
            if not self.config.emit_unlabeled:
                self.logger.debug(f"Skipping unlabeled frame {frame_id} ({header.size} bytes)")
                return None
            label = frame_id

        if header.compressed or header.encrypted:
            self.logger.info(f"Skipping compressed or encrypted frame {frame_id}")
            return None

        if header.size - 1 <= 0:
            self.logger.debug(f"Frame {frame_id} has no data after the encoding byte")
            return None

        if frame_id == PICTURE_FRAME:
            return DecodedField(frame_id=frame_id, label=label, binary_size=header.size)

        try:
            if frame_id == PRIVATE_FRAME:
                text = self.transcoder(payload, EncodingTag.LATIN1, self.config.legacy_encoding)
            else:
                encoding = resolve_encoding(payload[0], self.config.encoding_policy)
                text = self.transcoder(payload[1:], encoding, self.config.legacy_encoding)
        except TranscodeFailure as e:
            self.logger.warning(f"Cannot decode frame {frame_id}: {e}")
            return None

        return DecodedField(frame_id=frame_id, label=label, text=text)
