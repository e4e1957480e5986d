"""
Data models for ID3 tag parsing

Structures produced while reading the tag region of an MP3 file. All of them
are short-lived value objects: a TagHeader lives for one inspection session,
FrameHeaders are built and discarded inside a single walker iteration, and
DecodedFields are handed to the caller for display.

Layout reminder (all multi-byte values are most significant byte first):

    | tag header (10) | frame header (10) | payload | frame header | ... | padding | audio |

The tag header size field counts everything after the header itself, so the
audio region starts at ``size + 10``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


TAG_HEADER_SIZE = 10
FRAME_HEADER_SIZE = 10
TAG_MAGIC = b"ID3"
FOOTER_MAGIC = b"3DI"


class FrameSizeMode(Enum):
    """How the 4-byte frame size field is decoded"""
    SYNCHSAFE = "synchsafe"     # 7 bits per byte
    BIG_ENDIAN = "big_endian"   # plain 32-bit positional


class EncodingPolicy(Enum):
    """
    How the encoding selector byte of text frames is interpreted

    STRICT_SPEC follows the ID3 rules (0 = ISO-8859-1, 1 = UTF-16 with BOM).
    REGIONAL_LEGACY_OVERRIDE keeps 1 = UTF-16 but decodes every other
    selector with a regional single-byte/multi-byte code page, because many
    taggers write local code pages while claiming ISO-8859-1.
    """
    STRICT_SPEC = "strict"
    REGIONAL_LEGACY_OVERRIDE = "regional_legacy"


class EncodingTag(Enum):
    """Source encodings understood by the transcoder"""
    LEGACY_REGIONAL = "legacy_regional"
    UTF16 = "utf16"
    UTF16_BE = "utf16_be"
    UTF8 = "utf8"
    LATIN1 = "latin1"


class WalkTermination(Enum):
    """Why the frame walker stopped"""
    END_OF_TAG = "end_of_tag"
    UNRECOGNIZED_FRAME = "unrecognized_frame"
    TRUNCATED_FRAME = "truncated_frame"


@dataclass(frozen=True)
class TagHeader:
    """
    Decoded 10-byte ID3v2 tag header

    Attributes:
        magic: Always b"ID3" for a decoded header
        version: (major, minor) version bytes, (3, 0) for ID3v2.3.0
        unsynchronisation: Flag bit 7
        extended_header: Flag bit 6
        experimental: Flag bit 5
        footer_present: Flag bit 4 (defined by ID3v2.4 only)
        size: Synchsafe tag size, excluding the 10-byte header
    """
    magic: bytes
    version: Tuple[int, int]
    unsynchronisation: bool
    extended_header: bool
    experimental: bool
    footer_present: bool
    size: int

    @property
    def audio_offset(self) -> int:
        """File offset of the first byte after the declared tag region"""
        return self.size + TAG_HEADER_SIZE

    @property
    def version_str(self) -> str:
        return f"2.{self.version[0]}.{self.version[1]}"


@dataclass(frozen=True)
class TagFooter:
    """Decoded 10-byte ID3v2 footer ("3DI" magic already checked)"""
    magic: bytes
    version: Tuple[int, int]
    size: int


@dataclass(frozen=True)
class FrameHeader:
    """
    Decoded 10-byte frame sub-header

    Attributes:
        frame_id: Four-character frame code such as "TIT2"
        size: Payload size in bytes (header excluded)
        flags: Raw 16-bit status and format flags
    """
    frame_id: str
    size: int
    flags: int = 0

    @property
    def tag_alter_preservation(self) -> bool:
        return bool(self.flags & 0x8000)

    @property
    def file_alter_preservation(self) -> bool:
        return bool(self.flags & 0x4000)

    @property
    def read_only(self) -> bool:
        return bool(self.flags & 0x2000)

    @property
    def compressed(self) -> bool:
        return bool(self.flags & 0x0080)

    @property
    def encrypted(self) -> bool:
        return bool(self.flags & 0x0040)

    @property
    def grouped(self) -> bool:
        return bool(self.flags & 0x0020)


@dataclass(frozen=True)
class DecodedField:
    """
    One decoded tag field ready for display

    Exactly one of ``text`` and ``binary_size`` is set: text frames carry the
    transcoded string, picture frames only report their payload size.
    """
    frame_id: str
    label: str
    text: Optional[str] = None
    binary_size: Optional[int] = None

    @property
    def is_binary(self) -> bool:
        return self.binary_size is not None

    def to_dict(self) -> dict:
        data = {'frame_id': self.frame_id, 'label': self.label}
        if self.is_binary:
            data['binary_size'] = self.binary_size
        else:
            data['text'] = self.text
        return data


@dataclass
class WalkResult:
    """Outcome of walking one tag body"""
    fields: List[DecodedField] = field(default_factory=list)
    termination: WalkTermination = WalkTermination.END_OF_TAG
    offset: int = 0
    frames_seen: int = 0
    frames_skipped: int = 0
