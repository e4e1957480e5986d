"""
ID3v2 tag header and footer readers

The tag header is the fixed 10-byte structure at offset 0:

    +-----+---------+-------+-----------------+
    | ID3 | ver min | flags | size (synchsafe) |
    |  3  |  1   1  |   1   |        4         |
    +-----+---------+-------+-----------------+

Flag bits (most significant first): a = unsynchronisation, b = extended
header present, c = experimental indicator, d = footer present (2.4 only).
"""

import struct
from typing import BinaryIO, Optional

from .models import TagHeader, TagFooter, TAG_HEADER_SIZE, TAG_MAGIC, FOOTER_MAGIC
from .synchsafe import decode_synchsafe
from ..exceptions import NotAnID3File, UnsupportedTagVersion, TruncatedRead
from ..utils.logger import get_logger


logger = get_logger(__name__)

SUPPORTED_VERSION = (3, 0)

_HEADER_FORMAT = ">3sBBB4s"


def read_exact(fileobj: BinaryIO, size: int, what: str) -> bytes:
    """
    Read exactly ``size`` bytes or raise TruncatedRead

    Args:
        fileobj: Binary file object positioned at the structure
        size: Number of bytes required
        what: Description of the structure, used in the error message

    Returns:
        The bytes read
    """
    data = fileobj.read(size)
    if len(data) < size:
        raise TruncatedRead(
            f"File ended while reading {what}: expected {size} bytes, got {len(data)}",
            expected=size,
            received=len(data),
        )
    return data


def parse_tag_header(data: bytes, strict_version: bool = False) -> TagHeader:
    """
    Decode a 10-byte tag header

    Args:
        data: The first 10 bytes of the file
        strict_version: Reject tags whose version is not 2.3.0

    Returns:
        Decoded TagHeader

    Raises:
        NotAnID3File: Magic is not "ID3"
        UnsupportedTagVersion: Version is not 2.3.0 and strict_version is set
    """
    magic, major, minor, flags, raw_size = struct.unpack(_HEADER_FORMAT, data[:TAG_HEADER_SIZE])

    if magic != TAG_MAGIC:
        raise NotAnID3File(
            "No ID3v2 tag header found",
            details={'magic': magic.hex()}
        )

    version = (major, minor)
    if version != SUPPORTED_VERSION:
        if strict_version:
            raise UnsupportedTagVersion(
                f"ID3 but not v2.3 (found v2.{major}.{minor})",
                version=version
            )
        logger.warning(f"ID3v2.{major}.{minor} tag found, parsing it as v2.3")

    return TagHeader(
        magic=magic,
        version=version,
        unsynchronisation=bool(flags & 0x80),
        extended_header=bool(flags & 0x40),
        experimental=bool(flags & 0x20),
        footer_present=bool(flags & 0x10),
        size=decode_synchsafe(raw_size),
    )


def read_tag_header(fileobj: BinaryIO, strict_version: bool = False) -> TagHeader:
    """
    Read and decode the tag header at the current position (offset 0)

    Advances the cursor by exactly 10 bytes on success.

    Args:
        fileobj: Readable binary file object
        strict_version: Reject tags whose version is not 2.3.0

    Returns:
        Decoded TagHeader

    Raises:
        TruncatedRead: Fewer than 10 bytes available
        NotAnID3File: Magic is not "ID3"
        UnsupportedTagVersion: Version mismatch in strict mode
    """
    data = read_exact(fileobj, TAG_HEADER_SIZE, "ID3 tag header")
    header = parse_tag_header(data, strict_version=strict_version)

    logger.debug(
        f"Tag header: v{header.version_str}, size={header.size}, "
        f"unsync={header.unsynchronisation}, extended={header.extended_header}, "
        f"experimental={header.experimental}"
    )
    return header


def read_tag_footer(fileobj: BinaryIO, offset: int) -> Optional[TagFooter]:
    """
    Best-effort check for a "3DI" footer at ``offset``

    A missing footer is the common case and is only logged as a diagnostic.
    The cursor position after the call is unspecified; callers seek before
    their next read.

    Args:
        fileobj: Seekable binary file object
        offset: Absolute file offset of the candidate footer

    Returns:
        TagFooter when the magic matches, otherwise None
    """
    fileobj.seek(offset)
    data = fileobj.read(TAG_HEADER_SIZE)

    if len(data) < TAG_HEADER_SIZE:
        logger.debug(f"No room for a tag footer at offset {offset}")
        return None

    magic, major, minor, _flags, raw_size = struct.unpack(_HEADER_FORMAT, data)
    if magic != FOOTER_MAGIC:
        logger.debug(f"No tag footer at offset {offset} (found {magic!r})")
        return None

    footer = TagFooter(magic=magic, version=(major, minor), size=decode_synchsafe(raw_size))
    logger.debug(f"Tag footer found at offset {offset}: size={footer.size}")
    return footer
