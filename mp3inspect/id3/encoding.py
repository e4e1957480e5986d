"""
Text transcoding for ID3 frame payloads

Text frames start with an encoding selector byte. This module maps that byte
to a source encoding according to an EncodingPolicy and converts payload bytes
to Python text. Character-set tables come from Python's codec registry; the
frame walker only depends on the ``transcode`` call signature, so any callable
with the same shape can be substituted.

Selector values (mutagen.id3.Encoding):
    0 LATIN1   - ISO-8859-1
    1 UTF16    - UTF-16 with byte-order mark
    2 UTF16BE  - UTF-16 big endian, no BOM (ID3v2.4)
    3 UTF8     - UTF-8 (ID3v2.4)
"""

import codecs
from typing import Callable

from mutagen.id3 import Encoding

from .models import EncodingPolicy, EncodingTag
from ..exceptions import TranscodeFailure


DEFAULT_LEGACY_ENCODING = "gb18030"

# Signature shared by every transcoder the walker accepts
Transcoder = Callable[[bytes, EncodingTag, str], str]

_CODECS = {
    EncodingTag.UTF16_BE: "utf-16-be",
    EncodingTag.UTF8: "utf-8",
    EncodingTag.LATIN1: "latin-1",
}

_STRICT_SELECTORS = {
    Encoding.LATIN1: EncodingTag.LATIN1,
    Encoding.UTF16: EncodingTag.UTF16,
    Encoding.UTF16BE: EncodingTag.UTF16_BE,
    Encoding.UTF8: EncodingTag.UTF8,
}


def resolve_encoding(selector: int, policy: EncodingPolicy) -> EncodingTag:
    """
    Map an encoding selector byte to a source encoding

    Args:
        selector: First payload byte of a text frame
        policy: How non-UTF-16 selectors are treated

    Returns:
        EncodingTag for the transcoder

    Raises:
        TranscodeFailure: Unknown selector under the strict policy
    """
    if selector == Encoding.UTF16:
        return EncodingTag.UTF16

    if policy is EncodingPolicy.REGIONAL_LEGACY_OVERRIDE:
        return EncodingTag.LEGACY_REGIONAL

    try:
        return _STRICT_SELECTORS[Encoding(selector)]
    except (ValueError, KeyError):
        raise TranscodeFailure(
            f"Unknown text encoding selector {selector}",
            details={'selector': selector}
        )


def _decode_utf16(data: bytes) -> str:
    # Without a byte-order mark the data is taken as big endian
    if data.startswith(codecs.BOM_UTF16_LE) or data.startswith(codecs.BOM_UTF16_BE):
        return data.decode("utf-16")
    return data.decode("utf-16-be")


def transcode(
    data: bytes,
    encoding: EncodingTag,
    legacy_encoding: str = DEFAULT_LEGACY_ENCODING
) -> str:
    """
    Convert payload bytes to text

    Args:
        data: Raw text bytes (selector byte already removed)
        encoding: Source encoding
        legacy_encoding: Codec name used for EncodingTag.LEGACY_REGIONAL

    Returns:
        Decoded text, cut at the first NUL terminator

    Raises:
        TranscodeFailure: Unmappable bytes, truncated multi-byte sequence or
                          unknown codec
    """
    try:
        if encoding is EncodingTag.UTF16:
            text = _decode_utf16(data)
        elif encoding is EncodingTag.LEGACY_REGIONAL:
            text = data.decode(legacy_encoding)
        else:
            text = data.decode(_CODECS[encoding])
    except UnicodeDecodeError as e:
        raise TranscodeFailure(
            f"Cannot decode {len(data)} bytes as {encoding.value}: {e.reason}",
            details={'encoding': encoding.value, 'position': e.start}
        )
    except LookupError:
        raise TranscodeFailure(
            f"Unknown text encoding: {legacy_encoding}",
            details={'encoding': legacy_encoding}
        )

    return text.split("\x00", 1)[0]
