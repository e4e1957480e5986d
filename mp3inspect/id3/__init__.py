"""
ID3 tag parsing package

Readers for the ID3v2.3 tag header, footer and frames, the legacy ID3v1
trailer, and the transcoding of text payloads.

Modules:

1. **synchsafe.py**: 7-bit-per-byte size codec
2. **header.py**: tag header and footer readers
3. **frames.py**: FrameWalker over the tag body
4. **encoding.py**: encoding selector policy and transcoder
5. **legacy.py**: ID3v1 fallback reader
6. **models.py**: TagHeader, FrameHeader, DecodedField and enums
"""

from .models import (
    TagHeader,
    TagFooter,
    FrameHeader,
    DecodedField,
    WalkResult,
    FrameSizeMode,
    EncodingPolicy,
    EncodingTag,
    WalkTermination,
)
from .synchsafe import decode_synchsafe, encode_synchsafe, decode_big_endian
from .header import read_tag_header, parse_tag_header, read_tag_footer, read_exact
from .encoding import transcode, resolve_encoding
from .frames import FrameWalker, WalkerConfig, FRAME_LABELS, parse_frame_header
from .legacy import LegacyTag, read_legacy_tag

__all__ = [
    'TagHeader',
    'TagFooter',
    'FrameHeader',
    'DecodedField',
    'WalkResult',
    'FrameSizeMode',
    'EncodingPolicy',
    'EncodingTag',
    'WalkTermination',
    'decode_synchsafe',
    'encode_synchsafe',
    'decode_big_endian',
    'read_tag_header',
    'parse_tag_header',
    'read_tag_footer',
    'read_exact',
    'transcode',
    'resolve_encoding',
    'FrameWalker',
    'WalkerConfig',
    'FRAME_LABELS',
    'parse_frame_header',
    'LegacyTag',
    'read_legacy_tag'
]
