"""Test configuration and fixtures"""

import struct
import tempfile
from pathlib import Path

import pytest

from mp3inspect.config.settings import reload_settings
from mp3inspect.id3.synchsafe import encode_synchsafe
from mp3inspect.report.inspector import reset_inspector
from mp3inspect.utils.logger import configure_from_settings


class Mp3Builder:
    """Builds synthetic tag and audio bytes"""

    @staticmethod
    def tag_header(size, version=(3, 0), flags=0):
        return b"ID3" + bytes([version[0], version[1], flags]) + encode_synchsafe(size)

    @staticmethod
    def frame(frame_id, payload, flags=0, size=None, big_endian=False):
        declared = len(payload) if size is None else size
        if big_endian:
            size_bytes = struct.pack(">I", declared)
        else:
            size_bytes = encode_synchsafe(declared)
        return frame_id.encode("latin-1") + size_bytes + struct.pack(">H", flags) + payload

    @classmethod
    def text_frame(cls, frame_id, text, selector=0, codec="latin-1", **kwargs):
        return cls.frame(frame_id, bytes([selector]) + text.encode(codec), **kwargs)

    @classmethod
    def tag(cls, *frames, padding=0, version=(3, 0), flags=0):
        body = b"".join(frames) + b"\x00" * padding
        return cls.tag_header(len(body), version=version, flags=flags) + body

    @staticmethod
    def mpeg_frame(bitrate_index=9, sample_rate_index=0, padding=False, version=0b11, layer=0b01):
        """One zero-filled audio frame; 128 kbps / 44.1 kHz gives 417 bytes"""
        bitrates = (0, 32000, 40000, 48000, 56000, 64000, 80000, 96000,
                    112000, 128000, 160000, 192000, 224000, 256000, 320000, 0)
        sample_rates = (44100, 48000, 32000, 0)

        header = bytes([
            0xFF,
            0xE0 | (version << 3) | (layer << 1) | 0x01,
            (bitrate_index << 4) | (sample_rate_index << 2) | (0x02 if padding else 0x00),
            0x44,
        ])
        length = 144 * bitrates[bitrate_index] // sample_rates[sample_rate_index] + (1 if padding else 0)
        return header + b"\x00" * (length - len(header))

    @staticmethod
    def legacy_tag(title=b"", artist=b"", album=b"", year=b"", comment=b"", genre=255):
        def pad(value, width):
            return value[:width].ljust(width, b"\x00")
        return (b"TAG" + pad(title, 30) + pad(artist, 30) + pad(album, 30)
                + pad(year, 4) + pad(comment, 30) + bytes([genre]))


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def mp3():
    """Builder for synthetic MP3 bytes"""
    return Mp3Builder


@pytest.fixture
def write_file(temp_dir):
    """Write bytes to a file inside temp_dir and return its path"""
    def _write(name, data):
        path = temp_dir / name
        path.write_bytes(data)
        return path
    return _write


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, temp_dir):
    """Give every test default settings and a fresh inspector"""
    for name in ('MP3INSPECT_LEGACY_ENCODING', 'MP3INSPECT_STRICT_VERSION',
                 'MP3INSPECT_FRAME_SIZE_MODE', 'MP3INSPECT_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('HOME', str(temp_dir))
    monkeypatch.chdir(temp_dir)

    reload_settings()
    configure_from_settings()
    reset_inspector()
    yield
    reset_inspector()
