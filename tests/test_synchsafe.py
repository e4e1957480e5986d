"""Test synchsafe integer codec"""

import pytest
import mutagen.id3

from mp3inspect.id3 import synchsafe
from mp3inspect.id3.synchsafe import decode_synchsafe, encode_synchsafe, decode_big_endian


class TestSynchsafe:
    """Test 7-bit-per-byte size decoding"""

    def test_decode_known_values(self):
        """Test decoding against hand computed values"""
        assert decode_synchsafe(b"\x00\x00\x02\x01") == 257
        assert decode_synchsafe(b"\x00\x00\x00\x7f") == 127
        assert decode_synchsafe(b"\x00\x00\x01\x00") == 128
        assert decode_synchsafe(b"\x7f\x7f\x7f\x7f") == 2 ** 28 - 1

    def test_high_bits_are_masked(self):
        """Test malformed high bits are ignored instead of rejected"""
        assert decode_synchsafe(b"\x80\x80\x82\x81") == 257
        assert decode_synchsafe(b"\xff\xff\xff\xff") == 2 ** 28 - 1

    def test_round_trip(self):
        """Test encode reverses decode for inputs with clear high bits"""
        for raw in (b"\x00\x00\x00\x00", b"\x00\x00\x02\x01", b"\x01\x7f\x00\x33", b"\x7f\x7f\x7f\x7f"):
            assert encode_synchsafe(decode_synchsafe(raw)) == raw

    def test_encode(self):
        """Test encoding produces four 7-bit bytes"""
        assert encode_synchsafe(257) == b"\x00\x00\x02\x01"
        assert all(byte < 0x80 for byte in encode_synchsafe(123456789))

    def test_encode_negative(self):
        """Test negative sizes are refused"""
        with pytest.raises(ValueError):
            encode_synchsafe(-1)

    def test_big_endian(self):
        """Test plain positional decoding"""
        assert decode_big_endian(b"\x00\x00\x02\x01") == 513
        assert decode_big_endian(b"\x00\x00\x00\x80") == 128
        assert decode_big_endian(b"\x01\x00\x00\x00") == 2 ** 24

    def test_uses_public_mutagen_class(self):
        """Test the codec relies on the BitPaddedInt mutagen.id3 exports"""
        assert synchsafe.BitPaddedInt is mutagen.id3.BitPaddedInt
        assert decode_synchsafe(b"\x00\x00\x02\x01") == mutagen.id3.BitPaddedInt(b"\x00\x00\x02\x01")
