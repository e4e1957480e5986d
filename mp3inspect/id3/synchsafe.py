"""
Synchsafe integer codec

ID3v2 stores sizes as "synchsafe" integers: four bytes carrying seven bits
each, so that a size field can never contain the 0xFF 0xE0 bit pattern that
MPEG decoders would mistake for a frame sync. The conversion is delegated to
mutagen's BitPaddedInt, which masks the high bit of every byte.
"""

from mutagen.id3 import BitPaddedInt


def decode_synchsafe(data: bytes) -> int:
    """
    Decode a 4-byte synchsafe integer

    The high bit of each byte is ignored, so malformed input is masked rather
    than rejected: value = b0*2^21 + b1*2^14 + b2*2^7 + b3.

    Args:
        data: Four size bytes, most significant first

    Returns:
        Decoded integer
    """
    return int(BitPaddedInt(bytes(data[:4]), bits=7))


def encode_synchsafe(value: int) -> bytes:
    """
    Encode an integer below 2^28 as 4 synchsafe bytes

    Raises:
        ValueError: If the value does not fit in 28 bits
    """
    if value < 0:
        raise ValueError(f"Negative size cannot be encoded: {value}")
    return bytes(BitPaddedInt.to_str(value, bits=7, width=4))


def decode_big_endian(data: bytes) -> int:
    """Decode 4 bytes as a plain big-endian unsigned integer"""
    return int(BitPaddedInt(bytes(data[:4]), bits=8))
