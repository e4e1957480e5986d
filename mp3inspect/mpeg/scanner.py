"""
MPEG audio frame synchronizer

Walks the raw audio region of an MP3 file without knowing where frames
start. Every frame begins with a 4-byte header whose first 11 bits are all
ones (the sync word):

    AAAAAAAA AAABBCCD EEEEFFGH IIJJKLMM

    A sync        B version (11 = MPEG-1, 10 = MPEG-2, 00 = MPEG-2.5, 01 reserved)
    C layer       (01 = Layer III, 00 reserved)
    D protection  E bitrate index    F sample rate index
    G padding     H private          I..M channel mode and friends

The scanner is a two-state machine:

SEEKING_SYNC
    Read one byte. On 0xFF read the next one; if its high nibble is 0xF or
    0xE switch to VALIDATING, otherwise keep seeking (both bytes are
    consumed).
VALIDATING
    Read the remaining two header bytes and decode them. A zero bitrate,
    zero sample rate or reserved version/layer marks a false sync: the 0xFF
    was audio data. The cursor backs off to one byte past the candidate so
    a sync starting on the second byte is still found. A good header yields an
    AudioFrameRecord and the cursor jumps to the start of the next frame.

Reaching end of file in either state simply ends the scan.

Frame length for Layer III: floor(144 * bitrate / sample_rate) + padding.
The bitrate table is the MPEG-1 Layer III one for every header, and files
are assumed to keep the sample rate of their first frame.
"""

from typing import BinaryIO, Iterator, Optional

from .models import AudioFrameRecord, ScanState, ScanStatistics
from ..utils.logger import get_logger


# Bits per second, indexed by the 4-bit bitrate field (0 = free, 15 = bad)
BITRATE_TABLE = (
    0, 32000, 40000, 48000, 56000, 64000, 80000, 96000,
    112000, 128000, 160000, 192000, 224000, 256000, 320000, 0,
)

# Hz, indexed by the 2-bit sample rate field (3 = reserved)
SAMPLE_RATE_TABLE = (44100, 48000, 32000, 0)

SYNC_BYTE = 0xFF
SYNC_NIBBLES = (0xF0, 0xE0)

VERSION_MPEG1 = 0b11
VERSION_RESERVED = 0b01
LAYER_III = 0b01
LAYER_RESERVED = 0b00

HEADER_SIZE = 4


def compute_frame_length(bitrate: int, sample_rate: int, padding: bool) -> int:
    """Length in bytes of a Layer III frame, header included"""
    return 144 * bitrate // sample_rate + (1 if padding else 0)


def decode_frame_header(offset: int, second: int, third: int) -> Optional[AudioFrameRecord]:
    """
    Decode the header bytes that follow a sync byte

    Args:
        offset: File offset of the 0xFF sync byte
        second: Header byte 1 (sync tail, version, layer, protection)
        third: Header byte 2 (bitrate, sample rate, padding, private)

    Returns:
        AudioFrameRecord, or None for a false sync
    """
    version = (second >> 3) & 0x03
    layer = (second >> 1) & 0x03

    bitrate = BITRATE_TABLE[third >> 4]
    sample_rate = SAMPLE_RATE_TABLE[(third >> 2) & 0x03]
    padding = bool((third >> 1) & 0x01)

    if bitrate == 0 or sample_rate == 0:
        return None
    if version == VERSION_RESERVED or layer == LAYER_RESERVED:
        return None

    return AudioFrameRecord(
        offset=offset,
        is_mpeg1_layer3=(version == VERSION_MPEG1 and layer == LAYER_III),
        bitrate=bitrate,
        sample_rate=sample_rate,
        padding=padding,
        frame_length=compute_frame_length(bitrate, sample_rate, padding),
    )


class MpegFrameScanner:
    """
    Scans the audio region of an open file for MPEG frames

    Args:
        fileobj: Seekable binary file object
        start_offset: File offset where the audio region begins (the byte
                      after the declared ID3 tag, or 0 without a tag)
    """

    def __init__(self, fileobj: BinaryIO, start_offset: int = 0):
        self.fileobj = fileobj
        self.start_offset = start_offset
        self.false_syncs = 0
        self.logger = get_logger(__name__)

    def iter_frames(self) -> Iterator[AudioFrameRecord]:
        """
        Yield every accepted frame in file order

        Stop iterating to abort the scan. ``false_syncs`` counts rejected
        sync candidates seen so far.
        """
        fileobj = self.fileobj
        position = self.start_offset
        fileobj.seek(position)

        state = ScanState.SEEKING_SYNC
        candidate = 0
        second = 0
        self.false_syncs = 0

        while True:
            if state is ScanState.SEEKING_SYNC:
                byte = fileobj.read(1)
                if not byte:
                    return
                position += 1
                if byte[0] != SYNC_BYTE:
                    continue

                byte = fileobj.read(1)
                if not byte:
                    return
                position += 1
                if (byte[0] & 0xF0) in SYNC_NIBBLES:
                    candidate = position - 2
                    second = byte[0]
                    state = ScanState.VALIDATING

            else:
                rest = fileobj.read(2)
                if len(rest) < 2:
                    return
                state = ScanState.SEEKING_SYNC

                record = decode_frame_header(candidate, second, rest[0])
                if record is None:
                    self.false_syncs += 1
                    position = candidate + 1
                else:
                    yield record
                    position = candidate + record.frame_length
                fileobj.seek(position)

    def scan(self) -> ScanStatistics:
        """
        Run the scan to end of file and return the aggregates

        Returns:
            ScanStatistics; ``average_bitrate`` is None when no frame was found
        """
        statistics = ScanStatistics(start_offset=self.start_offset)
        for record in self.iter_frames():
            statistics.add(record)
        statistics.false_syncs = self.false_syncs

        if statistics.has_frames:
            self.logger.debug(
                f"Scanned {statistics.frame_count} frames from offset {self.start_offset}, "
                f"{statistics.false_syncs} false syncs"
            )
        else:
            self.logger.debug(f"No audio frames found after offset {self.start_offset}")
        return statistics
