"""
MPEG audio scan package

Frame synchronizer and statistics for the audio region of an MP3 file.
"""

from .models import AudioFrameRecord, ScanStatistics, ScanState, SAMPLES_PER_FRAME
from .scanner import (
    MpegFrameScanner,
    decode_frame_header,
    compute_frame_length,
    BITRATE_TABLE,
    SAMPLE_RATE_TABLE
)

__all__ = [
    'AudioFrameRecord',
    'ScanStatistics',
    'ScanState',
    'SAMPLES_PER_FRAME',
    'MpegFrameScanner',
    'decode_frame_header',
    'compute_frame_length',
    'BITRATE_TABLE',
    'SAMPLE_RATE_TABLE'
]
