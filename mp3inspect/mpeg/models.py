"""
Data models for the MPEG audio frame scan
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# Every MPEG-1 Layer III frame carries 1152 samples
SAMPLES_PER_FRAME = 1152


class ScanState(Enum):
    """States of the frame synchronizer"""
    SEEKING_SYNC = "seeking_sync"
    VALIDATING = "validating"


@dataclass(frozen=True)
class AudioFrameRecord:
    """
    One accepted audio frame header

    Attributes:
        offset: File offset of the 0xFF sync byte
        is_mpeg1_layer3: Version/layer bits match MPEG-1 Layer III
        bitrate: Bits per second
        sample_rate: Hz
        padding: Padding slot present
        frame_length: Whole frame length in bytes, header included
    """
    offset: int
    is_mpeg1_layer3: bool
    bitrate: int
    sample_rate: int
    padding: bool
    frame_length: int


@dataclass
class ScanStatistics:
    """
    Running aggregates of one scan

    The sample rate of the first accepted frame is taken to hold for the
    whole file.
    """
    frame_count: int = 0
    bitrate_sum: int = 0
    sample_rate: Optional[int] = None
    false_syncs: int = 0
    non_layer3_frames: int = 0
    start_offset: int = 0

    def add(self, record: AudioFrameRecord) -> None:
        """Fold one accepted frame into the aggregates"""
        if self.sample_rate is None:
            self.sample_rate = record.sample_rate
        self.frame_count += 1
        self.bitrate_sum += record.bitrate
        if not record.is_mpeg1_layer3:
            self.non_layer3_frames += 1

    @property
    def has_frames(self) -> bool:
        return self.frame_count > 0

    @property
    def average_bitrate(self) -> Optional[float]:
        """Mean bitrate in bits/second, None when no frame was found"""
        if self.frame_count == 0:
            return None
        return self.bitrate_sum / self.frame_count

    @property
    def duration_seconds(self) -> Optional[float]:
        """Playing time estimated from the frame count"""
        if self.frame_count == 0 or not self.sample_rate:
            return None
        return self.frame_count * SAMPLES_PER_FRAME / self.sample_rate

    def to_dict(self) -> dict:
        return {
            'frame_count': self.frame_count,
            'sample_rate': self.sample_rate,
            'average_bitrate': self.average_bitrate,
            'duration_seconds': self.duration_seconds,
            'false_syncs': self.false_syncs,
            'non_layer3_frames': self.non_layer3_frames,
            'start_offset': self.start_offset,
        }
