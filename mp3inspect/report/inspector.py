"""
Per-file inspection sessions

The Inspector runs the full pipeline for one file:

    TagHeaderReader -> FrameWalker -> TagFooterReader -> MpegFrameScanner

One call opens one file handle, which is closed on every exit path. Files
without an ID3v2 header fall back to the ID3v1 trailer and are scanned for
audio from offset 0. With a header, the audio scan always starts at
``TagHeader.size + 10``, however far the frame walk got.

Error contract:
- ``inspect()`` raises Mp3InspectError subclasses for header-level and I/O
  failures of the file.
- ``inspect_many()`` turns those into FAILED results so one bad file never
  stops a batch.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional, Union

from ..config.settings import Settings, get_settings
from ..exceptions import ConfigError, FileAccessError, Mp3InspectError, NotAnID3File
from ..id3.encoding import Transcoder
from ..id3.frames import FrameWalker, WalkerConfig
from ..id3.header import read_exact, read_tag_footer, read_tag_header
from ..id3.legacy import read_legacy_tag
from ..id3.models import (
    DecodedField,
    EncodingPolicy,
    FrameSizeMode,
    TagFooter,
    TagHeader,
    WalkTermination,
)
from ..mpeg.models import ScanStatistics
from ..mpeg.scanner import MpegFrameScanner
from ..utils.logger import get_logger, log_performance


class InspectionStatus(Enum):
    """What kind of tag a file turned out to have"""
    ID3V2 = "id3v2"
    LEGACY = "id3v1"
    NO_TAG = "no_tag"
    FAILED = "failed"


@dataclass
class InspectionResult:
    """Everything recovered from one file"""
    path: Optional[Path]
    status: InspectionStatus
    header: Optional[TagHeader] = None
    footer: Optional[TagFooter] = None
    fields: List[DecodedField] = field(default_factory=list)
    termination: Optional[WalkTermination] = None
    statistics: Optional[ScanStatistics] = None
    error: Optional[Mp3InspectError] = None

    @property
    def ok(self) -> bool:
        return self.status is not InspectionStatus.FAILED


@dataclass
class InspectorOptions:
    """Explicit options for an Inspector; built from Settings by the factory"""
    strict_version: bool = False
    walker: WalkerConfig = field(default_factory=WalkerConfig)
    check_footer: bool = True
    fallback_to_id3v1: bool = True
    scan_audio: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "InspectorOptions":
        """
        Translate application settings into inspector options

        Raises:
            ConfigError: If a mode or policy name is unknown
        """
        id3 = settings.id3
        try:
            frame_size_mode = FrameSizeMode(id3.frame_size_mode)
            encoding_policy = EncodingPolicy(id3.encoding_policy)
        except ValueError as e:
            raise ConfigError(f"Invalid ID3 configuration: {e}")

        return cls(
            strict_version=bool(id3.strict_version),
            walker=WalkerConfig(
                frame_size_mode=frame_size_mode,
                encoding_policy=encoding_policy,
                legacy_encoding=id3.legacy_encoding,
                emit_unlabeled=bool(id3.emit_unlabeled),
            ),
            check_footer=bool(id3.check_footer),
            fallback_to_id3v1=bool(id3.fallback_to_id3v1),
            scan_audio=bool(settings.scan.enabled),
        )


class Inspector:
    """
    Runs inspection sessions with fixed options

    Args:
        options: Inspection options, defaults to InspectorOptions()
        transcoder: Optional replacement for the text transcoder
    """

    def __init__(self, options: Optional[InspectorOptions] = None, transcoder: Optional[Transcoder] = None):
        self.options = options or InspectorOptions()
        self.transcoder = transcoder
        self.logger = get_logger(__name__)

    @log_performance
    def inspect(self, path: Union[str, Path]) -> InspectionResult:
        """
        Inspect one file

        Args:
            path: Path of the MP3 file

        Returns:
            InspectionResult with status ID3V2, LEGACY or NO_TAG

        Raises:
            FileAccessError: The file cannot be opened or read
            TruncatedRead: The file ends inside the tag header or body
            UnsupportedTagVersion: Version mismatch with strict_version
        """
        path = Path(path)
        self.logger.info(f"Inspecting {path}")
        try:
            with open(path, 'rb') as fileobj:
                return self.inspect_fileobj(fileobj, path)
        except OSError as e:
            raise FileAccessError(
                f"Cannot read {path}: {e.strerror or e}",
                details={'path': str(path), 'original_error': repr(e)}
            )

    def inspect_fileobj(self, fileobj: BinaryIO, path: Optional[Path] = None) -> InspectionResult:
        """
        Inspect an already opened, seekable binary file object

        The caller keeps ownership of ``fileobj``.
        """
        options = self.options

        try:
            header = read_tag_header(fileobj, strict_version=options.strict_version)
        except NotAnID3File:
            self.logger.info(f"{path}: no ID3v2 tag")
            result = self._read_legacy(fileobj, path)
            audio_offset = 0
        else:
            result = InspectionResult(path=path, status=InspectionStatus.ID3V2, header=header)

            body = read_exact(fileobj, header.size, "ID3 tag body")
            walker = FrameWalker(options.walker.with_header(header), self.transcoder)
            walk = walker.walk(body)
            result.fields = walk.fields
            result.termination = walk.termination
            self.logger.debug(
                f"{path}: {walk.frames_seen} frames, {len(walk.fields)} fields, "
                f"stopped at {walk.offset} ({walk.termination.value})"
            )

            if options.check_footer:
                result.footer = read_tag_footer(fileobj, header.size)

            audio_offset = header.audio_offset

        if options.scan_audio:
            result.statistics = MpegFrameScanner(fileobj, audio_offset).scan()

        return result

    def _read_legacy(self, fileobj: BinaryIO, path: Optional[Path]) -> InspectionResult:
        result = InspectionResult(path=path, status=InspectionStatus.NO_TAG)
        if not self.options.fallback_to_id3v1:
            return result

        legacy = read_legacy_tag(fileobj, self.transcoder, self.options.walker.legacy_encoding)
        if legacy is not None:
            result.status = InspectionStatus.LEGACY
            result.fields = legacy.to_fields()
        return result

    def inspect_many(self, paths: Iterable[Union[str, Path]]) -> Iterator[InspectionResult]:
        """
        Inspect files one after another

        Failures are reported as FAILED results instead of being raised.
        """
        for path in paths:
            try:
                yield self.inspect(path)
            except Mp3InspectError as e:
                self.logger.error(f"{path}: {e}")
                yield InspectionResult(path=Path(path), status=InspectionStatus.FAILED, error=e)


# Global inspector instance for singleton pattern
_inspector: Optional[Inspector] = None


def get_inspector() -> Inspector:
    """
    Get the global inspector configured from the current settings

    Returns:
        Shared Inspector instance

    Raises:
        ConfigError: If the settings hold an unknown mode or policy
    """
    global _inspector
    if _inspector is None:
        _inspector = Inspector(InspectorOptions.from_settings(get_settings()))
    return _inspector


def reset_inspector() -> None:
    """Drop the global inspector so the next call picks up changed settings"""
    global _inspector
    _inspector = None
