"""
Exception classes for mp3inspect.

Header-level failures (no ID3 magic, unsupported version, truncated reads,
unreadable files) propagate out of a single-file inspection. Per-frame
failures (TranscodeFailure) are caught by the frame walker and never abort
the walk.

Exception Hierarchy:
    Mp3InspectError (base)
        NotAnID3File - No "ID3" magic at offset 0 (recoverable: ID3v1 fallback)
        UnsupportedTagVersion - Tag version is not 2.3 (strict mode only)
        TruncatedRead - File ended before the expected bytes were read
        TranscodeFailure - Text bytes could not be converted (per frame)
        FileAccessError - The file could not be opened or read
        ConfigError - Invalid configuration values

Walk termination on an unrecognized frame id, sync false positives in the
MPEG scanner and files with zero audio frames are not errors and have no
exception class.
"""

from typing import Optional


class Mp3InspectError(Exception):
    """
    Base exception for all mp3inspect errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (offsets, byte
                 counts, frame ids).

    Example:
        try:
            inspector.inspect("song.mp3")
        except Mp3InspectError as e:
            logger.error(f"Inspection failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class NotAnID3File(Mp3InspectError):
    """
    Raised when the first three bytes of a file are not "ID3".

    Recoverable: the caller is expected to try the legacy ID3v1 trailer
    instead.
    """
    pass


class UnsupportedTagVersion(Mp3InspectError):
    """
    Raised when an ID3v2 tag is not version 2.3.0 and strict version
    checking is enabled.

    Attributes:
        version: The (major, minor) version found in the header.
    """

    def __init__(self, message: str, version: tuple, details: Optional[dict] = None) -> None:
        super().__init__(message, details)
        self.version = version


class TruncatedRead(Mp3InspectError):
    """
    Raised when the file ends before a fixed-size structure could be read.

    Fatal for the current file only.

    Attributes:
        expected: Number of bytes requested.
        received: Number of bytes actually available.
    """

    def __init__(
        self,
        message: str,
        expected: int,
        received: int,
        details: Optional[dict] = None
    ) -> None:
        super().__init__(message, details)
        self.expected = expected
        self.received = received


class TranscodeFailure(Mp3InspectError):
    """
    Raised by the transcoder when bytes cannot be converted to text
    (unmappable bytes, truncated multi-byte sequence, unknown codec).

    The frame walker catches this per frame and skips the field.
    """
    pass


class FileAccessError(Mp3InspectError):
    """Raised when an input file cannot be opened or read."""
    pass


class ConfigError(Mp3InspectError):
    """
    Raised when configuration values are invalid.

    Example:
        raise ConfigError(
            "Unknown frame size mode 'octal'",
            details={'field': 'id3.frame_size_mode', 'value': 'octal'}
        )
    """
    pass
