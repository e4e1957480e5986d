"""
Utility functions and helpers for mp3inspect
Formatting of report values and expansion of file patterns
"""

import glob
from pathlib import Path
from typing import List, Optional, Tuple, Union


def format_duration(seconds: Union[int, float]) -> str:
    """
    Format duration in seconds to human-readable string

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0:
        return "0:00"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    else:
        return f"{minutes}:{secs:02d}"


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable string

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    if size_bytes < 0:
        return "0 B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    size = float(size_bytes)
    unit_index = 0

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    else:
        return f"{size:.1f} {units[unit_index]}"


def format_bitrate(bits_per_second: Optional[float]) -> str:
    """
    Format a bitrate in bits/second as kbps

    Args:
        bits_per_second: Bitrate, or None when unknown

    Returns:
        Formatted bitrate such as "128 kbps" or "n/a"
    """
    if bits_per_second is None:
        return "n/a"

    kbps = bits_per_second / 1000
    if kbps == int(kbps):
        return f"{int(kbps)} kbps"
    return f"{kbps:.1f} kbps"


def expand_file_patterns(patterns: List[str]) -> Tuple[List[Path], List[str]]:
    """
    Expand shell-style glob patterns into file paths

    Patterns are expanded independently and in order; a pattern that matches
    nothing is reported back instead of aborting the whole expansion. A
    literal path to an existing file is returned as-is even if it contains
    glob metacharacters.

    Args:
        patterns: File names or glob patterns (``~`` is expanded)

    Returns:
        Tuple of (matched file paths without duplicates, patterns with no match)
    """
    files: List[Path] = []
    unmatched: List[str] = []
    seen = set()

    for pattern in patterns:
        expanded = str(Path(pattern).expanduser())

        if Path(expanded).is_file():
            matches = [expanded]
        else:
            matches = sorted(m for m in glob.glob(expanded) if Path(m).is_file())

        if not matches:
            unmatched.append(pattern)
            continue

        for match in matches:
            path = Path(match)
            if path not in seen:
                seen.add(path)
                files.append(path)

    return files, unmatched


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate string to maximum length

    Args:
        text: Text to truncate
        max_length: Maximum length including suffix
        suffix: Suffix appended when truncated

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix
