"""
mp3inspect: read-only inspector for MP3 containers
Recovers ID3v2.3 tag fields and coarse MPEG audio statistics from MP3 files.

## Project Overview

An MP3 file is usually two regions glued together: an ID3v2 tag block at the
front carrying metadata (title, album, performer...) and a long run of MPEG
audio frames. mp3inspect walks both regions and reports what it finds,
without ever writing to the file.

## Core Architecture

**ID3 Layer (`mp3inspect/id3/`)**
- Synchsafe integer decoding for tag and frame sizes
- Tag header and footer readers with magic/version validation
- Frame walker that decodes text frames through a pluggable transcoder
- Legacy ID3v1 trailer fallback for files without an ID3v2 tag

**MPEG Layer (`mp3inspect/mpeg/`)**
- Frame synchronizer that scans raw bytes for sync words
- Header validation against the MPEG-1 Layer III bit layout
- Running statistics: frame count, sample rate, average bitrate

**Reporting (`mp3inspect/report/`)**
- Inspector that runs one parse session per file
- Report emitter for plain text and YAML output

**Configuration and Utilities (`mp3inspect/config/`, `mp3inspect/utils/`)**
- YAML and environment variable configuration
- Console/file logging with colored output
- Formatting and input validation helpers

## Quick Start
```bash
pip install -e .

mp3inspect inspect "~/Music/*.mp3"
mp3inspect inspect song.mp3 --format yaml
mp3inspect inspect old.mp3 --legacy-encoding cp1252
```

## Encoding Policy

Many real-world files mark their text as ISO-8859-1 (selector byte 0) while
actually storing a regional code page. By default mp3inspect decodes those
bytes with a configurable regional codec (GB18030) instead of Latin-1. Use
`--encoding-policy strict` to follow the ID3 rules to the letter.
"""

# Version information for the mp3inspect package
__version__ = "0.4.0"

__author__ = "mp3inspect developers"

__description__ = "Inspect ID3v2.3 tags and MPEG audio frame statistics of MP3 files"

__all__ = [
    "__version__",
    "__author__",
    "__description__"
]
