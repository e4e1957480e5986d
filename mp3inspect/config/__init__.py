"""
Configuration package
Settings loaded from YAML files and environment variables
"""

from .settings import (
    Settings,
    ID3Config,
    ScanConfig,
    OutputConfig,
    LoggingConfig,
    get_settings,
    reload_settings,
    FRAME_SIZE_MODES,
    ENCODING_POLICIES,
    OUTPUT_FORMATS
)

__all__ = [
    'Settings',
    'ID3Config',
    'ScanConfig',
    'OutputConfig',
    'LoggingConfig',
    'get_settings',
    'reload_settings',
    'FRAME_SIZE_MODES',
    'ENCODING_POLICIES',
    'OUTPUT_FORMATS'
]
