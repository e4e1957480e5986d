# mp3inspect/utils/__init__.py
"""
Utilities package
Common helpers, logging, and validation functions
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    OperationLogger,
    create_operation_logger,
    log_performance,
    get_current_log_file
)
from .helpers import (
    format_duration,
    format_file_size,
    format_bitrate,
    expand_file_patterns,
    truncate_string
)
from .validation import (
    validate_encoding_name,
    validate_choice
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'OperationLogger',
    'create_operation_logger',
    'log_performance',
    'get_current_log_file',

    # Helper exports
    'format_duration',
    'format_file_size',
    'format_bitrate',
    'expand_file_patterns',
    'truncate_string',

    # Validation exports
    'validate_encoding_name',
    'validate_choice'
]
