"""
Input validation utilities
"""
import codecs
from typing import Optional, List, Tuple


def validate_encoding_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a codec name for the regional legacy encoding

    Args:
        name: Codec name such as "gb18030" or "cp1251"

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name:
        return False, "Encoding name cannot be empty"

    try:
        codecs.lookup(name)
    except LookupError:
        return False, f"Unknown text encoding: {name}"

    return True, None


def validate_choice(value: str, choices: List[str], what: str) -> Tuple[bool, Optional[str]]:
    """
    Validate that a value is one of the allowed choices

    Args:
        value: Value to check
        choices: Allowed values
        what: Description used in the error message

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not value:
        return False, f"{what.capitalize()} cannot be empty"

    if value not in choices:
        return False, f"Invalid {what}: {value}. Valid options: {', '.join(choices)}"

    return True, None
