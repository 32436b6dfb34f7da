"""
Shared validators for input sanitization.

Functions here raise ValueError; callers translate it into the HTTP
exception that fits their context (see options_api.services.validation).
"""

import re
from typing import Optional

# Control characters are never valid in option labels
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def clean_text(
    value: Optional[str],
    *,
    field: str,
    max_length: int,
    required: bool = False,
) -> Optional[str]:
    """
    Strip and validate a free-text field.

    Args:
        value: Raw value (can be None)
        field: Field name used in error messages
        max_length: Maximum length after stripping
        required: If True, None or blank values are rejected

    Returns:
        The stripped value, or None for an empty optional field

    Raises:
        ValueError: If the value is missing, too long or contains control characters
    """
    if value is None:
        if required:
            raise ValueError(f"{field} is mandatory")
        return None

    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")

    value = value.strip()
    if not value:
        if required:
            raise ValueError(f"{field} is mandatory")
        return None

    if len(value) > max_length:
        raise ValueError(f"{field} cannot exceed {max_length} characters")

    if _CONTROL_CHARS.search(value):
        raise ValueError(f"{field} contains invalid characters")

    return value


def validate_pattern(value: str, pattern: str, message: str) -> str:
    """
    Check that the whole value matches a regular expression.

    Raises:
        ValueError: With the given message when the value does not match
    """
    if re.fullmatch(pattern, value) is None:
        raise ValueError(message)
    return value


def dedupe_preserving_order(values: list) -> list:
    """Drop repeated values, keeping the first occurrence of each."""
    seen = set()
    result = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result
