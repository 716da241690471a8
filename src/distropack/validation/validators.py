"""
Validation functions for command-line arguments and configuration values.
"""

import re
from typing import Any, List, Optional

from .exceptions import ValidationError

# Build targets the service accepts for single-target builds.
BUILD_TARGETS = ["deb", "rpm", "pacman"]

MIN_TOKEN_LENGTH = 20


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a non-negative float within bounds.

    Raises:
        ValidationError: If validation fails
    """
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_package_id(value: Any, field_name: str = "package_id") -> str:
    """
    Validate a package identifier.

    Package ids are numeric on the service side; the validated value is
    returned as its canonical decimal string for use in query parameters.
    """
    if isinstance(value, str):
        value = value.strip()
    return str(validate_positive_integer(value, min_value=1, field_name=field_name))


def validate_non_empty(value: Any, field_name: str = "value") -> str:
    """Validate that a value is a non-blank string and return it stripped."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value
        )
    return value.strip()


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Returns:
        The matching choice as spelled in ``choices``

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value in choices:
            return str_value
    else:
        for choice in choices:
            if choice.lower() == str_value.lower():
                return choice

    raise ValidationError(
        f"{field_name} must be one of {choices}, got {value}",
        field_name=field_name,
        value=value
    )


def validate_build_target(value: Optional[str], field_name: str = "target") -> Optional[str]:
    """Validate an optional build target; None means all enabled targets."""
    if value is None:
        return None
    return validate_enum_choice(value, BUILD_TARGETS, field_name=field_name, case_sensitive=False)


def validate_base_url(url: Any, field_name: str = "base_url") -> str:
    """
    Validate a service base URL.

    Returns:
        The URL without trailing slashes

    Raises:
        ValidationError: If the URL is empty or not http(s)
    """
    url = validate_non_empty(url, field_name=field_name)
    if not re.match(r'^https?://[^/\s]+', url):
        raise ValidationError(
            f"{field_name} must start with http:// or https://, got {url}",
            field_name=field_name,
            value=url
        )
    return url.rstrip("/")


def is_valid_token_format(token: str) -> bool:
    """Basic sanity check: tokens are non-empty and reasonably long."""
    return bool(token) and len(token) >= MIN_TOKEN_LENGTH
