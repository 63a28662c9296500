"""
Input validation functions for the API.
"""

from __future__ import annotations

from typing import Any

MAX_DIMENSION = 16384


class ValidationError(Exception):
    """Raised when input validation fails."""
    pass


def validate_token_request(data: Any) -> dict[str, Any]:
    """
    Normalize the body of a token request.

    A missing, unparsable or non-object body carries no authtoken, so it
    becomes an empty dict and fails authorization with 403 rather than 400.

    Args:
        data: Parsed JSON body (None when missing or not JSON)

    Returns:
        The body as a dict
    """
    if not isinstance(data, dict):
        return {}
    return data


def validate_dimension(value: Any, name: str) -> int | None:
    """
    Validate a requested display dimension.

    Accepts integers and decimal strings; ``None`` and empty strings
    mean "not supplied".

    Args:
        value: Raw value from the request body
        name: Field name, for error messages

    Returns:
        The dimension as int, or None if not supplied

    Raises:
        ValidationError: If the value is not a positive integer
    """
    if value is None or value == "":
        return None

    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a positive integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        number = int(value.strip())
    else:
        raise ValidationError(f"{name} must be a positive integer")

    if number <= 0:
        raise ValidationError(f"{name} must be a positive integer")
    if number > MAX_DIMENSION:
        raise ValidationError(f"{name} exceeds maximum of {MAX_DIMENSION}")
    return number
