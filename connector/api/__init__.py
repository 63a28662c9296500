"""API module for Flask routes and helpers."""

from connector.api.validators import (
    ValidationError,
    validate_dimension,
    validate_token_request,
)
from connector.api.responses import api_error, token_response
from connector.api.auth import authenticate, require_authtoken

__all__ = [
    "ValidationError",
    "validate_dimension",
    "validate_token_request",
    "api_error",
    "token_response",
    "authenticate",
    "require_authtoken",
]
