"""
API response helpers.

The tunnel's browser client reads ``token`` and ``error`` at the top
level of the JSON body, so responses are not wrapped in an envelope.
"""

from typing import Any

from flask import jsonify, Response


def token_response(token: str) -> tuple[Response, int]:
    """
    Create the token issuance response.

    Args:
        token: Encoded token string

    Returns:
        Tuple of (response, status_code)
    """
    response = jsonify({"token": token})
    response.headers["Cache-Control"] = "no-store"
    return response, 200


def api_error(message: str, status_code: int = 400, details: Any = None) -> tuple[Response, int]:
    """
    Create a standardized error API response.

    Args:
        message: Error message
        status_code: HTTP status code
        details: Optional error details

    Returns:
        Tuple of (response, status_code)
    """
    response = {"error": message}
    if details:
        response["details"] = details
    return jsonify(response), status_code
