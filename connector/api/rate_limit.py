"""
Rate limiting for token issuance.

Uses Flask-Limiter with in-memory storage: a single connector process
serves one protocol, so there is nothing to share between workers.
"""

from flask import Flask, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from connector.api.responses import api_error
from connector.config.settings import DEFAULT_TOKEN_RATE_LIMIT

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
)


def token_limit() -> str:
    """Per-client limit for getToken, read from the app config."""
    return current_app.config.get("TOKEN_RATE_LIMIT", DEFAULT_TOKEN_RATE_LIMIT)


def init_limiter(app: Flask) -> None:
    """Attach the limiter to the Flask app."""
    app.config.setdefault("TOKEN_RATE_LIMIT", DEFAULT_TOKEN_RATE_LIMIT)
    limiter.init_app(app)

    @app.errorhandler(429)
    def rate_limit_handler(e):
        return api_error("Rate limit exceeded. Try again later.", 429)
