"""
Service container for the connector.

Built once by the application factory and stored in
``app.extensions['gateway']``. Everything it holds is read-only after
startup, so request threads share it without locking.
"""

from __future__ import annotations

from flask import current_app

from connector.config.models import GatewayConfig
from connector.domain.token_codec import TokenCodec


class GatewayServices:
    """Immutable configuration plus the token codec built from it."""

    __slots__ = ("_config", "_codec")

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config
        self._codec = TokenCodec(config.credentials.key_bytes)

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def codec(self) -> TokenCodec:
        return self._codec


def get_gateway() -> GatewayServices:
    """Return the services of the current Flask application.

    Raises:
        RuntimeError: Outside an application context, or if the app was
            not built by ``create_app``.
    """
    try:
        return current_app.extensions["gateway"]
    except KeyError:
        raise RuntimeError("GatewayServices not initialized") from None
