"""
Typed data structures for the connector domain.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RouteKey:
    """Backend node addressed by a ``/node/<server>/<port>/`` path."""

    server: str
    port: str


@dataclass(frozen=True)
class RouteMatch:
    """Result of matching a request path against the node pattern."""

    route_key: RouteKey
    base_path: str


@dataclass
class ConnectionDescriptor:
    """Plaintext description of one remote desktop session."""

    type: str
    settings: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Return the structure the tunnel expects inside the token."""
        return {"connection": {"type": self.type, "settings": copy.deepcopy(self.settings)}}

    @classmethod
    def from_payload(cls, data: Any) -> ConnectionDescriptor:
        """
        Rebuild a descriptor from a decrypted token payload.

        Raises:
            ValueError: If the payload does not have the expected shape
        """
        if not isinstance(data, dict) or not isinstance(data.get("connection"), dict):
            raise ValueError("payload has no 'connection' object")
        connection = data["connection"]
        conn_type = connection.get("type")
        settings = connection.get("settings", {})
        if not isinstance(conn_type, str) or not isinstance(settings, dict):
            raise ValueError("connection must have a string 'type' and a 'settings' object")
        return cls(type=conn_type, settings=settings)
