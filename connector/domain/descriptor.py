"""
Connection descriptor construction.
"""

from __future__ import annotations

from connector.config.models import ConnectionConfig, Credentials
from connector.config.settings import DEFAULT_HEIGHT, DEFAULT_WIDTH
from connector.domain.types import ConnectionDescriptor


def resolve_dimensions(
    connection: ConnectionConfig,
    width: int | None = None,
    height: int | None = None,
) -> tuple[int, int]:
    """
    Resolve display geometry.

    Each dimension falls back independently: request value, then the
    configured default, then 1920x1080.
    """
    if width is None:
        width = connection.default_width if connection.default_width is not None else DEFAULT_WIDTH
    if height is None:
        height = connection.default_height if connection.default_height is not None else DEFAULT_HEIGHT
    return width, height


def build_descriptor(
    connection: ConnectionConfig,
    credentials: Credentials,
    width: int | None = None,
    height: int | None = None,
) -> ConnectionDescriptor:
    """
    Build the descriptor for one session.

    Args:
        connection: Loaded connection configuration
        credentials: Loaded credentials (used only if ``use_credentials``)
        width: Requested display width, or None
        height: Requested display height, or None

    Returns:
        ConnectionDescriptor with the configured settings, the resolved
        width/height and, when enabled, username/password.
    """
    width, height = resolve_dimensions(connection, width, height)

    settings = dict(connection.settings)
    # Geometry goes last so configured settings cannot override it
    settings["width"] = width
    settings["height"] = height

    # Absent and blank mean different things to guacd: never emit
    # placeholder values, and only emit credentials when enabled.
    for name in ("username", "password"):
        settings.pop(name, None)
        if connection.use_credentials:
            value = getattr(credentials, name)
            if value is not None:
                settings[name] = value

    return ConnectionDescriptor(type=connection.protocol_type, settings=settings)
