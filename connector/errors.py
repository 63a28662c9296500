"""
Exception hierarchy for the connector.

Startup errors are fatal and end the process; request errors are turned
into JSON responses by the Flask error handlers in ``connector.app``.
"""


class ConnectorError(Exception):
    """Base class for connector errors."""


class StartupConfigError(ConnectorError):
    """Bad arguments, unreadable or invalid configuration files."""


class BindError(ConnectorError):
    """The listening socket could not be set up."""


class AuthorizationError(ConnectorError):
    """The presented authtoken is missing or does not match."""


class EncodingError(ConnectorError):
    """A descriptor could not be serialized or encrypted."""


class DecodingError(ConnectorError):
    """A token could not be decoded or decrypted."""
