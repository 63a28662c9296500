"""
Guacd Connector: connection token gateway for guacd remote desktop sessions.

This service sits in front of a guacamole-lite style tunnel:
- Routes requests for many backend nodes through ``/node/<server>/<port>/``
- Authorizes callers against a per-protocol shared secret
- Builds the connection descriptor (protocol, geometry, optional credentials)
- Encrypts it into the AES-256-CBC token format the tunnel decrypts
- Listens either on an inherited socket (network namespace isolation)
  or on its own port (standalone testing)
"""

__version__ = "1.0.0"
