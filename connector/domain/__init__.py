"""Domain module: routing, descriptors and the token codec."""

from connector.domain.types import RouteKey, RouteMatch, ConnectionDescriptor
from connector.domain.router import match_node_path, base_path_for
from connector.domain.descriptor import build_descriptor, resolve_dimensions
from connector.domain.token_codec import EncryptedToken, TokenCodec

__all__ = [
    "RouteKey",
    "RouteMatch",
    "ConnectionDescriptor",
    "match_node_path",
    "base_path_for",
    "build_descriptor",
    "resolve_dimensions",
    "EncryptedToken",
    "TokenCodec",
]
