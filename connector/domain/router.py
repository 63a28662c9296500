"""
Node path routing.

One connector process fronts many backend nodes; the node is encoded in
the request path as ``/node/<server>/<port>/...``.
"""

from __future__ import annotations

from connector.config.settings import NODE_PATH_PATTERN
from connector.domain.types import RouteKey, RouteMatch


def match_node_path(path: str | None) -> RouteMatch | None:
    """
    Match a request path against the node pattern.

    Args:
        path: Request path (without query string)

    Returns:
        RouteMatch with the RouteKey and canonical base path,
        or None when the path does not address a node.
    """
    if not path:
        return None
    match = NODE_PATH_PATTERN.match(path)
    if not match:
        return None

    server = match.group("server")
    port = match.group("port")
    return RouteMatch(
        route_key=RouteKey(server=server, port=port),
        base_path=base_path_for(server, port),
    )


def base_path_for(server: str, port: str) -> str:
    """Canonical base path of a node, without trailing slash."""
    return f"/node/{server}/{port}"
