"""
Flask API routes for the connector.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, abort, current_app, g, jsonify, request, send_from_directory

from connector.api.audit import audit_log_response
from connector.api.auth import require_authtoken
from connector.api.rate_limit import limiter, token_limit
from connector.api.responses import api_error, token_response
from connector.api.validators import validate_dimension, validate_token_request
from connector.container import get_gateway
from connector.domain.descriptor import build_descriptor
from connector.domain.types import RouteMatch
from connector.errors import EncodingError
from connector.observability import ERRORS_TOTAL, TOKENS_ISSUED, TOKEN_ENCRYPT_DURATION

logger = logging.getLogger("guacd-connector")

# Type alias for Flask route returns
RouteResponse = tuple[Response, int]

ENTRY_DOCUMENT = "index.html"

# Create Blueprint
api = Blueprint("api", __name__)
api.after_request(audit_log_response)


def _require_route() -> RouteMatch:
    """Return the node matched for this request, or answer 404."""
    route = g.get("route")
    if route is None:
        abort(404)
    return route


# =============================================================================
# Health
# =============================================================================

@api.route("/health")
@limiter.exempt
def health() -> RouteResponse:
    """Health check endpoint."""
    config = get_gateway().config
    return jsonify({
        "status": "healthy",
        "protocol": config.protocol,
        "connection_type": config.connection.protocol_type,
    }), 200


# =============================================================================
# Node routes
# =============================================================================

@api.route("/node/<server>/<digits:port>/getToken", methods=["POST"])
@limiter.limit(token_limit)
def get_token(server: str, port: str) -> RouteResponse:
    """Issue an encrypted connection token for a node."""
    route = _require_route()
    gateway = get_gateway()
    credentials = gateway.config.credentials

    body = validate_token_request(request.get_json(silent=True))

    require_authtoken(body, credentials, request.remote_addr)

    width = validate_dimension(body.get("width"), "width")
    height = validate_dimension(body.get("height"), "height")
    descriptor = build_descriptor(gateway.config.connection, credentials, width, height)

    try:
        with TOKEN_ENCRYPT_DURATION.time():
            token = gateway.codec.encrypt(descriptor)
    except EncodingError as e:
        ERRORS_TOTAL.labels(endpoint="get_token").inc()
        logger.error(
            f"Error generating token: {e}",
            extra={"server": route.route_key.server, "port": route.route_key.port},
        )
        return api_error("Failed to generate token", 500)

    TOKENS_ISSUED.inc()
    logger.info(
        f"Issued {descriptor.type} token for node {route.route_key.server}:{route.route_key.port}",
        extra={"server": route.route_key.server, "port": route.route_key.port},
    )
    return token_response(token)


@api.route("/node/<server>/<digits:port>/")
def node_index(server: str, port: str) -> Response:
    """Serve the client entry document for a node."""
    _require_route()
    return send_from_directory(current_app.config["PUBLIC_DIR"], ENTRY_DOCUMENT)
