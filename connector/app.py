"""
Guacd Connector: connection token gateway.

Usage::

    script_path=/opt/connector \\
    SPANK_ISO_NETNS_LISTENING_FD_0=use-insecure-testing-port \\
    guacd-connector guacd_rdp.json

Loads ``guacd_<protocol>.json`` and ``<protocol>_credentials`` from
``script_path``, then serves token issuance and the browser client on the
inherited socket (or on its own port in testing mode).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from flask import Flask, g, request
from werkzeug.exceptions import HTTPException
from werkzeug.routing import BaseConverter

from connector.api.assets import init_assets
from connector.api.rate_limit import init_limiter
from connector.api.responses import api_error
from connector.api.routes import api
from connector.api.validators import ValidationError
from connector.config.loader import load_gateway_config
from connector.config.models import GatewayConfig
from connector.config.settings import (
    DEFAULT_TOKEN_RATE_LIMIT,
    ENV_LISTENING_PORT,
    ENV_SCRIPT_PATH,
    get_env,
)
from connector.container import GatewayServices
from connector.domain.router import match_node_path
from connector.errors import AuthorizationError, BindError, StartupConfigError
from connector.listener import bind, select_listener
from connector.observability import ERRORS_TOTAL, init_metrics, setup_json_logging

logger = logging.getLogger("guacd-connector")


class DigitsConverter(BaseConverter):
    """Unsigned decimal path segment, kept as a string (``0080`` stays ``0080``)."""

    regex = r"[0-9]+"


# =============================================================================
# Request Hooks
# =============================================================================

def match_route() -> None:
    """Classify the request path; routes needing a node read ``g.route``."""
    g.route = match_node_path(request.path)


# =============================================================================
# Error Handlers
# =============================================================================

def handle_validation_error(e: ValidationError) -> tuple:
    """Handle validation errors."""
    return api_error(str(e), 400)


def handle_authorization_error(e: AuthorizationError) -> tuple:
    """Handle a bad or missing authtoken."""
    return api_error(str(e), 403)


def handle_not_found(e: Exception) -> tuple:
    """Handle 404 errors."""
    return api_error("Resource not found", 404)


def handle_method_not_allowed(e: HTTPException) -> tuple:
    """Outside a node base path the catch-all asset rule is the only match: answer 404."""
    if g.get("route") is None:
        return handle_not_found(e)
    return api_error(e.description or e.name, 405)


def handle_http_error(e: HTTPException) -> tuple:
    """Handle other HTTP errors (405, 400 from Werkzeug...)."""
    return api_error(e.description or e.name, e.code or 500)


def handle_server_error(e: Exception) -> tuple:
    """Handle 500 errors without leaking details."""
    ERRORS_TOTAL.labels(endpoint=request.endpoint or "unknown").inc()
    route = g.get("route")
    extra = {"server": route.route_key.server, "port": route.route_key.port} if route else {}
    logger.error(f"Internal server error: {type(e).__name__}", extra=extra)
    return api_error("Internal server error", 500)


# =============================================================================
# Application Factory
# =============================================================================

def create_app(config: GatewayConfig, public_dir: str | Path | None = None) -> Flask:
    """
    Build the Flask application for one loaded configuration.

    Every route, static rule and hook is registered here, once.

    Args:
        config: Loaded gateway configuration
        public_dir: Directory of the browser client (defaults to the bundled one)

    Returns:
        Configured Flask app
    """
    app = Flask(__name__, static_folder=None)
    app.config["TOKEN_RATE_LIMIT"] = get_env("TOKEN_RATE_LIMIT", DEFAULT_TOKEN_RATE_LIMIT)
    app.extensions["gateway"] = GatewayServices(config)
    app.url_map.converters["digits"] = DigitsConverter

    # Route matching runs before the rate limiter so every hook sees g.route
    app.before_request(match_route)
    init_limiter(app)
    init_metrics(app)

    app.register_blueprint(api)
    init_assets(app, public_dir)

    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(AuthorizationError, handle_authorization_error)
    app.register_error_handler(404, handle_not_found)
    app.register_error_handler(405, handle_method_not_allowed)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_server_error)

    return app


# =============================================================================
# Entry Point
# =============================================================================

def main(argv: Sequence[str] | None = None) -> int:
    """Load configuration, bind the listener and serve until interrupted."""
    argv = sys.argv[1:] if argv is None else argv
    setup_json_logging(level=get_env("LOG_LEVEL", "INFO") or "INFO")

    config_file = argv[0] if argv else None
    extra = {"config_file": config_file}
    logger.info(f"{ENV_LISTENING_PORT}: {os.environ.get(ENV_LISTENING_PORT)}", extra=extra)
    logger.info(f"{ENV_SCRIPT_PATH}: {os.environ.get(ENV_SCRIPT_PATH)}", extra=extra)

    try:
        config = load_gateway_config(argv, os.environ)
    except StartupConfigError as e:
        logger.error(f"Error reading configuration: {e}", extra=extra)
        return 1

    logger.info(
        f"Serving {config.connection.protocol_type} tokens for guacd port {config.connection.guacd_port}",
        extra=extra,
    )

    try:
        spec = select_listener(os.environ)
        server = bind(spec, create_app(config))
    except BindError as e:
        logger.error(f"Error starting server: {e}", extra=extra)
        return 1

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down", extra=extra)
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
