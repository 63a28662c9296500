"""
Static assets of the browser client.

The same directory is served under every node base path
(``/node/<server>/<port>/<file>``) and at the document root. Both rules
are added once by the application factory; nothing is registered while
handling requests.
"""

from __future__ import annotations

from pathlib import Path

from flask import Flask, Response, current_app, send_from_directory

DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


def node_asset(server: str, port: str, filename: str) -> Response:
    """Serve an asset relative to a node base path."""
    return send_from_directory(current_app.config["PUBLIC_DIR"], filename)


def root_asset(filename: str) -> Response:
    """Serve an asset when the path does not address a node."""
    return send_from_directory(current_app.config["PUBLIC_DIR"], filename)


def init_assets(app: Flask, public_dir: str | Path | None = None) -> None:
    """Register the static asset rules on the app."""
    app.config["PUBLIC_DIR"] = str(public_dir or DEFAULT_PUBLIC_DIR)
    app.add_url_rule(
        "/node/<server>/<digits:port>/<path:filename>",
        endpoint="node_asset",
        view_func=node_asset,
    )
    app.add_url_rule("/<path:filename>", endpoint="root_asset", view_func=root_asset)
