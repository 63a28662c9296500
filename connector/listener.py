"""
Listening socket selection.

Two modes, picked once at startup from ``SPANK_ISO_NETNS_LISTENING_FD_0``:

- inherited fd: a namespace isolation launcher created, bound and put the
  socket in listening state; we attach to it as-is.
- port mode (``use-insecure-testing-port``): we open our own socket on
  ``SPANK_ISO_NETNS_LISTENING_PORT_0`` (default 8080).

Failures are configuration errors: they raise BindError and the process
exits, there is no retry.
"""

from __future__ import annotations

import enum
import logging
import os
import socket
from dataclasses import dataclass
from typing import Mapping

from werkzeug.serving import BaseWSGIServer, make_server

from connector.config.settings import (
    DEFAULT_LISTENING_PORT,
    ENV_LISTENING_FD,
    ENV_LISTENING_PORT,
    INSECURE_TESTING_PORT,
)
from connector.errors import BindError

logger = logging.getLogger("guacd-connector")

SUPPORTED_FAMILIES = (socket.AF_INET, socket.AF_INET6)


class ListenMode(enum.Enum):
    PORT = "port"
    INHERITED_FD = "inherited_fd"


@dataclass(frozen=True)
class ListenerSpec:
    """Where to listen; exactly one of ``port`` / ``fd`` is meaningful."""

    mode: ListenMode
    port: int | None = None
    fd: int | None = None
    host: str = ""


def _parse_port(raw: str | None) -> int:
    # Unset or unparsable falls back to the default, like the launcher scripts expect
    if raw is None or not raw.strip():
        return DEFAULT_LISTENING_PORT
    try:
        port = int(raw, 10)
    except ValueError:
        logger.warning(f"{ENV_LISTENING_PORT}={raw!r} is not a number, using {DEFAULT_LISTENING_PORT}")
        return DEFAULT_LISTENING_PORT
    if not 0 <= port <= 65535:
        raise BindError(f"{ENV_LISTENING_PORT}={raw!r} is out of range")
    return port


def select_listener(environ: Mapping[str, str]) -> ListenerSpec:
    """
    Decide the listening mode from the environment.

    Raises:
        BindError: If the descriptor value is missing or invalid
    """
    raw_fd = environ.get(ENV_LISTENING_FD)
    logger.info(f"{ENV_LISTENING_FD}: {raw_fd}")

    if raw_fd == INSECURE_TESTING_PORT:
        return ListenerSpec(mode=ListenMode.PORT, port=_parse_port(environ.get(ENV_LISTENING_PORT)))

    if raw_fd is None or not raw_fd.strip():
        raise BindError(f"{ENV_LISTENING_FD} is not set; no listening socket was passed in")
    try:
        fd = int(raw_fd, 10)
    except ValueError:
        raise BindError(f"Invalid file descriptor value: {raw_fd!r}") from None
    if fd < 0:
        raise BindError(f"Invalid file descriptor value: {raw_fd!r}")
    return ListenerSpec(mode=ListenMode.INHERITED_FD, fd=fd)


def _attach_inherited(fd: int) -> socket.socket:
    # Work on a duplicate so a failed check never closes the launcher's fd
    try:
        dup_fd = os.dup(fd)
    except OSError as e:
        raise BindError(f"File descriptor {fd} is not open: {e.strerror or e}") from e
    try:
        sock = socket.socket(fileno=dup_fd)
    except OSError as e:
        os.close(dup_fd)
        raise BindError(f"File descriptor {fd} is not a usable socket: {e.strerror or e}") from e

    try:
        if sock.family not in SUPPORTED_FAMILIES:
            raise BindError(f"File descriptor {fd} has unsupported address family {sock.family!r}")
        if sock.type != socket.SOCK_STREAM:
            raise BindError(f"File descriptor {fd} is not a stream socket")
        if not sock.getsockopt(socket.SOL_SOCKET, socket.SO_ACCEPTCONN):
            raise BindError(f"File descriptor {fd} is not in listening state")
    except BindError:
        sock.close()
        raise
    except OSError as e:
        sock.close()
        raise BindError(f"Cannot inspect file descriptor {fd}: {e.strerror or e}") from e
    return sock


def _open_port(host: str, port: int) -> socket.socket:
    try:
        return socket.create_server((host, port), reuse_port=False)
    except OSError as e:
        raise BindError(f"Cannot listen on port {port}: {e.strerror or e}") from e


def open_listener(spec: ListenerSpec) -> socket.socket:
    """
    Return a listening socket for the selected mode.

    Raises:
        BindError: If the socket cannot be created or attached
    """
    if spec.mode is ListenMode.PORT:
        assert spec.port is not None
        return _open_port(spec.host, spec.port)
    assert spec.fd is not None
    return _attach_inherited(spec.fd)


def make_wsgi_server(app, sock: socket.socket) -> BaseWSGIServer:
    """
    Wrap a listening socket in Werkzeug's threaded WSGI server.

    The server works on its own duplicate of the descriptor; ``sock`` is
    closed once the server holds it.
    """
    host = "::" if sock.family == socket.AF_INET6 else "0.0.0.0"
    try:
        server = make_server(host, 0, app, threaded=True, fd=sock.fileno())
    except OSError as e:
        raise BindError(f"Cannot serve on the listening socket: {e.strerror or e}") from e
    finally:
        sock.close()
    return server


def bind(spec: ListenerSpec, app) -> BaseWSGIServer:
    """``start -> bind-attempt -> listening``; raises BindError on failure."""
    sock = open_listener(spec)
    server = make_wsgi_server(app, sock)
    if spec.mode is ListenMode.PORT:
        logger.info(f"Server is running in insecure testing mode on port {server.port}")
    else:
        logger.info("Server is running on the passed-in socket.")
    return server
