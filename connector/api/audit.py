"""
Audit trail for token issuance.

One JSON line on stdout per getToken request, granted or refused, through
the dedicated 'audit' logger. Neither the presented authtoken nor the
issued token is ever part of the entry.
"""

import logging
import sys
from datetime import datetime, timezone

from flask import Response, g, request
from pythonjsonlogger.json import JsonFormatter

AUDIT_EVENT = "token_request"
AUDITED_ENDPOINTS = frozenset({"api.get_token"})

audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)
audit_logger.propagate = False

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(JsonFormatter(fmt="%(message)s", rename_fields={"message": "event"}))
audit_logger.addHandler(_handler)


def _node_fields() -> dict:
    route = g.get("route")
    if route is None:
        return {}
    return {"server": route.route_key.server, "port": route.route_key.port}


def audit_log_response(response: Response) -> Response:
    """Blueprint ``after_request`` hook recording the outcome of each token request."""
    if request.endpoint not in AUDITED_ENDPOINTS:
        return response

    audit_logger.info(AUDIT_EVENT, extra={
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "method": request.method,
        "path": request.path,
        "status_code": response.status_code,
        "granted": response.status_code == 200,
        "remote_addr": request.remote_addr,
        **_node_fields(),
    })
    return response
