"""
Authtoken check for token issuance.

The shared secret is read from the JSON request body only. Query strings
end up in proxy logs and browser history, so ``?authtoken=`` is ignored.
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from connector.config.models import Credentials
from connector.errors import AuthorizationError
from connector.observability import AUTH_FAILURES

logger = logging.getLogger("guacd-connector")


def authenticate(presented_secret: Any, credentials: Credentials) -> bool:
    """
    Check a presented secret against the configured authtoken.

    Args:
        presented_secret: Value of ``authtoken`` from the request body
        credentials: Loaded credentials

    Returns:
        True only for an exact match
    """
    if not isinstance(presented_secret, str) or not presented_secret:
        return False
    # Constant-time comparison to prevent timing attacks
    return hmac.compare_digest(
        presented_secret.encode("utf-8"),
        credentials.secret.encode("utf-8"),
    )


def require_authtoken(body: dict[str, Any], credentials: Credentials, remote_addr: str | None = None) -> None:
    """
    Raise AuthorizationError unless the body carries the right authtoken.

    The presented value is never logged.
    """
    if not authenticate(body.get("authtoken"), credentials):
        AUTH_FAILURES.inc()
        logger.warning(f"Unauthorized access attempt with invalid or missing authtoken from {remote_addr}")
        raise AuthorizationError("Forbidden: Invalid or missing authtoken")
