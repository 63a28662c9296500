"""
Metrics and logging for the connector.

Token issuance counters and latency live in the default Prometheus
registry, exposed on /metrics. Application logs are JSON lines on stderr
(python-json-logger) with secret values masked.
"""

import logging
import re
import sys

from flask import Flask, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# =============================================================================
# Prometheus Custom Metrics
# =============================================================================

TOKENS_ISSUED = Counter(
    "connector_tokens_issued_total",
    "Number of connection tokens issued",
)

AUTH_FAILURES = Counter(
    "connector_auth_failures_total",
    "Number of token requests rejected for a bad or missing authtoken",
)

TOKEN_ENCRYPT_DURATION = Histogram(
    "connector_token_encrypt_duration_seconds",
    "Latency of building and encrypting a connection token",
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
)

ERRORS_TOTAL = Counter(
    "connector_errors_total",
    "Total number of errors by endpoint",
    ["endpoint"],
)


# =============================================================================
# Metrics Endpoint
# =============================================================================

def init_metrics(app: Flask, path: str = "/metrics") -> None:
    """Expose the default Prometheus registry on ``path``."""

    def prometheus_metrics() -> Response:
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    app.add_url_rule(path, endpoint="prometheus_metrics", view_func=prometheus_metrics)


# =============================================================================
# Logging
# =============================================================================

_SECRET_VALUE = re.compile(
    # key=value pairs and quoted "key": "value" pairs; a bare "key:" is prose
    r"""(?P<key>authtoken|password|(?<!auth)token|secret|guac_key)(?:\s*=\s*|["']\s*:\s*)["']?[^"'}\s&,]+""",
    re.IGNORECASE,
)


class SensitiveDataFilter(logging.Filter):
    """Replace the value of ``authtoken=...`` or ``"password": "..."`` pairs with ``***``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _SECRET_VALUE.sub(r"\g<key>=***", record.msg)
        return True


def setup_json_logging(level: str = "INFO") -> None:
    """
    Route every logger through one JSON handler on stderr.

    The masking filter is attached to the handler, not to individual
    loggers. The 'audit' logger keeps its own stdout handler.
    """
    from pythonjsonlogger.json import JsonFormatter

    json_handler = logging.StreamHandler(sys.stderr)
    json_handler.setFormatter(JsonFormatter(
        fmt="%(name)s %(levelname)s %(message)s",
        rename_fields={"levelname": "level"},
        timestamp="timestamp",
    ))
    json_handler.addFilter(SensitiveDataFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(json_handler)
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        root_logger.setLevel(logging.INFO)
        logging.getLogger("guacd-connector").warning(f"Unknown log level {level!r}, using INFO")
        return
    root_logger.setLevel(numeric_level)
