"""
Constants and settings for the connector.
"""

from __future__ import annotations

import os
import re

# =============================================================================
# Constants
# =============================================================================

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_GUACD_PORT = 4822
DEFAULT_TUNNEL_LOG_LEVEL = "ERRORS"

CIPHER_NAME = "AES-256-CBC"
CIPHER_KEY_LENGTH = 32
CIPHER_IV_LENGTH = 16

# Config file given on the command line, e.g. guacd_rdp.json
CONFIG_FILE_PATTERN = re.compile(r'^guacd_(\w+)\.json$')
CREDENTIALS_FILE_SUFFIX = "_credentials"

# Node routing: /node/<server>/<port>/...
NODE_PATH_PATTERN = re.compile(r'^/node/(?P<server>[^/]+)/(?P<port>[0-9]+)/')

# =============================================================================
# Environment variables
# =============================================================================

ENV_LISTENING_FD = "SPANK_ISO_NETNS_LISTENING_FD_0"
ENV_LISTENING_PORT = "SPANK_ISO_NETNS_LISTENING_PORT_0"
ENV_SCRIPT_PATH = "script_path"

# Value of ENV_LISTENING_FD selecting port mode instead of an inherited fd
INSECURE_TESTING_PORT = "use-insecure-testing-port"
DEFAULT_LISTENING_PORT = 8080

DEFAULT_TOKEN_RATE_LIMIT = "30/minute"


def get_env(key: str, default: str | None = None, required: bool = False) -> str | None:
    """
    Retrieve an environment variable.

    The key is looked up as given first, then upper-cased with dashes
    replaced, so both ``script_path`` and ``LOG_LEVEL`` style names work.

    Args:
        key: Variable name
        default: Default value
        required: Whether the value is required

    Returns:
        Configuration value

    Raises:
        ValueError: If required value is missing
    """
    value = os.environ.get(key)
    if value is None:
        value = os.environ.get(key.upper().replace("-", "_"), default)
    if required and not value:
        raise ValueError(f"Required configuration missing: {key}")
    return value
