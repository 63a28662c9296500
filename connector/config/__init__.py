"""Configuration module for the connector."""

from connector.config.settings import (
    DEFAULT_WIDTH,
    DEFAULT_HEIGHT,
    CIPHER_NAME,
    CIPHER_KEY_LENGTH,
    CONFIG_FILE_PATTERN,
    NODE_PATH_PATTERN,
    INSECURE_TESTING_PORT,
    get_env,
)
from connector.config.models import (
    Credentials,
    ConnectionConfig,
    GatewayConfig,
)
from connector.config.loader import load_gateway_config

__all__ = [
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "CIPHER_NAME",
    "CIPHER_KEY_LENGTH",
    "CONFIG_FILE_PATTERN",
    "NODE_PATH_PATTERN",
    "INSECURE_TESTING_PORT",
    "get_env",
    "Credentials",
    "ConnectionConfig",
    "GatewayConfig",
    "load_gateway_config",
]
