"""
Pydantic models for the connector configuration files.

The on-disk keys follow the tunnel's camelCase naming (``guac_key``,
``defaultWidth``, ``useCredentials``...); the models expose snake_case
attributes through aliases. Models are frozen: the configuration is read
once at startup and shared read-only by every request.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from connector.config.settings import (
    CIPHER_KEY_LENGTH,
    CIPHER_NAME,
    DEFAULT_GUACD_PORT,
    DEFAULT_TUNNEL_LOG_LEVEL,
)


class Credentials(BaseModel):
    """Contents of ``<protocol>_credentials``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    secret: str = Field(alias="authtoken", min_length=1, repr=False)
    cipher_key: str = Field(alias="guac_key", repr=False)
    cipher: str = Field(default=CIPHER_NAME, alias="cypher")
    username: str | None = None
    password: str | None = Field(default=None, repr=False)

    @field_validator("cipher_key")
    @classmethod
    def _check_key_length(cls, value: str) -> str:
        length = len(value.encode("utf-8"))
        if length != CIPHER_KEY_LENGTH:
            raise ValueError(
                f"guac_key must be exactly {CIPHER_KEY_LENGTH} bytes (got {length})"
            )
        return value

    @field_validator("cipher")
    @classmethod
    def _check_cipher(cls, value: str) -> str:
        if value.upper() != CIPHER_NAME:
            raise ValueError(f"Unsupported cypher '{value}', only {CIPHER_NAME} is supported")
        return CIPHER_NAME

    @field_validator("username", "password", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        # A purely numeric account name or password is written unquoted in the file
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def key_bytes(self) -> bytes:
        return self.cipher_key.encode("utf-8")


class GuacdConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    port: int = DEFAULT_GUACD_PORT


class ConnectionConfig(BaseModel):
    """Contents of ``guacd_<protocol>.json``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    protocol_type: str = Field(alias="type", min_length=1)
    default_width: PositiveInt | None = Field(default=None, alias="defaultWidth")
    default_height: PositiveInt | None = Field(default=None, alias="defaultHeight")
    use_credentials: bool = Field(default=False, alias="useCredentials")
    settings: dict[str, Any] = {}
    guacd: GuacdConfig = GuacdConfig()
    log_level: str = Field(default=DEFAULT_TUNNEL_LOG_LEVEL, alias="logLevel")

    @property
    def guacd_port(self) -> int:
        return self.guacd.port


class GatewayConfig(BaseModel):
    """Process-wide configuration: both files plus where they came from."""

    model_config = ConfigDict(frozen=True)

    protocol: str
    config_file: str
    credentials: Credentials
    connection: ConnectionConfig
