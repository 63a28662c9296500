"""
Configuration loader for the connection and credentials files.

The command line names ``guacd_<protocol>.json``; the credentials live in
``<protocol>_credentials`` next to it. Both are JSON and are looked up in
the directory given by the ``script_path`` environment variable.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import ValidationError as ModelValidationError

from connector.config.models import ConnectionConfig, Credentials, GatewayConfig
from connector.config.settings import (
    CONFIG_FILE_PATTERN,
    CREDENTIALS_FILE_SUFFIX,
    ENV_SCRIPT_PATH,
)
from connector.errors import StartupConfigError

logger = logging.getLogger("guacd-connector")

USAGE = "Usage: guacd-connector <config_file>  (example: guacd-connector guacd_rdp.json)"


def parse_config_argument(argv: Sequence[str]) -> tuple[str, str]:
    """
    Extract the config file name and protocol from the command line.

    Args:
        argv: Arguments without the program name

    Returns:
        Tuple of (config_file_name, protocol)

    Raises:
        StartupConfigError: If the argument is missing or badly named
    """
    if not argv:
        raise StartupConfigError(f"Missing configuration file argument. {USAGE}")

    config_file = argv[0]
    match = CONFIG_FILE_PATTERN.match(Path(config_file).name)
    if not match:
        raise StartupConfigError(
            f"Configuration file name '{config_file}' does not match guacd_<protocol>.json"
        )
    return config_file, match.group(1)


def resolve_base_dir(environ: Mapping[str, str]) -> Path:
    """Return the validated base directory holding the configuration files."""
    raw = environ.get(ENV_SCRIPT_PATH)
    if not raw:
        raise StartupConfigError(f"Environment variable {ENV_SCRIPT_PATH} is not set")
    try:
        base_dir = Path(raw).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise StartupConfigError(f"{ENV_SCRIPT_PATH} '{raw}' cannot be resolved: {e}") from e
    if not base_dir.is_dir():
        raise StartupConfigError(f"{ENV_SCRIPT_PATH} '{raw}' is not a directory")
    return base_dir


def _read_json(path: Path, what: str) -> dict[str, Any]:
    logger.info(f"Attempting to load {what} from: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise StartupConfigError(f"Cannot read {what} file {path}: {e.strerror or e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StartupConfigError(f"Invalid JSON in {what} file {path}: {e}") from e

    if not isinstance(data, dict):
        raise StartupConfigError(f"{what.capitalize()} file {path} must contain a JSON object")
    return data


def _describe(e: ModelValidationError) -> str:
    # Never echo input values: the credentials file holds secrets
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
        for err in e.errors(include_input=False)
    )


def load_gateway_config(argv: Sequence[str], environ: Mapping[str, str]) -> GatewayConfig:
    """
    Load and validate the full gateway configuration.

    Args:
        argv: Command line arguments without the program name
        environ: Process environment

    Returns:
        Immutable GatewayConfig

    Raises:
        StartupConfigError: On any argument, file or validation problem
    """
    config_file, protocol = parse_config_argument(argv)
    base_dir = resolve_base_dir(environ)

    credentials_path = base_dir / f"{protocol}{CREDENTIALS_FILE_SUFFIX}"
    config_path = base_dir / config_file

    raw_credentials = _read_json(credentials_path, "credentials")
    try:
        credentials = Credentials.model_validate(raw_credentials)
    except ModelValidationError as e:
        raise StartupConfigError(f"Invalid credentials in {credentials_path}: {_describe(e)}") from e
    logger.info("Credentials loaded successfully")

    raw_connection = _read_json(config_path, "configuration")
    try:
        connection = ConnectionConfig.model_validate(raw_connection)
    except ModelValidationError as e:
        raise StartupConfigError(f"Invalid configuration in {config_path}: {_describe(e)}") from e
    logger.info("Connection configuration loaded successfully")

    return GatewayConfig(
        protocol=protocol,
        config_file=Path(config_file).name,
        credentials=credentials,
        connection=connection,
    )
