"""Configuration loading for s3stream.

Supports two configuration sources:
1. Environment variables (for CI/CD and containers) - takes priority
2. config.json file (for local development)

Environment Variable Format:
    S3STREAM_ENDPOINT=localhost:9000
    S3STREAM_ACCESS_KEY=xxx
    S3STREAM_SECRET_KEY=xxx
    S3STREAM_BUCKET=xxx
    S3STREAM_SECURE=false
    S3STREAM_REGION=us-east-1
    S3STREAM_ADDRESSING_STYLE=path
    S3STREAM_CHUNK_SIZE=32768
    S3STREAM_PART_SIZE=5242880
    S3STREAM_ABORT_ON_FAILURE=true
    S3STREAM_HTTP_TIMEOUT=60

The JSON file is a single object using the lower-case field names
(endpoint, access_key, secret_key, bucket, ...).
"""

import json
import os
from pathlib import Path
from typing import Any

from s3stream.models import TransferConfig

ENV_PREFIX = "S3STREAM_"

# Required fields for a transfer configuration
REQUIRED_FIELDS = [
    "access_key",
    "secret_key",
    "bucket",
]

INT_FIELDS = {"chunk_size", "part_size"}
BOOL_FIELDS = {"secure", "abort_on_failure"}
FLOAT_FIELDS = {"http_timeout"}
STR_FIELDS = {"endpoint", "access_key", "secret_key", "bucket", "region", "addressing_style"}

ADDRESSING_STYLES = ("path", "virtual", "auto")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


def _coerce(field: str, value: Any) -> Any:
    """Convert a raw JSON or environment value to the field's type."""
    try:
        if field in BOOL_FIELDS:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE_VALUES:
                return True
            if text in _FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean: {value!r}")
        if field in INT_FIELDS:
            if isinstance(value, bool):
                raise ValueError(f"not an integer: {value!r}")
            return int(value)
        if field in FLOAT_FIELDS:
            return float(value)
        return str(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{field}': {e}") from e


def build_config(data: dict[str, Any]) -> TransferConfig:
    """Build and validate a TransferConfig from a flat mapping.

    Args:
        data: Field names mapped to raw values. Unknown keys are rejected.

    Returns:
        A validated TransferConfig.

    Raises:
        ConfigError: If required fields are missing, unknown fields are
                    present, or values are out of range.
    """
    known = INT_FIELDS | BOOL_FIELDS | FLOAT_FIELDS | STR_FIELDS
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration field(s): {', '.join(unknown)}")

    for field in REQUIRED_FIELDS:
        if not data.get(field):
            raise ConfigError(f"Missing required field '{field}'")

    values = {field: _coerce(field, value) for field, value in data.items()}
    config = TransferConfig(**values)

    if config.chunk_size <= 0:
        raise ConfigError(f"chunk_size must be positive, got {config.chunk_size}")
    if config.part_size <= 0:
        raise ConfigError(f"part_size must be positive, got {config.part_size}")
    if config.http_timeout <= 0:
        raise ConfigError(f"http_timeout must be positive, got {config.http_timeout}")
    if config.addressing_style not in ADDRESSING_STYLES:
        raise ConfigError(
            f"addressing_style must be one of {', '.join(ADDRESSING_STYLES)}, "
            f"got '{config.addressing_style}'"
        )

    return config


def load_from_json(config_path: str) -> TransferConfig:
    """Load the transfer configuration from a JSON file.

    Args:
        config_path: Path to the config.json file.

    Returns:
        The loaded TransferConfig.

    Raises:
        ConfigError: If file doesn't exist, contains invalid JSON,
                    or is missing required fields.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    return build_config(data)


def load_from_env() -> TransferConfig:
    """Load the transfer configuration from S3STREAM_* environment variables.

    Returns:
        The loaded TransferConfig.

    Raises:
        ConfigError: If required variables are missing or malformed.
    """
    data = {}
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        field = env_key[len(ENV_PREFIX):].lower()
        data[field] = env_value

    for field in REQUIRED_FIELDS:
        if not data.get(field):
            raise ConfigError(f"Missing environment variable: {ENV_PREFIX}{field.upper()}")

    return build_config(data)


def has_env_config() -> bool:
    """Check if any S3STREAM_* environment variables exist."""
    return any(key.startswith(ENV_PREFIX) for key in os.environ)


def load_config(config_path: str = "config.json") -> TransferConfig:
    """Load the transfer configuration with environment priority.

    Priority order:
    1. Environment variables (if any S3STREAM_* vars exist)
    2. config.json file

    Args:
        config_path: Path to config.json (used as fallback).

    Returns:
        The loaded TransferConfig.

    Raises:
        ConfigError: If neither source provides a configuration.
    """
    if has_env_config():
        return load_from_env()
    if Path(config_path).exists():
        return load_from_json(config_path)

    raise ConfigError(
        "No configuration found. Set S3STREAM_* environment variables "
        f"or create {config_path}."
    )
