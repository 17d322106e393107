"""
Configuration for dlprotoc.

Settings come from, in increasing precedence:
1. Built-in defaults
2. An optional YAML file (default: ./dlprotoc.yaml)
3. DLPROTOC_* environment variables

Example dlprotoc.yaml:

    release_base_url: https://mirror.example.com/protobuf/releases/download
    timeout: 60
    lock_timeout: 300
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from dlprotoc.core.download import DEFAULT_RELEASE_BASE_URL
from dlprotoc.core.environment import DEFAULT_OUT_DIR_ENV_VAR, DEFAULT_PROTOC_ENV_VAR
from dlprotoc.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "dlprotoc.yaml"

RELEASE_BASE_URL_ENV_VAR = "DLPROTOC_RELEASE_BASE_URL"
TIMEOUT_ENV_VAR = "DLPROTOC_TIMEOUT"


@dataclass(frozen=True)
class DlprotocConfig:
    """Settings for installing protoc."""

    out_dir_env_var: str = DEFAULT_OUT_DIR_ENV_VAR
    """Environment variable holding the build output directory"""

    protoc_env_var: str = DEFAULT_PROTOC_ENV_VAR
    """Environment variable that receives the protoc executable path"""

    distribution_dir_name: str = "protoc_zip"
    """Directory under the build output directory that holds the release"""

    release_base_url: str = DEFAULT_RELEASE_BASE_URL
    """Root of the release download URLs"""

    timeout: Optional[float] = None
    """HTTP timeout in seconds (None waits indefinitely)"""

    lock_timeout: float = 300
    """Seconds to wait for another process installing to the same directory"""

    def __post_init__(self):
        """Validate settings after initialization."""
        for name in ("out_dir_env_var", "protoc_env_var", "distribution_dir_name"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} cannot be empty")
        if not self.release_base_url.startswith(("https://", "http://")):
            raise ConfigurationError(
                f"release_base_url must be an http(s) URL: {self.release_base_url}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.lock_timeout < 0:
            raise ConfigurationError("lock_timeout cannot be negative")


def config_from_dict(data: Dict[str, Any]) -> DlprotocConfig:
    """
    Build a configuration from a parsed mapping.

    Raises:
        ConfigurationError: On unknown keys or values of the wrong type
    """
    known = {f.name: f for f in fields(DlprotocConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key in ("timeout", "lock_timeout"):
            if value is None and key == "timeout":
                values[key] = None
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{key} must be a number, got {value!r}")
            values[key] = float(value)
        else:
            if not isinstance(value, str):
                raise ConfigurationError(f"{key} must be a string, got {value!r}")
            values[key] = value

    return DlprotocConfig(**values)


def _apply_env_overrides(
    config: DlprotocConfig, environ: Mapping[str, str]
) -> DlprotocConfig:
    overrides: Dict[str, Any] = {}

    base_url = environ.get(RELEASE_BASE_URL_ENV_VAR)
    if base_url:
        overrides["release_base_url"] = base_url

    timeout = environ.get(TIMEOUT_ENV_VAR)
    if timeout:
        try:
            overrides["timeout"] = float(timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"env var {TIMEOUT_ENV_VAR}: not a number: {timeout!r}"
            ) from e

    if overrides:
        logger.debug(f"Applying environment overrides: {sorted(overrides)}")
        config = replace(config, **overrides)
    return config


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DlprotocConfig:
    """
    Load configuration from YAML and the environment.

    Args:
        config_file: YAML file to read. Must exist when given explicitly;
            when None, ./dlprotoc.yaml is read if present.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        DlprotocConfig

    Raises:
        FileNotFoundError: If config_file was given and does not exist
        ConfigurationError: If the file or an override is invalid
    """
    environ = os.environ if environ is None else environ

    if config_file is None:
        config_file = Path.cwd() / DEFAULT_CONFIG_FILE
        required = False
    else:
        config_file = Path(config_file)
        required = True

    data: Dict[str, Any] = {}
    if config_file.exists():
        logger.debug(f"Loading configuration from {config_file}")
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {config_file}")
    elif required:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")
    else:
        logger.debug(f"Config file not found (optional): {config_file}")

    return _apply_env_overrides(config_from_dict(data), environ)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DlprotocConfig",
    "config_from_dict",
    "load_config",
]
