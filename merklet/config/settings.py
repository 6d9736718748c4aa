"""
Configuration management for Merklet.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from merklet.exceptions import InvalidConfigurationError
from merklet.hashing import SUPPORTED_ALGORITHMS, SUPPORTED_BACKENDS
from merklet.logging_config import get_logger

logger = get_logger(__name__)


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${MERKLET_HASH}" -> value of MERKLET_HASH env var
        "${MERKLET_HASH:sha256}" -> value of MERKLET_HASH or "sha256" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def _as_bool(value: Any) -> bool:
    """Coerce YAML or env-expanded values to bool."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class HashingConfig:
    """Hash primitive selection."""

    algorithm: str = "sha256"
    backend: str = "hashlib"  # "hashlib" or "openssl"


@dataclass
class InputConfig:
    """Leaf input file handling."""

    format: str = "lines"  # "lines" or "json"
    encoding: str = "utf-8"
    skip_blank: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass
class MerkletConfig:
    """Main Merklet configuration."""

    hashing: HashingConfig = field(default_factory=HashingConfig)
    input: InputConfig = field(default_factory=InputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.merklet/config.yaml")


def get_default_config() -> MerkletConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        MerkletConfig: Default configuration object
    """
    return MerkletConfig()


def load_config(config_path: Optional[str] = None) -> MerkletConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        MerkletConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(config_path)

    if not os.path.exists(config_path):
        logger.debug(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.debug(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping at the top level"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.debug(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> MerkletConfig:
    """
    Build MerkletConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        MerkletConfig: Configuration object

    Raises:
        InvalidConfigurationError: If a section is not a mapping
    """
    default_config = get_default_config()

    hashing_data = _section(config_data, 'hashing')
    hashing = HashingConfig(
        algorithm=str(hashing_data.get('algorithm', default_config.hashing.algorithm)),
        backend=str(hashing_data.get('backend', default_config.hashing.backend)),
    )

    input_data = _section(config_data, 'input')
    input_config = InputConfig(
        format=str(input_data.get('format', default_config.input.format)),
        encoding=str(input_data.get('encoding', default_config.input.encoding)),
        skip_blank=_as_bool(input_data.get('skip_blank', default_config.input.skip_blank)),
    )

    logging_data = _section(config_data, 'logging')
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)),
        file=os.path.expanduser(
            str(logging_data.get('file', default_config.logging.file) or "")
        ),
        format=str(logging_data.get('format', default_config.logging.format)),
    )

    return MerkletConfig(
        hashing=hashing,
        input=input_config,
        logging=logging,
    )


def _validate_config(config: MerkletConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    algorithm = config.hashing.algorithm.lower().replace("-", "_")
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise InvalidConfigurationError(
            f"hashing algorithm must be one of {list(SUPPORTED_ALGORITHMS)}, "
            f"got '{config.hashing.algorithm}'"
        )

    if config.hashing.backend.lower() not in SUPPORTED_BACKENDS:
        raise InvalidConfigurationError(
            f"hashing backend must be one of {list(SUPPORTED_BACKENDS)}, "
            f"got '{config.hashing.backend}'"
        )

    valid_formats = ["lines", "json"]
    if config.input.format not in valid_formats:
        raise InvalidConfigurationError(
            f"input format must be one of {valid_formats}, "
            f"got '{config.input.format}'"
        )

    try:
        "".encode(config.input.encoding)
    except LookupError:
        raise InvalidConfigurationError(
            f"input encoding '{config.input.encoding}' is not a known codec"
        )

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )

    valid_log_formats = ["console", "json"]
    if config.logging.format not in valid_log_formats:
        raise InvalidConfigurationError(
            f"logging format must be one of {valid_log_formats}, "
            f"got '{config.logging.format}'"
        )
