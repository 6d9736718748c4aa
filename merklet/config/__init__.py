"""
Configuration management for Merklet.

Handles loading and validation of configuration files.
"""

from merklet.config.settings import (
    HashingConfig,
    InputConfig,
    LoggingConfig,
    MerkletConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "HashingConfig",
    "InputConfig",
    "LoggingConfig",
    "MerkletConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
