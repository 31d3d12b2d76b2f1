"""filefind Infrastructure Layer.

This layer provides services used by the CLI and the walker:
- ConfigManager: Hierarchical YAML/environment configuration
- Logger: Structured logging system
"""

from .config_manager import (
    CONFIG_SCHEMA,
    USER_CONFIG_PATH,
    ConfigError,
    ConfigManager,
    ConfigSource,
)
from .logger import Logger, LogLevel, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "CONFIG_SCHEMA",
    "USER_CONFIG_PATH",
    "ConfigSource",
    "ConfigError",
    "ConfigManager",
]
