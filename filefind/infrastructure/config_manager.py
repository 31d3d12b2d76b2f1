#!/usr/bin/env python3
"""Hierarchical configuration manager for filefind.

This module provides configuration management with:
- 4-level precedence hierarchy
- YAML configuration files
- Environment variable overrides, typed by the configuration schema
- Thread-safe operations
- Deep merge of nested sections

Example:
    >>> config = ConfigManager()
    >>> config.load_file("~/.config/filefind/config.yaml")
    >>> config.get(ConfigKey.SEARCH_MAXDEPTH)
"""

import copy
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from filefind.core.constants import DEFAULT_CONFIG, ConfigKey, ErrorCode, FileFindError

ENV_PREFIX = "FILEFIND_"

USER_CONFIG_PATH = Path("~/.config/filefind/config.yaml")

# Expected types for the filefind section
CONFIG_SCHEMA = {
    ConfigKey.ROOT: {
        "search": {
            "root": str,
            "depth": bool,
            "maxdepth": int,
        },
        "output": {
            "format": str,
        },
        "logging": {
            "level": str,
            "file": str,
        },
    }
}

_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    CLI_ARGS = 4  # Highest precedence


class ConfigError(FileFindError):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


class ConfigManager:
    """Thread-safe hierarchical configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. User config (--config FILE or ~/.config/filefind/config.yaml)
    3. Environment variables (FILEFIND_*)
    4. CLI arguments (highest)
    """

    def __init__(self):
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(DEFAULT_CONFIG)
        self._load_environment()

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser().resolve()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}", ErrorCode.INVALID_INPUT)
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.IO_ERROR)

        if config_data is None:
            config_data = {}

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}", ErrorCode.INVALID_INPUT)

        with self._lock:
            self._config[source] = config_data

    def load_dict(self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.CLI_ARGS) -> None:
        """Load configuration from dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level
        """
        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self) -> None:
        """Load configuration from environment variables.

        Environment variables in format: FILEFIND_SECTION_KEY=value
        Example: FILEFIND_SEARCH_MAXDEPTH=3
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split("_")
            if not all(parts):
                continue

            current = env_config
            for part in parts[:-1]:
                existing = current.get(part)
                if not isinstance(existing, dict):
                    existing = current[part] = {}
                current = existing

            current[parts[-1]] = self._parse_env_value(value, self._schema_type(parts))

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = {ConfigKey.ROOT: env_config}

    def _schema_type(self, parts: List[str]) -> Optional[type]:
        """Expected type of the setting below the filefind section, if known."""
        node: Any = CONFIG_SCHEMA[ConfigKey.ROOT]
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return None if isinstance(node, dict) else node

    def _parse_env_value(self, value: str, expected: Optional[type] = None) -> Any:
        """Parse environment variable value.

        Args:
            value: String value from environment
            expected: Schema type of the setting, None when unknown

        Returns:
            Parsed value; settings typed str are never converted
        """
        if expected is str:
            return value

        lowered = value.strip().lower()
        if expected is bool:
            if lowered in _TRUE_WORDS:
                return True
            if lowered in _FALSE_WORDS:
                return False
            return value

        if expected is None:
            if lowered in ("true", "yes"):
                return True
            if lowered in ("false", "no"):
                return False

        try:
            return int(value)
        except ValueError:
            pass

        if expected is int:
            return value

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., ConfigKey.SEARCH_MAXDEPTH)
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            # Search from highest to lowest precedence
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return value

            return default

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        current = config

        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            if part not in current:
                return None
            current = current[part]

        return current

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources.

        Returns:
            Merged configuration dictionary
        """
        with self._lock:
            merged: Dict[str, Any] = {}

            # Merge from lowest to highest precedence
            for source in sorted(self._config.keys(), key=lambda s: s.value):
                merged = self._deep_merge(merged, self._config[source])

            return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def validate_schema(self, schema: Dict[str, Any] = CONFIG_SCHEMA) -> bool:
        """Validate merged configuration against a type schema.

        Args:
            schema: Nested dict of expected types (tuples allowed)

        Returns:
            True if valid

        Raises:
            ConfigError: If validation fails
        """
        return self._validate_dict(self.get_all(), schema)

    def _validate_dict(self, config: Dict[str, Any], schema: Dict[str, Any]) -> bool:
        for key, expected_type in schema.items():
            if key not in config:
                continue  # Optional fields

            value = config[key]

            if isinstance(expected_type, dict):
                if not isinstance(value, dict):
                    raise ConfigError(f"Expected dict for {key}, got {type(value).__name__}")
                self._validate_dict(value, expected_type)
            elif value is not None and not isinstance(value, expected_type):
                names = (
                    "/".join(t.__name__ for t in expected_type)
                    if isinstance(expected_type, tuple)
                    else expected_type.__name__
                )
                raise ConfigError(f"Expected {names} for {key}, got {type(value).__name__}")

        return True
