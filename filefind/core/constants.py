"""
filefind Core: Constants and Type Definitions

This module provides system-wide constants, error codes, the project's base
exception and small type definitions shared by every layer.
"""
from enum import Enum, IntEnum

# Version information
FILEFIND_VERSION = "1.0.0"
PROGRAM_NAME = "filefind"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for filefind operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad id, permission string, type character
    NOT_FOUND = 2  # File, user or group doesn't exist
    PERMISSION_DENIED = 3  # Directory unreadable
    IO_ERROR = 4  # Any other filesystem failure during a walk
    ENCODING_ERROR = 5  # Path not representable as text
    INTERNAL_ERROR = 6  # Bug in filefind
    EXEC_FAILED = 7  # Post-processing command failed


class FileFindError(Exception):
    """Base class for every error raised by filefind."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        """Initialize FileFindError.

        Args:
            message: Human-readable error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


# Pattern wildcard: matches any run of characters, including none
WILDCARD = "*"

# Lower 12 bits of st_mode: setuid/setgid/sticky + rwx triplets
PERMISSION_MASK = 0o7777


class FileType(Enum):
    """File type filter values."""

    FILE = "f"
    DIRECTORY = "d"


# Configuration keys
class ConfigKey:
    """Configuration key constants (dot paths for ConfigManager.get)."""

    ROOT = "filefind"

    SEARCH_ROOT = "filefind.search.root"
    SEARCH_DEPTH = "filefind.search.depth"
    SEARCH_MAXDEPTH = "filefind.search.maxdepth"

    OUTPUT_FORMAT = "filefind.output.format"

    LOGGING_LEVEL = "filefind.logging.level"
    LOGGING_FILE = "filefind.logging.file"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.ROOT: {
        "search": {
            "root": ".",
            "depth": False,
            "maxdepth": None,
        },
        "output": {
            "format": None,
        },
        "logging": {
            "level": "WARNING",
            "file": None,
        },
    }
}
