"""
filefind Core: Input Validators.

This module turns raw user input (command-line strings, configuration values)
into the typed values the walker and filter engine consume: type characters,
numeric ids, octal permission bits, depth limits and commands. Every failure
raises ValidationError before any filesystem work starts.
"""
import grp
import pwd
from typing import Any, Optional

from filefind.core.constants import PERMISSION_MASK, ErrorCode, FileFindError, FileType


class ValidationError(FileFindError):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message, error_code)


def validate_file_type(value: Optional[str]) -> Optional[str]:
    """Validate a file type character.

    Args:
        value: ``"f"``, ``"d"`` or None

    Returns:
        The validated character, or None when unset

    Raises:
        ValidationError: If the character is not a known file type
    """
    if value is None:
        return None

    try:
        return FileType(value).value
    except ValueError:
        raise ValidationError(f"Invalid file type: {value}.")


def parse_id(value: Any, kind: str = "id") -> Optional[int]:
    """Parse a user or group id.

    Args:
        value: Decimal string, int or None
        kind: Label used in error messages ("uid", "gid")

    Returns:
        Non-negative integer id, or None when unset

    Raises:
        ValidationError: If value is not a non-negative integer
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValidationError(f"Invalid {kind}: `{value}'")

    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip()
        if not text.isdigit():
            raise ValidationError(f"Invalid {kind}: `{value}'")
        parsed = int(text)

    if parsed < 0:
        raise ValidationError(f"Invalid {kind}: `{value}'")

    return parsed


def parse_permissions(value: Any) -> Optional[int]:
    """Parse permission bits given as an octal string.

    Args:
        value: Octal string such as ``"755"`` or ``"4755"``, an int, or None

    Returns:
        Permission bits in range 0..0o7777, or None when unset

    Raises:
        ValidationError: If value is not valid octal or is out of range
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValidationError(f"Invalid permission bits: `{value}'")

    if isinstance(value, int):
        bits = value
    else:
        text = str(value).strip()
        if text.lower().startswith("0o"):
            text = text[2:]
        try:
            bits = int(text, 8)
        except ValueError:
            raise ValidationError(f"Invalid permission bits: `{value}'")

    if bits < 0 or bits > PERMISSION_MASK:
        raise ValidationError(f"Invalid permission bits: `{value}'")

    return bits


def validate_max_depth(value: Any) -> Optional[int]:
    """Validate a traversal depth limit.

    Args:
        value: Non-negative int (or decimal string), or None for unlimited

    Returns:
        Depth limit, or None

    Raises:
        ValidationError: If the limit is negative or not an integer
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise ValidationError(f"Invalid max depth: `{value}'")

    if isinstance(value, int):
        depth = value
    else:
        text = str(value).strip()
        if not text.isdigit():
            raise ValidationError(f"Invalid max depth: `{value}'")
        depth = int(text)

    if depth < 0:
        raise ValidationError(f"Invalid max depth: `{value}'")

    return depth


def resolve_user(name: str) -> int:
    """Look up a user's uid by name.

    Raises:
        ValidationError: If no such user exists
    """
    try:
        return pwd.getpwnam(name).pw_uid
    except KeyError:
        raise ValidationError(f"Failed to query passwd for `{name}'.", ErrorCode.NOT_FOUND)


def resolve_group(name: str) -> int:
    """Look up a group's gid by name.

    Raises:
        ValidationError: If no such group exists
    """
    try:
        return grp.getgrnam(name).gr_gid
    except KeyError:
        raise ValidationError(f"Failed to query group for `{name}'.", ErrorCode.NOT_FOUND)


def validate_command(command: Optional[str]) -> Optional[str]:
    """Validate an ``--exec`` command string.

    Raises:
        ValidationError: If the command is blank
    """
    if command is None:
        return None

    if not command.strip():
        raise ValidationError("Command cannot be empty")

    return command
