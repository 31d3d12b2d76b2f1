"""filefind Core - Shared constants and input validation.

Import specific names from submodules:
    from filefind.core.constants import ErrorCode, FileFindError
    from filefind.core.validators import ValidationError, parse_permissions
"""

from filefind.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
