"""filefind Walker.

Enumerates a directory tree into FileRecord snapshots and filters them
through the rules engine.
"""

from .records import FileRecord
from .walker import Walker, WalkError

__all__ = [
    "FileRecord",
    "Walker",
    "WalkError",
]
