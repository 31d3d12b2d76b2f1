"""File records produced by the directory walker."""

import os
import stat
from dataclasses import asdict, dataclass
from typing import Any, Dict

from filefind.core.constants import PERMISSION_MASK


@dataclass(frozen=True)
class FileRecord:
    """Immutable snapshot of one filesystem entry.

    Only the attributes the filter engine consumes are kept.
    """

    name: str  # Base name (last path component)
    path: str  # Full path as built during the walk
    is_dir: bool
    uid: int
    gid: int
    perms: int  # st_mode & 0o7777

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result, name: str = None) -> "FileRecord":
        """Build a record from a stat result.

        Args:
            path: Full path of the entry
            st: Result of stat() on the entry
            name: Base name (default: last component of path)

        Returns:
            New file record
        """
        if name is None:
            name = os.path.basename(path)

        return cls(
            name=name,
            path=path,
            is_dir=stat.S_ISDIR(st.st_mode),
            uid=st.st_uid,
            gid=st.st_gid,
            perms=st.st_mode & PERMISSION_MASK,
        )

    @property
    def mode(self) -> str:
        """Permission bits as a 4-digit octal string (e.g. ``0644``)."""
        return format(self.perms, "04o")

    @property
    def type(self) -> str:
        """Type character: ``d`` for directories, ``f`` otherwise."""
        return "d" if self.is_dir else "f"

    def as_dict(self) -> Dict[str, Any]:
        """Return record fields plus derived ``mode`` and ``type``."""
        data = asdict(self)
        data["mode"] = self.mode
        data["type"] = self.type
        return data
