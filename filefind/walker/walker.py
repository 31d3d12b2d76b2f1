#!/usr/bin/env python3
"""Directory walker for filefind.

This module enumerates a directory tree into file records and filters them:
- Depth-first traversal driven by an explicit work stack
- Pre-order (default) or post-order emission of directory records
- Optional maximum depth below the root
- Fail-fast error handling: any listing or stat failure aborts the walk

The root directory itself is never emitted; its children sit at depth 1.
Children are visited in directory listing order, without sorting.

Example:
    >>> walker = Walker("src", max_depth=2)
    >>> walker.add_name_patterns([Pattern.compile("*.py")])
    >>> walker.set_file_type("f")
    >>> [record.path for record in walker.matches()]
"""

import os
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from filefind.core.constants import ErrorCode, FileFindError
from filefind.core.validators import validate_max_depth
from filefind.infrastructure.logger import Logger, get_logger
from filefind.rules.engine import FilterConfig, FilterEngine
from filefind.rules.patterns import Pattern
from filefind.walker.records import FileRecord

StatFunc = Callable[[str], os.stat_result]


class WalkError(FileFindError):
    """Filesystem failure during a walk. Always fatal."""

    def __init__(self, path: str, reason: str, error_code: ErrorCode = ErrorCode.IO_ERROR):
        """Initialize WalkError.

        Args:
            path: Offending path
            reason: Reason reported by the operating system
            error_code: Associated error code
        """
        super().__init__(f"{path}: {reason}", error_code)
        self.path = path
        self.reason = reason

    @classmethod
    def from_os_error(cls, path: str, exc: OSError) -> "WalkError":
        """Wrap an OSError raised while visiting path."""
        if isinstance(exc, PermissionError):
            code = ErrorCode.PERMISSION_DENIED
        elif isinstance(exc, FileNotFoundError):
            code = ErrorCode.NOT_FOUND
        else:
            code = ErrorCode.IO_ERROR
        return cls(path, exc.strerror or str(exc), code)


# (directory, remaining child names, depth of those children, record deferred until subtree ends)
_Frame = Tuple[str, Iterator[str], int, Optional[FileRecord]]


class Walker:
    """Enumerates and filters the entries below a root directory."""

    def __init__(
        self,
        root: str,
        depth_first: bool = False,
        max_depth: Optional[int] = None,
        stat_func: StatFunc = os.stat,
        logger: Optional[Logger] = None,
    ):
        """Initialize walker.

        Args:
            root: Directory to search in
            depth_first: Emit directories after their contents (post-order)
            max_depth: Deepest level to emit, None for unlimited
            stat_func: Metadata lookup, follows symlinks like os.stat
            logger: Logger instance (default: global logger)

        Raises:
            ValidationError: If max_depth is negative
        """
        self.root = os.fsdecode(os.fspath(root))
        self.depth_first = depth_first
        self.max_depth = validate_max_depth(max_depth)
        self._stat = stat_func
        self._logger = logger or get_logger()
        self._config = FilterConfig()

    @property
    def config(self) -> FilterConfig:
        return self._config

    def add_name_patterns(self, patterns: Iterable[Pattern]) -> None:
        self._config.add_name_patterns(patterns)

    def add_path_patterns(self, patterns: Iterable[Pattern]) -> None:
        self._config.add_path_patterns(patterns)

    def set_file_type(self, file_type: Optional[str]) -> None:
        self._config.set_file_type(file_type)

    def set_uid(self, uid: Optional[int]) -> None:
        self._config.set_uid(uid)

    def set_gid(self, gid: Optional[int]) -> None:
        self._config.set_gid(gid)

    def set_perms(self, perms: Optional[int]) -> None:
        self._config.set_perms(perms)

    def enumerate(self) -> List[FileRecord]:
        """List every entry below the root.

        Returns:
            Records in pre-order, or post-order when depth_first is set

        Raises:
            WalkError: If any directory cannot be listed or any entry cannot
                be stat'ed or represented as text
        """
        self._logger.debug(
            "Walking directory tree",
            root=self.root,
            depth_first=self.depth_first,
            max_depth=self.max_depth,
        )

        records: List[FileRecord] = []
        root_entries = self._list_dir(self.root)

        if self.max_depth == 0:
            return records

        stack: List[_Frame] = [(self.root, iter(root_entries), 1, None)]

        while stack:
            parent, entries, depth, deferred = stack[-1]

            name = next(entries, None)
            if name is None:
                stack.pop()
                if deferred is not None:
                    records.append(deferred)
                continue

            record = self._make_record(os.path.join(parent, name), name)

            if not (record.is_dir and self._can_descend(depth)):
                records.append(record)
                continue

            children = iter(self._list_dir(record.path))
            if self.depth_first:
                stack.append((record.path, children, depth + 1, record))
            else:
                records.append(record)
                stack.append((record.path, children, depth + 1, None))

        self._logger.debug("Walk complete", root=self.root, records=len(records))
        return records

    def matches(self) -> List[FileRecord]:
        """Enumerate the tree and keep records passing every filter.

        Raises:
            WalkError: If enumeration fails
        """
        records = self.enumerate()
        matched = FilterEngine(self._config).filter(records)
        self._logger.debug("Filtered records", total=len(records), matched=len(matched))
        return matched

    def _can_descend(self, depth: int) -> bool:
        return self.max_depth is None or depth < self.max_depth

    def _list_dir(self, path: str) -> List[str]:
        """Read all child names of a directory, closing the handle before returning."""
        try:
            with os.scandir(path) as it:
                return [entry.name for entry in it]
        except OSError as e:
            raise WalkError.from_os_error(path, e) from e

    def _make_record(self, path: str, name: str) -> FileRecord:
        try:
            path.encode("utf-8")
        except UnicodeEncodeError as e:
            raise WalkError(
                os.fsencode(path).decode("utf-8", "replace"),
                "path is not valid UTF-8",
                ErrorCode.ENCODING_ERROR,
            ) from e

        try:
            st = self._stat(path)
        except OSError as e:
            raise WalkError.from_os_error(path, e) from e

        return FileRecord.from_stat(path, st, name=name)
