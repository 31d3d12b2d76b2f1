#!/usr/bin/env python3
"""Filter engine for file record selection.

This module provides attribute- and pattern-based filtering for filefind:
- Name and path patterns (every pattern must match)
- File type filter (regular entries vs directories)
- Exact owner uid / gid match
- Exact permission bits match (lower 12 bits of the mode)

A record passes when it satisfies every configured predicate; predicates left
unset place no constraint. Filtering is pure and keeps record order.

Example:
    >>> config = FilterConfig()
    >>> config.add_name_patterns([Pattern.compile("*.py")])
    >>> config.set_file_type("f")
    >>> FilterEngine(config).filter(records)
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Optional

from filefind.core.constants import FileType
from filefind.core.validators import ValidationError, validate_file_type
from filefind.rules.patterns import Pattern, PatternSet

if TYPE_CHECKING:
    from filefind.walker.records import FileRecord


@dataclass
class FilterConfig:
    """Accumulated filter predicates.

    Any subset may be unset, meaning no constraint for that attribute.
    """

    name_patterns: PatternSet = field(default_factory=PatternSet)
    path_patterns: PatternSet = field(default_factory=PatternSet)
    file_type: Optional[str] = None  # 'f' | 'd'
    uid: Optional[int] = None
    gid: Optional[int] = None
    perms: Optional[int] = None

    def add_name_patterns(self, patterns: Iterable[Pattern]) -> None:
        """Add patterns the base name must match."""
        self.name_patterns.extend(patterns)

    def add_path_patterns(self, patterns: Iterable[Pattern]) -> None:
        """Add patterns the full path must match."""
        self.path_patterns.extend(patterns)

    def set_file_type(self, file_type: Optional[str]) -> None:
        """Set the file type filter.

        Args:
            file_type: ``"f"`` for non-directories, ``"d"`` for directories

        Raises:
            ValidationError: If file_type is not a known type character
        """
        self.file_type = validate_file_type(file_type)

    def set_uid(self, uid: Optional[int]) -> None:
        self.uid = uid

    def set_gid(self, gid: Optional[int]) -> None:
        self.gid = gid

    def set_perms(self, perms: Optional[int]) -> None:
        self.perms = perms

    def is_empty(self) -> bool:
        """Return True if no predicate is configured."""
        return (
            not self.name_patterns
            and not self.path_patterns
            and self.file_type is None
            and self.uid is None
            and self.gid is None
            and self.perms is None
        )


class FilterEngine:
    """Applies a FilterConfig to file records."""

    def __init__(self, config: Optional[FilterConfig] = None):
        """Initialize filter engine.

        Args:
            config: Predicates to apply (default: no constraints)
        """
        self._config = config if config is not None else FilterConfig()

    @property
    def config(self) -> FilterConfig:
        return self._config

    def accepts(self, record: "FileRecord") -> bool:
        """Check if a record satisfies every configured predicate.

        Args:
            record: File record to evaluate

        Returns:
            True if the record passes
        """
        config = self._config

        if not config.name_patterns.matches(record.name):
            return False

        if not config.path_patterns.matches(record.path):
            return False

        if not self._matches_type(record, config.file_type):
            return False

        if config.uid is not None and record.uid != config.uid:
            return False

        if config.gid is not None and record.gid != config.gid:
            return False

        if config.perms is not None and record.perms != config.perms:
            return False

        return True

    def _matches_type(self, record: "FileRecord", file_type: Optional[str]) -> bool:
        if file_type is None:
            return True
        if file_type == FileType.FILE.value:
            return not record.is_dir
        if file_type == FileType.DIRECTORY.value:
            return record.is_dir
        raise ValidationError(f"Invalid file type: {file_type}.")

    def filter(self, records: Iterable["FileRecord"]) -> List["FileRecord"]:
        """Keep the records that pass, in their original order.

        Args:
            records: Records to filter

        Returns:
            New list of surviving records
        """
        return [record for record in records if self.accepts(record)]


def filter_records(
    records: Iterable["FileRecord"], config: Optional[FilterConfig] = None
) -> List["FileRecord"]:
    """Filter records with a one-off FilterEngine."""
    return FilterEngine(config).filter(records)
