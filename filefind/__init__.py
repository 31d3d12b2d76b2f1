"""filefind - find files by name, path, type, owner and permissions.

The search core is made of two parts:
- filefind.rules: wildcard pattern compiler and record filter engine
- filefind.walker: directory walker producing file records

Example:
    >>> from filefind import Pattern, Walker
    >>> walker = Walker("src", max_depth=3)
    >>> walker.add_name_patterns([Pattern.compile("*.py")])
    >>> [record.path for record in walker.matches()]
"""

from filefind.core.constants import FILEFIND_VERSION, FileFindError
from filefind.rules import FilterConfig, FilterEngine, Pattern, PatternSet, filter_records
from filefind.walker import FileRecord, Walker, WalkError

__version__ = FILEFIND_VERSION

__all__ = [
    "FileFindError",
    "FileRecord",
    "FilterConfig",
    "FilterEngine",
    "Pattern",
    "PatternSet",
    "Walker",
    "WalkError",
    "filter_records",
]
