"""filefind Rules System.

This module provides record selection:
- Pattern: wildcard glob compiled into anchored/floating segments
- PatternSet: patterns combined with AND logic
- FilterConfig / FilterEngine: conjunction of pattern and attribute predicates
"""

from .engine import FilterConfig, FilterEngine, filter_records
from .patterns import Pattern, PatternSet, Segment, SegmentKind, compile_pattern

__all__ = [
    # Pattern matching
    "SegmentKind",
    "Segment",
    "Pattern",
    "PatternSet",
    "compile_pattern",
    # Filter engine
    "FilterConfig",
    "FilterEngine",
    "filter_records",
]
