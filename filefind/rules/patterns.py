#!/usr/bin/env python3
"""Wildcard pattern compiler and matcher for file names and paths.

This module provides the glob matching used by filefind filters:
- A single wildcard ``*`` matching any run of characters (including none)
- Compilation of a glob into an ordered list of anchored/floating segments
- Greedy, leftmost, single-pass matching (no backtracking)
- Pattern sets combined with AND logic

Matching is greedy: each floating segment binds to its leftmost
occurrence and is never revisited, and the next search starts on the last
character of that occurrence. Anchors are tested against the whole subject
independently of floating segments. As a result ``*ab*bc*`` and ``ab*bc``
both accept ``"abc"``, which a backtracking glob would reject.

Example:
    >>> pattern = Pattern.compile("src*m*.rs")
    >>> pattern.matches("src/main.rs")
    True
    >>> Pattern.compile("*.rs").matches("lib.rs.bak")
    False
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from filefind.core.constants import WILDCARD


class SegmentKind(Enum):
    """How a literal segment constrains the subject string."""

    START = "start"  # Subject begins with literal
    END = "end"  # Subject ends with literal
    CONTAINS = "contains"  # Literal occurs in the remaining window
    EXACT = "exact"  # Subject equals literal (glob has no wildcard)


@dataclass(frozen=True)
class Segment:
    """A single literal piece of a compiled pattern."""

    kind: SegmentKind
    literal: str


@dataclass(frozen=True)
class Pattern:
    """A compiled wildcard pattern.

    Patterns are immutable once compiled and can be shared between filters.
    """

    source: str
    segments: Tuple[Segment, ...]

    @classmethod
    def compile(cls, glob: str) -> "Pattern":
        """Compile a glob string.

        Compilation never fails: every string is a valid glob.

        Args:
            glob: Pattern text, ``*`` being the only special character

        Returns:
            Compiled pattern
        """
        count = glob.count(WILDCARD)
        if count == 0:
            return cls(source=glob, segments=(Segment(SegmentKind.EXACT, glob),))

        anchored_start = not glob.startswith(WILDCARD)
        anchored_end = not glob.endswith(WILDCARD)

        segments: List[Segment] = []
        for index, piece in enumerate(glob.split(WILDCARD)):
            if index == 0 and anchored_start:
                segments.append(Segment(SegmentKind.START, piece))
            elif index == count and anchored_end:
                segments.append(Segment(SegmentKind.END, piece))
            elif piece:
                # Empty floating pieces come from adjacent or edge wildcards
                segments.append(Segment(SegmentKind.CONTAINS, piece))

        if not segments:
            # Glob made only of wildcards: accept everything
            segments.append(Segment(SegmentKind.START, ""))

        return cls(source=glob, segments=tuple(segments))

    @property
    def has_wildcard(self) -> bool:
        """Whether the source glob contains a wildcard."""
        return WILDCARD in self.source

    def matches(self, subject: str) -> bool:
        """Check whether subject satisfies every segment.

        Args:
            subject: File name or path to test

        Returns:
            True if all segments match
        """
        window = 0

        for segment in self.segments:
            literal = segment.literal

            if segment.kind is SegmentKind.START:
                if not subject.startswith(literal):
                    return False
            elif segment.kind is SegmentKind.END:
                if not subject.endswith(literal):
                    return False
            elif segment.kind is SegmentKind.EXACT:
                if subject != literal:
                    return False
            else:
                found = subject.find(literal, window)
                if found < 0:
                    return False
                # Next search starts on the last character of this occurrence
                window = found + len(literal) - 1

        return True

    def __str__(self) -> str:
        return self.source


def compile_pattern(glob: str) -> Pattern:
    """Compile a glob string into a Pattern."""
    return Pattern.compile(glob)


class PatternSet:
    """Ordered conjunction of patterns.

    A subject matches the set only when it matches every pattern. An empty set
    places no constraint and matches everything.
    """

    def __init__(self, patterns: Iterable[Pattern] = ()):
        """Initialize pattern set.

        Args:
            patterns: Initial compiled patterns
        """
        self._patterns: List[Pattern] = list(patterns)

    def extend(self, patterns: Iterable[Pattern]) -> None:
        """Append several compiled patterns."""
        self._patterns.extend(patterns)

    def matches(self, subject: str) -> bool:
        """Check if subject matches all patterns.

        Args:
            subject: String to check

        Returns:
            True if every pattern matches (vacuously true when empty)
        """
        return all(pattern.matches(subject) for pattern in self._patterns)

    def __len__(self) -> int:
        """Return number of patterns."""
        return len(self._patterns)

    def __bool__(self) -> bool:
        """Return True if any patterns are registered."""
        return bool(self._patterns)
