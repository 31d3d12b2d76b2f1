#!/usr/bin/env python3
"""Output formatting for matched records using Jinja2.

This module renders file records for display:
- Plain mode: one path per record
- Template mode: a Jinja2 template rendered once per record

Template variables: ``name``, ``path``, ``is_dir``, ``uid``, ``gid``,
``perms`` (int), ``mode`` (4-digit octal string) and ``type`` (``d``/``f``).

Example:
    >>> formatter = OutputFormatter("{{ mode }} {{ path }}")
    >>> formatter.render(record)
    '0644 ./setup.py'
"""

from typing import Iterable, List, Optional

import jinja2

from filefind.core.constants import ErrorCode, FileFindError
from filefind.walker.records import FileRecord


class FormatError(FileFindError):
    """Raised when an output template cannot be compiled or rendered."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


class OutputFormatter:
    """Renders file records as text lines."""

    def __init__(self, template: Optional[str] = None, separator: str = "\n"):
        """Initialize formatter.

        Args:
            template: Jinja2 template source, or None to print paths
            separator: Text placed between rendered records

        Raises:
            FormatError: If the template has a syntax error
        """
        self.separator = separator
        self._source = template
        self._template: Optional[jinja2.Template] = None

        if template is not None:
            env = jinja2.Environment(
                undefined=jinja2.StrictUndefined,
                autoescape=False,
                keep_trailing_newline=True,
            )
            try:
                self._template = env.from_string(template)
            except jinja2.TemplateSyntaxError as e:
                raise FormatError(f"Template error: {e}")

    @property
    def template(self) -> Optional[str]:
        return self._source

    def render(self, record: FileRecord) -> str:
        """Render a single record.

        Raises:
            FormatError: If the template references an unknown field
        """
        if self._template is None:
            return record.path

        try:
            return self._template.render(**record.as_dict())
        except jinja2.TemplateError as e:
            raise FormatError(f"Template error: {e}")

    def render_all(self, records: Iterable[FileRecord]) -> List[str]:
        """Render every record, preserving order."""
        return [self.render(record) for record in records]

    def format_all(self, records: Iterable[FileRecord]) -> str:
        """Render every record and join them with the separator."""
        return self.separator.join(self.render_all(records))
