"""filefind Actions.

Post-processing applied to matched records:
- OutputFormatter: plain or Jinja2-templated output lines
- CommandRunner: per-record command execution
"""

from .formatter import FormatError, OutputFormatter
from .runner import CommandRunner, ExecError

__all__ = [
    "OutputFormatter",
    "FormatError",
    "CommandRunner",
    "ExecError",
]
