#!/usr/bin/env python3
"""Per-record command execution (``--exec``).

The command string is split like a shell would split it; the first word is
the program and every ``{}`` in the remaining words is replaced by the
record's path. One process runs per record, in result order. All commands run
before any failure is reported, and the first non-zero exit status is raised.

Example:
    >>> runner = CommandRunner("wc -l {}")
    >>> runner.run(records)
    [0, 0]
"""

import shlex
import subprocess
from typing import Iterable, List, Optional

from filefind.core.constants import ErrorCode, FileFindError
from filefind.core.validators import ValidationError, validate_command
from filefind.infrastructure.logger import Logger, get_logger
from filefind.walker.records import FileRecord

PLACEHOLDER = "{}"


class ExecError(FileFindError):
    """Raised when a command cannot be started or exits non-zero."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.EXEC_FAILED):
        super().__init__(message, error_code)


class CommandRunner:
    """Runs a command template once per file record."""

    def __init__(self, command: str, logger: Optional[Logger] = None):
        """Initialize runner.

        Args:
            command: Command line with ``{}`` placeholders
            logger: Logger instance (default: global logger)

        Raises:
            ValidationError: If the command is empty or has unbalanced quotes
        """
        validate_command(command)
        try:
            words = shlex.split(command)
        except ValueError as e:
            raise ValidationError(f"Invalid command `{command}': {e}")

        if not words:
            raise ValidationError("Command cannot be empty")

        self.command = command
        self.program = words[0]
        self.arguments = words[1:]
        self._logger = logger or get_logger()

    def build_argv(self, record: FileRecord) -> List[str]:
        """Build the argument vector for one record."""
        return [self.program] + [arg.replace(PLACEHOLDER, record.path) for arg in self.arguments]

    def run(self, records: Iterable[FileRecord]) -> List[int]:
        """Run the command for every record.

        Args:
            records: Records to process, in order

        Returns:
            Exit status of each command

        Raises:
            ExecError: If a command cannot be started, or after all commands
                ran, if any of them exited non-zero
        """
        codes: List[int] = []

        for record in records:
            argv = self.build_argv(record)
            self._logger.debug("Running command", argv=" ".join(argv))
            try:
                completed = subprocess.run(argv)
            except OSError as e:
                raise ExecError(f"Failed to summon command: `{shlex.join(argv)}` ({e.strerror})")
            codes.append(completed.returncode)

        for index, code in enumerate(codes):
            if code != 0:
                raise ExecError(f"Command #{index} failed, exit code: {code}.")

        return codes
