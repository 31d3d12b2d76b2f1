#!/usr/bin/env python3
"""Structured logging for filefind.

Messages carry key-value context rendered after a ``|``, e.g.::

    2024-05-01 10:00:00 - filefind - DEBUG - Walk complete | root=. records=12

Log output goes to stderr, plus an optional rotating file, so it never mixes
with search results printed on stdout. Context can be scoped per thread with
``Logger.add_context``.
"""

import logging
import logging.handlers
import sys
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, level: Union["LogLevel", int, str]) -> "LogLevel":
        """Resolve a level given as enum, number or case-insensitive name.

        Raises:
            ValueError: If the level is unknown
        """
        if isinstance(level, str):
            try:
                return cls[level.strip().upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {level}") from None
        return cls(level)


def _with_format(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


class Logger:
    """Wrapper around a stdlib logger that appends structured context."""

    _scopes = threading.local()

    def __init__(
        self,
        name: str = "filefind",
        level: Union[LogLevel, str] = LogLevel.WARNING,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Name of the underlying stdlib logger
            level: Minimum level to emit
            handlers: Handlers replacing the default stderr handler

        Raises:
            ValueError: If the level is unknown
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.set_level(level)

        if handlers is None:
            handlers = [_with_format(logging.StreamHandler(sys.stderr))]

        # A second Logger with the same name takes over the stdlib logger
        self.logger.handlers = list(handlers)
        self.logger.propagate = False

    def log_to_file(self, filename: Union[str, Path]) -> logging.Handler:
        """Also write messages to a rotating log file.

        Returns:
            The handler that was added

        Raises:
            OSError: If the file cannot be opened
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        )
        self.logger.addHandler(_with_format(handler))
        return handler

    def set_level(self, level: Union[LogLevel, str]) -> None:
        self.logger.setLevel(LogLevel.parse(level))

    def get_level(self) -> LogLevel:
        return LogLevel(self.logger.level)

    @classmethod
    def _scope_stack(cls) -> List[Dict[str, Any]]:
        if not hasattr(cls._scopes, "stack"):
            cls._scopes.stack = []
        return cls._scopes.stack

    @contextmanager
    def add_context(self, **kwargs) -> Iterator[None]:
        """Attach context to every message logged by this thread in the block.

        Example:
            >>> with logger.add_context(root="/srv"):
            ...     logger.info("Search finished")
        """
        stack = self._scope_stack()
        stack.append(kwargs)
        try:
            yield
        finally:
            stack.pop()

    def _log(self, level: LogLevel, msg: str, fields: Dict[str, Any]) -> None:
        if not self.logger.isEnabledFor(level):
            return

        context: Dict[str, Any] = {}
        for scope in self._scope_stack():
            context.update(scope)
        context.update(fields)

        if context:
            msg = msg + " | " + " ".join(f"{k}={v}" for k, v in context.items())
        self.logger.log(level, msg, extra={"context": context})

    def debug(self, msg: str, **context) -> None:
        """Log debug message.

        Args:
            msg: Log message
            **context: Key-value pairs appended to the message
        """
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context) -> None:
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context) -> None:
        self._log(LogLevel.WARNING, msg, context)

    def error(self, msg: str, **context) -> None:
        self._log(LogLevel.ERROR, msg, context)


_global_logger: Optional[Logger] = None


def get_logger(name: str = "filefind") -> Logger:
    """Return the global logger, creating a default one for a new name."""
    global _global_logger
    if _global_logger is None or _global_logger.name != name:
        _global_logger = Logger(name=name)
    return _global_logger


def set_global_logger(logger: Optional[Logger]) -> None:
    """Install the logger returned by get_logger (None resets it)."""
    global _global_logger
    _global_logger = logger
