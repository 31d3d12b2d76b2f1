#!/usr/bin/env python3
"""Command-line interface for filefind.

This module provides the CLI for searching a directory tree:
- Argument parsing and validation
- User/group name resolution
- Configuration file loading and merging
- Logging setup

Example:
    >>> from filefind.cli import parse_arguments
    >>> args = parse_arguments(['src', '--name', '*.py', '--type', 'f'])
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from filefind.core.constants import (
    FILEFIND_VERSION,
    PROGRAM_NAME,
    ConfigKey,
    ErrorCode,
    FileFindError,
)
from filefind.core.validators import (
    parse_id,
    parse_permissions,
    resolve_group,
    resolve_user,
    validate_command,
    validate_file_type,
    validate_max_depth,
)
from filefind.infrastructure.config_manager import (
    CONFIG_SCHEMA,
    USER_CONFIG_PATH,
    ConfigManager,
    ConfigSource,
)
from filefind.infrastructure.logger import Logger, set_global_logger

# Version information
VERSION = FILEFIND_VERSION
DESCRIPTION = "Find files"


class CLIError(FileFindError):
    """Exception raised for CLI-related errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed and validated arguments namespace

    Raises:
        SystemExit: On unknown options or --help/--version
        ValidationError: If an option value is invalid
        CLIError: If the configuration file path is unusable
    """
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Patterns work with wildcards, a wildcard matches every set of characters.
For example, `*.py` will match all the files ending in .py.
Repeated --name or --path patterns must all match.

Examples:
  # Python files below src
  filefind src --name '*.py' --type f

  # Directories owned by uid 1000, children listed before their parent
  filefind /srv --type d --uid 1000 --depth

  # Count lines of every setuid file
  filefind /usr/bin --perms 4755 --exec 'wc -l {}'
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )

    parser.add_argument(
        "dir",
        nargs="?",
        default=None,
        help="The directory to search in (default: .)",
    )

    # Filters
    filter_group = parser.add_argument_group("filters")

    filter_group.add_argument(
        "-n",
        "--name",
        metavar="PAT",
        action="append",
        default=[],
        help="File name matches pattern PAT (repeatable)",
    )

    filter_group.add_argument(
        "-p",
        "--path",
        metavar="PAT",
        action="append",
        default=[],
        help="File path matches pattern PAT (repeatable)",
    )

    filter_group.add_argument(
        "-t",
        "--type",
        metavar="T",
        help="File is of type T: `f' for file, `d' for directory",
    )

    filter_group.add_argument(
        "-U",
        "--uid",
        metavar="ID",
        help="File owner has UID ID",
    )

    filter_group.add_argument(
        "-G",
        "--gid",
        metavar="ID",
        help="File owner belongs to the group that has GID ID",
    )

    filter_group.add_argument(
        "-u",
        "--user",
        metavar="NAME",
        help="File owner has username NAME",
    )

    filter_group.add_argument(
        "-g",
        "--group",
        metavar="NAME",
        help="File owner belongs to the group named NAME",
    )

    filter_group.add_argument(
        "-P",
        "--perms",
        metavar="BITS",
        help="File has permission bits set to BITS (octal)",
    )

    # Traversal
    walk_group = parser.add_argument_group("traversal")

    walk_group.add_argument(
        "-d",
        "--depth",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="List directory contents before the directory itself (--no-depth: parent first)",
    )

    walk_group.add_argument(
        "-m",
        "--maxdepth",
        metavar="N",
        help="Descend at most N levels below the starting directory",
    )

    # Actions
    action_group = parser.add_argument_group("actions")

    action_group.add_argument(
        "-x",
        "--exec",
        metavar="COMMAND",
        dest="execute",
        help="Command to run for each file; `{}' is replaced by the file path",
    )

    action_group.add_argument(
        "-f",
        "--format",
        metavar="TEMPLATE",
        help="Jinja2 template printed for each file (e.g. '{{ mode }} {{ path }}')",
    )

    # Configuration and logging
    config_group = parser.add_argument_group("configuration options")

    config_group.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="Configuration file path (YAML format)",
    )

    config_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    config_group.add_argument(
        "--log-file",
        metavar="FILE",
        help="Write log messages to FILE",
    )

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments and convert values in place.

    Numeric ids win over user/group names when both are given.

    Args:
        args: Parsed arguments namespace

    Raises:
        ValidationError: If an option value is invalid
        CLIError: If the configuration file is unusable
    """
    args.type = validate_file_type(args.type)
    args.uid = parse_id(args.uid, "uid")
    args.gid = parse_id(args.gid, "gid")
    args.perms = parse_permissions(args.perms)
    args.maxdepth = validate_max_depth(args.maxdepth)
    args.execute = validate_command(args.execute)

    if args.uid is None and args.user:
        args.uid = resolve_user(args.user)

    if args.gid is None and args.group:
        args.gid = resolve_group(args.group)

    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}", ErrorCode.NOT_FOUND)

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively remove None values and empty sections."""
    cleaned = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = _drop_none(value)
            if not value:
                continue
        if value is None:
            continue
        cleaned[key] = value
    return cleaned


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build configuration dictionary from command-line arguments.

    Only options that were given end up in the result, so unset options fall
    back to the configuration file, environment and defaults.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    config = {
        ConfigKey.ROOT: {
            "search": {
                "root": args.dir,
                "depth": args.depth,
                "maxdepth": args.maxdepth,
            },
            "output": {
                "format": args.format,
            },
            "logging": {
                "level": "DEBUG" if args.debug else None,
                "file": args.log_file,
            },
        }
    }
    return _drop_none(config)


def load_configuration(args: argparse.Namespace) -> ConfigManager:
    """
    Assemble the configuration for one run.

    Loads ``--config`` if given, otherwise the user configuration file when it
    exists, then layers command-line values on top.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configured ConfigManager

    Raises:
        ConfigError: If a configuration file is invalid
    """
    config = ConfigManager()

    if args.config:
        config.load_file(args.config, ConfigSource.USER_CONFIG)
    elif USER_CONFIG_PATH.expanduser().is_file():
        config.load_file(str(USER_CONFIG_PATH), ConfigSource.USER_CONFIG)

    config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    config.validate_schema(CONFIG_SCHEMA)

    return config


def setup_logging(args: argparse.Namespace, config: ConfigManager) -> Logger:
    """
    Setup logging based on arguments and configuration.

    Args:
        args: Parsed arguments namespace
        config: Configuration manager

    Returns:
        Configured logger instance, also installed as the global logger

    Raises:
        CLIError: If the configured level is unknown or the log file cannot be opened
    """
    log_level = "DEBUG" if args.debug else config.get(ConfigKey.LOGGING_LEVEL, "WARNING")
    log_file = config.get(ConfigKey.LOGGING_FILE)

    try:
        logger = Logger(PROGRAM_NAME, level=log_level)
    except ValueError as e:
        raise CLIError(str(e))

    if log_file:
        try:
            logger.log_to_file(log_file)
        except OSError as e:
            raise CLIError(f"Cannot open log file {log_file}: {e.strerror}", ErrorCode.IO_ERROR)

    set_global_logger(logger)
    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Handles argument parsing, configuration and logging, then passes control
    to filefind.main for the search itself.

    Returns:
        Exit code (0 on success, 1 on any error, 130 when interrupted)
    """
    try:
        args = parse_arguments(argv)

        config = load_configuration(args)

        logger = setup_logging(args, config)

        from filefind.main import run_filefind

        return run_filefind(args, config, logger)

    except FileFindError as e:
        print(f"{PROGRAM_NAME}: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    except BrokenPipeError:
        # Reader went away (e.g. piped into head); silence the flush at exit
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        os.close(devnull)
        return 1


if __name__ == "__main__":
    sys.exit(main())
