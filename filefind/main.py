#!/usr/bin/env python3
"""Search controller for filefind.

This module handles:
- Building the Walker from arguments and configuration
- Compiling name/path patterns
- Running the search
- Printing results or running --exec commands on them

Example:
    >>> from filefind.main import run_filefind
    >>> run_filefind(args, config, logger)
"""

import argparse
import sys
from typing import List, Optional, TextIO

from filefind.actions.formatter import OutputFormatter
from filefind.actions.runner import CommandRunner
from filefind.core.constants import ConfigKey, FileFindError
from filefind.infrastructure.config_manager import ConfigManager
from filefind.infrastructure.logger import Logger
from filefind.rules.patterns import Pattern
from filefind.walker.records import FileRecord
from filefind.walker.walker import Walker


class FileFindMain:
    """
    Main class for one filefind run.

    Owns the walker and the post-processing action for a single search.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        config: ConfigManager,
        logger: Logger,
        stdout: Optional[TextIO] = None,
    ):
        """
        Initialize the search controller.

        Args:
            args: Parsed and validated command-line arguments
            config: Configuration manager
            logger: Logger instance
            stdout: Output stream for results (default: sys.stdout)
        """
        self.args = args
        self.config = config
        self.logger = logger
        self.stdout = stdout if stdout is not None else sys.stdout

    def build_walker(self) -> Walker:
        """
        Create a Walker with traversal options and every requested filter.

        Returns:
            Configured walker

        Raises:
            ValidationError: If a configured value is invalid
        """
        root = self.config.get(ConfigKey.SEARCH_ROOT, ".")
        depth_first = bool(self.config.get(ConfigKey.SEARCH_DEPTH, False))
        max_depth = self.config.get(ConfigKey.SEARCH_MAXDEPTH)

        walker = Walker(root, depth_first=depth_first, max_depth=max_depth, logger=self.logger)

        walker.add_name_patterns(Pattern.compile(glob) for glob in self.args.name or [])
        walker.add_path_patterns(Pattern.compile(glob) for glob in self.args.path or [])
        walker.set_file_type(self.args.type)
        walker.set_uid(self.args.uid)
        walker.set_gid(self.args.gid)
        walker.set_perms(self.args.perms)

        return walker

    def search(self) -> List[FileRecord]:
        """
        Run the search.

        Returns:
            Matching records in traversal order

        Raises:
            WalkError: If the tree cannot be fully enumerated
        """
        walker = self.build_walker()
        with self.logger.add_context(root=walker.root):
            records = walker.matches()
            self.logger.info("Search finished", matched=len(records))
        return records

    def emit(self, records: List[FileRecord]) -> None:
        """
        Print the records, or run the --exec command on each of them.

        Raises:
            FormatError: If the output template fails
            ExecError: If a command cannot be run or exits non-zero
        """
        if self.args.execute:
            CommandRunner(self.args.execute, logger=self.logger).run(records)
            return

        formatter = OutputFormatter(self.config.get(ConfigKey.OUTPUT_FORMAT))
        for line in formatter.render_all(records):
            print(line, file=self.stdout)

    def run(self) -> int:
        """
        Run search and post-processing.

        Returns:
            Exit code (0 for success)

        Raises:
            FileFindError: On any failure; nothing is printed for a failed walk
        """
        try:
            records = self.search()
            self.emit(records)
        except FileFindError as e:
            self.logger.debug("Search failed", error=type(e).__name__, code=e.error_code.name)
            raise

        return 0


def run_filefind(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    """
    Main entry point for running a search.

    Args:
        args: Parsed command-line arguments
        config: Configuration manager
        logger: Logger instance

    Returns:
        Exit code (0 for success)
    """
    return FileFindMain(args, config, logger).run()


def main():
    """
    Entry point when run as standalone script.

    Typically called via cli.py, but can be run directly for testing.
    """
    from filefind.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
