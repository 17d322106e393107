"""
Shared utilities for CLI commands.
"""

import argparse
import logging
import sys


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging based on verbose/quiet flags.

    Log output goes to stderr so command output on stdout stays clean.
    """
    if verbose:
        level = logging.DEBUG
        format_str = "%(levelname)s [%(name)s] %(message)s"
    elif quiet:
        level = logging.ERROR
        format_str = "%(levelname)s: %(message)s"
    else:
        level = logging.INFO
        format_str = "%(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,  # Reconfigure if already configured
    )
