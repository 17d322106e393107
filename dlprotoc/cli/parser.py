"""
dlprotoc CLI argument parser.

This module implements the dlprotoc command-line interface using argparse.
"""

import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dlprotoc.cli.utils import ArgumentParser, configure_logging

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("dlprotoc")
except Exception:
    __version__ = "0.4.5"

logger = logging.getLogger(__name__)


class CLI:
    """dlprotoc command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = ArgumentParser(
            prog="dlprotoc",
            description="dlprotoc - download a pinned, verified protoc release",
            epilog='Use "dlprotoc COMMAND --help" for command-specific help',
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"dlprotoc {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./dlprotoc.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_versions_command(subparsers)
        self._add_hashes_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install protoc for this platform",
            description=(
                "Download the latest pinned protoc for this platform, verify it "
                "and extract it. Without --destination, installs into the build "
                "output directory named by $OUT_DIR."
            ),
        )
        parser.add_argument(
            "--destination",
            type=Path,
            metavar="PATH",
            help="Directory to extract protoc into (must not exist)",
        )
        parser.add_argument(
            "--protoc-version",
            metavar="VERSION",
            help="Pinned protoc version to install (default: latest known)",
        )

    def _add_versions_command(self, subparsers):
        """Add 'versions' subcommand."""
        parser = subparsers.add_parser(
            "versions",
            help="List pinned protoc releases",
            description="List the protoc releases dlprotoc trusts",
        )
        parser.add_argument(
            "--all-platforms",
            action="store_true",
            help="Show every platform, not only the current one",
        )

    def _add_hashes_command(self, subparsers):
        """Add 'hashes' subcommand."""
        parser = subparsers.add_parser(
            "hashes",
            help="Print registry entries for a new protoc release",
            description=(
                "Download VERSION for every platform without verification and "
                "print registry entries. Vet the output before trusting it."
            ),
        )
        parser.add_argument("protoc_version", metavar="VERSION", help="e.g. 27.0")

    def parse_args(self, args: Optional[List[str]] = None):
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        configure_logging(verbose=parsed_args.verbose, quiet=parsed_args.quiet)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "dlprotoc.cli.commands.install",
            "versions": "dlprotoc.cli.commands.versions",
            "hashes": "dlprotoc.cli.commands.hashes",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
