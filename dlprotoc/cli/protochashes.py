"""
protochashes: print pinned registry entries for a protoc release.

Downloads the given protoc version for every supported OS and CPU architecture
WITHOUT verification, hashes each archive and prints a KnownRelease literal
ready to paste into dlprotoc/core/versions.py. Maintainers must vet the output
before committing it: this is how new releases become trusted.

Usage: protochashes VERSION
"""

import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional

import requests

from dlprotoc.cli.utils import ArgumentParser, configure_logging
from dlprotoc.core.config import load_config
from dlprotoc.core.download import DEFAULT_RELEASE_BASE_URL, fetch_unverified
from dlprotoc.core.exceptions import DlprotocError
from dlprotoc.core.platform import CpuArchitecture, OperatingSystem
from dlprotoc.core.verification import digest_of
from dlprotoc.core.versions import KnownRelease

logger = logging.getLogger(__name__)


def format_release_literal(release: KnownRelease) -> str:
    """
    Render a registry entry as Python source.

    Example:
        >>> print(format_release_literal(release))
            KnownRelease(
                os=OperatingSystem.LINUX,
                arch=CpuArchitecture.X86_64,
                version="27.0",
                sha256="e2bd...",
            ),
    """
    return (
        "    KnownRelease(\n"
        f"        os=OperatingSystem.{release.os.identifier},\n"
        f"        arch=CpuArchitecture.{release.arch.identifier},\n"
        f'        version="{release.version}",\n'
        f'        sha256="{release.sha256}",\n'
        "    ),"
    )


def compute_releases(
    version: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
    base_url: str = DEFAULT_RELEASE_BASE_URL,
) -> Iterator[KnownRelease]:
    """Download and hash version for every (OS, CPU architecture) pair."""
    for os in OperatingSystem.all():
        for arch in CpuArchitecture.all():
            data = fetch_unverified(
                os, arch, version, session=session, timeout=timeout, base_url=base_url
            )
            yield KnownRelease(os=os, arch=arch, version=version, sha256=digest_of(data))


def print_releases(version: str, **kwargs) -> int:
    """Print registry literals for version; return an exit code."""
    try:
        for release in compute_releases(version, **kwargs):
            print(format_release_literal(release), flush=True)
    except DlprotocError as e:
        logger.error(f"Error: {e}")
        return 1
    return 0


def create_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="protochashes",
        description="Download a protoc release for all platforms and print its hashes",
    )
    parser.add_argument("version", help="protoc version, e.g. 27.0")
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Path to configuration file (default: ./dlprotoc.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the protochashes command."""
    args = create_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=not args.verbose)

    try:
        config = load_config(args.config)
    except (DlprotocError, FileNotFoundError) as e:
        logger.error(f"Error: {e}")
        return 1

    return print_releases(
        args.version, timeout=config.timeout, base_url=config.release_base_url
    )


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
