"""
Versions command implementation.

Lists the pinned protoc releases.
"""

import logging

from dlprotoc.core.platform import detect_platform
from dlprotoc.core.versions import KNOWN_RELEASES, LATEST_VERSION

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the versions command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    releases = KNOWN_RELEASES
    if not args.all_platforms:
        current = detect_platform()
        releases = [
            r for r in releases if r.os == current.os and r.arch == current.arch
        ]
        logger.debug(f"Filtering releases for {current}")

    for release in releases:
        marker = " (latest)" if release.version == LATEST_VERSION else ""
        platform = f"{release.os}-{release.arch}"
        print(f"{release.version:<8} {platform:<16} {release.sha256}{marker}")

    return 0
