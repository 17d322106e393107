"""
Hashes command implementation.

Same output as the protochashes tool.
"""

from dlprotoc.cli.protochashes import print_releases
from dlprotoc.core.config import load_config


def run(args) -> int:
    """
    Run the hashes command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args.config)
    return print_releases(
        args.protoc_version, timeout=config.timeout, base_url=config.release_base_url
    )
