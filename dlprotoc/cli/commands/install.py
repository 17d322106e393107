"""
Install command implementation.

Downloads, verifies and extracts protoc for the current platform.
"""

import logging

from dlprotoc.core.config import load_config
from dlprotoc.installer import ProtocInstaller, protoc_executable

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    With --destination, installs into that directory. Otherwise installs into
    the build output directory and prints the protoc path.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_config(args.config)
    installer = ProtocInstaller(config=config)

    if args.destination is not None:
        destination = installer.install_verified(
            args.destination, version=args.protoc_version
        )
        print(protoc_executable(destination))
        return 0

    if args.protoc_version:
        logger.error("--protoc-version requires --destination")
        return 1

    result = installer.install_to_build_output()
    print(result.protoc_path)
    return 0
