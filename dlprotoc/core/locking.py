"""
Cross-process locking for installs into a shared directory.

Two builds installing protoc into the same output directory are serialized
with a file lock next to the destination. Combined with the staging-rename
publish in dlprotoc.core.filesystem, a reader either sees no tree or a
complete one.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout as LockTimeout

from dlprotoc.core.exceptions import InstallLockTimeout

logger = logging.getLogger(__name__)


def lock_path_for(destination: Path) -> Path:
    """Return the lock file guarding destination (a sibling '<name>.lock')."""
    destination = Path(destination)
    return destination.parent / f"{destination.name}.lock"


@contextmanager
def install_lock(destination: Path, timeout: float = 300) -> Iterator[Path]:
    """
    Acquire the lock for installing into destination.

    Args:
        destination: Directory that will be installed
        timeout: Maximum wait time in seconds

    Yields:
        Path of the lock file

    Raises:
        InstallLockTimeout: If lock can't be acquired within timeout

    Example:
        >>> with install_lock(out_dir / "protoc_zip"):
        ...     if not (out_dir / "protoc_zip").exists():
        ...         install(...)
    """
    lock_path = lock_path_for(destination)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired install lock: {lock_path}")
            yield lock_path
            logger.debug(f"Released install lock: {lock_path}")
    except LockTimeout as e:
        logger.debug(f"Timed out waiting for install lock: {lock_path}")
        raise InstallLockTimeout(
            f"Could not acquire install lock {lock_path} after {timeout}s. "
            "Another build may be installing protoc to the same directory."
        ) from e


__all__ = ["install_lock", "lock_path_for"]
