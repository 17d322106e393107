"""
Archive extraction and safe directory publishing for dlprotoc.

This module provides:
- In-memory ZIP extraction with directory traversal protection
- Preservation of the POSIX permission bits recorded in the archive
  (notably the executable bit on bin/protoc)
- Staging directories that are renamed into place once complete, so a
  concurrent reader never observes a half-extracted tree

Malformed archives raise ArchiveError; filesystem failures raise
FilesystemError. Nothing here retries.
"""

import io
import logging
import os
import shutil
import stat
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from dlprotoc.core.exceptions import (
    ArchiveError,
    FilesystemError,
    InsecureArchiveError,
)

logger = logging.getLogger(__name__)

IS_UNIX = os.name != "nt"

# Errors zipfile raises while reading a corrupt central directory
_ARCHIVE_OPEN_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    NotImplementedError,
    ValueError,
)

# Errors zipfile raises for corrupt, encrypted or unsupported members
_ARCHIVE_MEMBER_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
    ValueError,
)


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _unix_mode(info: zipfile.ZipInfo) -> int:
    """Permission bits stored in the upper half of external_attr (0 if none)."""
    return stat.S_IMODE(info.external_attr >> 16)


def _extract_member(zf: zipfile.ZipFile, info: zipfile.ZipInfo, destination: Path) -> Path:
    target = destination / info.filename

    if info.is_dir():
        target.mkdir(parents=True, exist_ok=True)
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    with zf.open(info) as source, open(target, "wb") as out:
        shutil.copyfileobj(source, out)

    mode = _unix_mode(info)
    if IS_UNIX and mode:
        os.chmod(target, mode)

    return target


def extract_zip_bytes(destination: Union[str, Path], data: bytes) -> List[Path]:
    """
    Extract a ZIP archive held in memory into destination.

    All member names are validated before anything is written. The relative
    directory structure is recreated and permission bits recorded in the
    archive are applied on POSIX systems.

    Extracting into a directory that already holds files is not supported;
    use a fresh directory (see staging_directory).

    Args:
        destination: Directory to extract into (created if missing)
        data: ZIP archive bytes

    Returns:
        Paths of the extracted entries

    Raises:
        ArchiveError: If the archive is malformed
        InsecureArchiveError: If a member escapes destination
        FilesystemError: If writing fails

    Example:
        >>> extract_zip_bytes(Path("out/protoc_zip"), verified_bytes)
    """
    destination = Path(destination)

    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except _ARCHIVE_OPEN_ERRORS as e:
        raise ArchiveError.with_prefix("zip error", e) from e

    with zf:
        members = zf.infolist()

        # Validate all paths first
        for info in members:
            _validate_archive_path(info.filename, destination)

        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError.with_prefix("io error", e) from e

        extracted = []
        for info in members:
            try:
                extracted.append(_extract_member(zf, info, destination))
            except _ARCHIVE_MEMBER_ERRORS as e:
                raise ArchiveError.with_prefix(
                    f"zip error in member '{info.filename}'", e
                ) from e
            except OSError as e:
                raise FilesystemError.with_prefix("io error", e) from e

    logger.debug(f"Extracted {len(extracted)} entries to {destination}")
    return extracted


# ============================================================================
# Safe Directory Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


@contextmanager
def staging_directory(destination: Union[str, Path]) -> Iterator[Path]:
    """
    Create an empty sibling of destination to build its contents in.

    The staging directory lives next to destination (same filesystem, so the
    final rename is atomic) and is removed on exit unless it was published.

    Raises:
        FilesystemError: If the staging directory cannot be created

    Example:
        >>> with staging_directory(dest) as staging:
        ...     extract_zip_bytes(staging, data)
        ...     publish_directory(staging, dest)
    """
    destination = Path(destination)
    parent = destination.parent

    try:
        parent.mkdir(parents=True, exist_ok=True)
        staging = Path(
            tempfile.mkdtemp(dir=parent, prefix=f".{destination.name}.", suffix=".tmp")
        )
    except OSError as e:
        raise FilesystemError.with_prefix("io error", e) from e

    try:
        yield staging
    except BaseException:
        # Cleanup failures must not mask the error that aborted the install
        if staging.exists():
            try:
                safe_rmtree(staging, require_prefix=parent)
            except FilesystemError as cleanup_error:
                logger.warning(
                    f"Could not remove staging directory {staging}: {cleanup_error}"
                )
        raise

    if staging.exists():
        logger.debug(f"Removing staging directory: {staging}")
        safe_rmtree(staging, require_prefix=parent)


def publish_directory(staging: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Atomically rename a completed staging directory to destination.

    Raises:
        FilesystemError: If destination already exists or the rename fails
    """
    staging = Path(staging)
    destination = Path(destination)

    if destination.exists():
        raise FilesystemError(f"Refusing to replace existing directory: {destination}")

    try:
        staging.rename(destination)
    except OSError as e:
        raise FilesystemError.with_prefix("io error", e) from e

    logger.debug(f"Published {staging} to {destination}")
    return destination


__all__ = [
    "extract_zip_bytes",
    "safe_rmtree",
    "staging_directory",
    "publish_directory",
]
