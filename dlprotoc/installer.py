"""
Verified protoc installation.

This module orchestrates the install of a pinned protoc release:
1. Resolve the current platform
2. Look up the pinned digest for (platform, version)
3. Download the release archive (one attempt)
4. Verify the digest
5. Extract into a staging directory and rename it into place

Each step either succeeds or raises; there is no retry and no partial trust.
Extraction only starts once the digest has been verified.
"""

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import requests

from dlprotoc.core.config import DlprotocConfig, load_config
from dlprotoc.core.download import fetch_unverified
from dlprotoc.core.environment import BuildEnvironment, ProcessBuildEnvironment
from dlprotoc.core.exceptions import DlprotocError, FilesystemError
from dlprotoc.core.filesystem import (
    extract_zip_bytes,
    publish_directory,
    staging_directory,
)
from dlprotoc.core.locking import install_lock
from dlprotoc.core.platform import PlatformInfo, detect_platform
from dlprotoc.core.verification import verify_digest
from dlprotoc.core.versions import (
    KNOWN_RELEASES,
    KnownRelease,
    latest_known_version,
    lookup_digest,
)

logger = logging.getLogger(__name__)


class InstallState(enum.Enum):
    """Steps of a single install attempt."""

    START = "start"
    RESOLVE_PLATFORM = "resolve-platform"
    LOOKUP_DIGEST = "lookup-digest"
    FETCH = "fetch"
    VERIFY = "verify"
    EXTRACT = "extract"
    DONE = "done"
    FAILED = "failed"


@dataclass
class InstallResult:
    """Result of installing protoc into a build output directory."""

    destination: Path
    """Root of the extracted protoc release"""

    protoc_path: Path
    """Path to the protoc executable"""

    was_cached: bool
    """Whether the release was already installed (no download performed)"""


def protoc_executable(distribution_dir: Path) -> Path:
    """Return the protoc executable inside an extracted release."""
    return Path(distribution_dir) / "bin" / "protoc"


class ProtocInstaller:
    """
    Installs pinned protoc releases.

    Example:
        >>> installer = ProtocInstaller()
        >>> installer.install_verified(Path("build/protoc"))
        >>> result = installer.install_to_build_output()
        >>> print(result.protoc_path)
    """

    def __init__(
        self,
        config: Optional[DlprotocConfig] = None,
        session: Optional[requests.Session] = None,
        releases: Sequence[KnownRelease] = KNOWN_RELEASES,
        platform_info: Optional[PlatformInfo] = None,
    ):
        """
        Initialize installer.

        Args:
            config: Settings (defaults if None)
            session: Optional requests session used for the download
            releases: Pinned registry to trust
            platform_info: Platform override. If None, detects current platform.
        """
        self.config = config or DlprotocConfig()
        self.session = session
        self.releases = releases
        self.platform_info = platform_info
        self.state = InstallState.START

    def _transition(self, state: InstallState) -> None:
        logger.debug(f"Install state: {self.state.value} -> {state.value}")
        self.state = state

    def install_verified(self, destination: Path, version: Optional[str] = None) -> Path:
        """
        Download, verify and extract protoc for the current platform.

        Args:
            destination: Directory to create; must not exist yet
            version: Pinned version to install (latest known version if None)

        Returns:
            destination

        Raises:
            UnsupportedPlatformError: If the platform has no releases
            UnknownReleaseError: If (platform, version) is not pinned
            TransportError: If the download fails
            DigestMismatchError: If the download does not match the pin
            ArchiveError: If the archive is malformed
            FilesystemError: If destination exists or writing the tree fails
        """
        destination = Path(destination)
        self.state = InstallState.START

        try:
            self._transition(InstallState.RESOLVE_PLATFORM)
            if destination.exists():
                raise FilesystemError(
                    f"Refusing to replace existing directory: {destination}"
                )
            platform_info = self.platform_info or detect_platform()
            if version is None:
                version = latest_known_version(self.releases)
            description = f"{platform_info.os} {platform_info.arch} {version}"

            self._transition(InstallState.LOOKUP_DIGEST)
            expected = lookup_digest(
                platform_info.os, platform_info.arch, version, self.releases
            )

            self._transition(InstallState.FETCH)
            data = fetch_unverified(
                platform_info.os,
                platform_info.arch,
                version,
                session=self.session,
                timeout=self.config.timeout,
                base_url=self.config.release_base_url,
            )

            self._transition(InstallState.VERIFY)
            verify_digest(data, expected, description)
            logger.info(f"Verified protoc {description}")

            self._transition(InstallState.EXTRACT)
            logger.info(f"Extracting to: {destination}")
            with staging_directory(destination) as staging:
                extract_zip_bytes(staging, data)
                publish_directory(staging, destination)

        except DlprotocError as e:
            logger.debug(f"Install failed during {self.state.value}: {e}")
            self._transition(InstallState.FAILED)
            raise

        self._transition(InstallState.DONE)
        return destination

    def install_to_build_output(
        self, environment: Optional[BuildEnvironment] = None
    ) -> InstallResult:
        """
        Install protoc under the build output directory, once.

        If the distribution directory already exists nothing is downloaded or
        verified. Either way the protoc path is published to the build
        environment.

        Args:
            environment: Build environment (process environment if None)

        Returns:
            InstallResult

        Raises:
            BuildEnvironmentError: If no output directory is available
            InstallLockTimeout: If another install holds the lock too long
            DlprotocError: Any failure of install_verified()
        """
        if environment is None:
            environment = ProcessBuildEnvironment(
                out_dir_env_var=self.config.out_dir_env_var,
                protoc_env_var=self.config.protoc_env_var,
            )

        destination = environment.get_output_dir() / self.config.distribution_dir_name
        was_cached = True

        if destination.exists():
            logger.info(f"dlprotoc: not downloading; protoc already exists at {destination}")
        else:
            with install_lock(destination, timeout=self.config.lock_timeout):
                # Check again after acquiring lock (another build may have completed)
                if destination.exists():
                    logger.info(f"protoc installed by another process: {destination}")
                else:
                    self.install_verified(destination)
                    was_cached = False

        protoc_path = protoc_executable(destination)
        environment.set_tool_path(protoc_path)

        return InstallResult(
            destination=destination, protoc_path=protoc_path, was_cached=was_cached
        )


def install_verified_for_current_platform(
    destination: Path,
    config: Optional[DlprotocConfig] = None,
    session: Optional[requests.Session] = None,
) -> Path:
    """Install the latest pinned protoc for this platform into destination."""
    return ProtocInstaller(config=config, session=session).install_verified(destination)


def install_to_build_output(
    environment: Optional[BuildEnvironment] = None,
    config: Optional[DlprotocConfig] = None,
    session: Optional[requests.Session] = None,
) -> InstallResult:
    """Install protoc into the build output directory; see ProtocInstaller."""
    installer = ProtocInstaller(config=config, session=session)
    return installer.install_to_build_output(environment)


def download_protoc(config_file: Optional[Path] = None) -> Path:
    """
    Download protoc to $OUT_DIR/protoc_zip and set $PROTOC.

    Intended to be called from a build step before running a protobuf
    code generator.

    Args:
        config_file: YAML settings file (./dlprotoc.yaml is read if present)

    Returns:
        Path to the protoc executable

    Raises:
        DlprotocError: If protoc cannot be fetched, verified or unpacked
    """
    return install_to_build_output(config=load_config(config_file)).protoc_path


__all__ = [
    "InstallState",
    "InstallResult",
    "ProtocInstaller",
    "protoc_executable",
    "install_verified_for_current_platform",
    "install_to_build_output",
    "download_protoc",
]
