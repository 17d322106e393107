"""
Core functionality for dlprotoc.

This package contains the building blocks of a verified protoc install:
platform detection, the pinned hash registry, download, verification and
extraction.
"""

from .platform import (
    OperatingSystem,
    CpuArchitecture,
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .versions import (
    KnownRelease,
    KNOWN_RELEASES,
    LATEST_VERSION,
    lookup_digest,
    latest_known_version,
    known_versions,
    releases_for,
    validate_registry,
)

from .download import (
    DEFAULT_RELEASE_BASE_URL,
    build_url,
    fetch_unverified,
)

from .verification import (
    digest_of,
    verify_digest,
)

from .filesystem import (
    extract_zip_bytes,
    publish_directory,
    staging_directory,
    safe_rmtree,
)

from .exceptions import (
    DlprotocError,
    UnsupportedPlatformError,
    RegistryError,
    UnknownReleaseError,
    TransportError,
    DigestMismatchError,
    HashFormatError,
    ArchiveError,
    FilesystemError,
    InsecureArchiveError,
    BuildEnvironmentError,
    ConfigurationError,
    InstallLockTimeout,
)

__all__ = [
    "OperatingSystem",
    "CpuArchitecture",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "KnownRelease",
    "KNOWN_RELEASES",
    "LATEST_VERSION",
    "lookup_digest",
    "latest_known_version",
    "known_versions",
    "releases_for",
    "validate_registry",
    "DEFAULT_RELEASE_BASE_URL",
    "build_url",
    "fetch_unverified",
    "digest_of",
    "verify_digest",
    "extract_zip_bytes",
    "publish_directory",
    "staging_directory",
    "safe_rmtree",
    "DlprotocError",
    "UnsupportedPlatformError",
    "RegistryError",
    "UnknownReleaseError",
    "TransportError",
    "DigestMismatchError",
    "HashFormatError",
    "ArchiveError",
    "FilesystemError",
    "InsecureArchiveError",
    "BuildEnvironmentError",
    "ConfigurationError",
    "InstallLockTimeout",
]
