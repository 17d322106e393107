"""
Centralized exception hierarchy for dlprotoc.

Every error carries a single human-readable message. Callers are not expected
to recover from any of them; the type only tells which stage failed.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class DlprotocError(Exception):
    """Base exception for all dlprotoc errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @classmethod
    def with_prefix(cls, prefix: str, cause: object) -> "DlprotocError":
        """Build an error whose message is ``"<prefix>: <cause>"``."""
        return cls(f"{prefix}: {cause}")

    def __str__(self) -> str:
        return self.message


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatformError(DlprotocError, RuntimeError):
    """Raised when the running OS or CPU architecture has no release."""

    pass


# ============================================================================
# Registry Exceptions
# ============================================================================


class RegistryError(DlprotocError):
    """Base exception for pinned hash registry errors."""

    pass


class UnknownReleaseError(RegistryError):
    """Raised when no pinned digest exists for a release triple."""

    def __init__(self, os: object, arch: object, version: str):
        self.os = os
        self.arch = arch
        self.version = version
        super().__init__(f"unknown hash for {os} {arch} {version}")


# ============================================================================
# Download and Verification Exceptions
# ============================================================================


class TransportError(DlprotocError):
    """Raised when fetching a release over HTTP fails."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class DigestMismatchError(DlprotocError):
    """Raised when downloaded bytes do not match the pinned digest."""

    def __init__(self, description: str, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"hash mismatch for {description}: expected {expected}, got {actual}"
        )


class HashFormatError(DlprotocError):
    """Raised when a digest string is not a valid SHA-256 hex value."""

    pass


# ============================================================================
# Extraction Exceptions
# ============================================================================


class ArchiveError(DlprotocError):
    """Raised when the release archive is malformed."""

    pass


class FilesystemError(DlprotocError):
    """Raised when writing the extracted tree fails."""

    pass


class InsecureArchiveError(FilesystemError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Build Integration Exceptions
# ============================================================================


class BuildEnvironmentError(DlprotocError):
    """Raised when the calling build system did not provide what we need."""

    pass


class ConfigurationError(DlprotocError):
    """Raised when the dlprotoc configuration file is invalid."""

    pass


class InstallLockTimeout(DlprotocError):
    """Raised when the install lock cannot be acquired within timeout."""

    pass


__all__ = [
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
