"""
Platform detection for dlprotoc.

This module maps the running process to one of the operating systems and CPU
architectures protoc is published for, and renders each to the token used in
release URLs.

Two renderings exist for every value and they must not be mixed up:
- ``str(value)`` / ``value.url_token``: the token in the download URL
  (e.g., 'osx', 'aarch_64'). This is part of the contract with the release host.
- ``value.identifier``: the Python name of the enum member (e.g., 'OSX',
  'AARCH64'), used when printing registry entries.

Usage:
    from dlprotoc.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"Platform string: {platform_info.platform_string()}")
"""

import enum
import functools
import platform
from dataclasses import dataclass
from typing import Tuple

from dlprotoc.core.exceptions import UnsupportedPlatformError


class OperatingSystem(enum.Enum):
    """Operating system used to run protoc. The value is the URL token."""

    LINUX = "linux"
    OSX = "osx"

    @classmethod
    def current(cls) -> "OperatingSystem":
        """
        Return the operating system executing this function.

        Raises:
            UnsupportedPlatformError: If no protoc release exists for this OS
        """
        return _detect_os()

    @classmethod
    def all(cls) -> Tuple["OperatingSystem", ...]:
        """Return all defined values in declaration order."""
        return tuple(cls)

    @property
    def url_token(self) -> str:
        return self.value

    @property
    def identifier(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.value


class CpuArchitecture(enum.Enum):
    """CPU architecture used to run protoc. The value is the URL token."""

    AARCH64 = "aarch_64"
    X86_64 = "x86_64"

    @classmethod
    def current(cls) -> "CpuArchitecture":
        """
        Return the CPU architecture executing this function.

        Raises:
            UnsupportedPlatformError: If no protoc release exists for this arch
        """
        return _detect_architecture()

    @classmethod
    def all(cls) -> Tuple["CpuArchitecture", ...]:
        """Return all defined values in declaration order."""
        return tuple(cls)

    @property
    def url_token(self) -> str:
        return self.value

    @property
    def identifier(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PlatformInfo:
    """
    The (OS, CPU architecture) pair of a protoc release.

    Attributes:
        os: Operating system
        arch: CPU architecture
    """

    os: OperatingSystem
    arch: CpuArchitecture

    def platform_string(self) -> str:
        """
        Get platform string as it appears in release file names.

        Example:
            >>> PlatformInfo(OperatingSystem.LINUX, CpuArchitecture.X86_64).platform_string()
            'linux-x86_64'
        """
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the current platform.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatformError: If the OS or architecture is not supported
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> OperatingSystem:
    system = platform.system().lower()

    if system == "linux":
        return OperatingSystem.LINUX
    elif system == "darwin":
        return OperatingSystem.OSX
    else:
        raise UnsupportedPlatformError(f"unsupported OS: {system}")


def _detect_architecture() -> CpuArchitecture:
    machine = platform.machine().lower()

    # Normalize architecture names
    if machine in ("x86_64", "amd64", "x64"):
        return CpuArchitecture.X86_64
    elif machine in ("aarch64", "arm64"):
        return CpuArchitecture.AARCH64
    else:
        raise UnsupportedPlatformError(f"unsupported arch: {machine}")


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "OperatingSystem",
    "CpuArchitecture",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
