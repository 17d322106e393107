"""
Downloads a pinned, verified protoc release for use in Python builds.

Call download_protoc() from a build step before generating code from .proto
files; it installs protoc into $OUT_DIR/protoc_zip and sets $PROTOC.

Usage:
    import dlprotoc

    dlprotoc.download_protoc()
"""

from dlprotoc.core.exceptions import DlprotocError
from dlprotoc.core.platform import CpuArchitecture, OperatingSystem
from dlprotoc.core.download import fetch_unverified
from dlprotoc.core.verification import digest_of
from dlprotoc.installer import (
    InstallResult,
    ProtocInstaller,
    download_protoc,
    install_to_build_output,
    install_verified_for_current_platform,
)

__all__ = [
    "DlprotocError",
    "CpuArchitecture",
    "OperatingSystem",
    "fetch_unverified",
    "digest_of",
    "InstallResult",
    "ProtocInstaller",
    "download_protoc",
    "install_to_build_output",
    "install_verified_for_current_platform",
]
