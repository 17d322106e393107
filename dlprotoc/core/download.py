"""
Release fetcher for protoc archives.

Builds the canonical GitHub release URL for a release triple and downloads it
in a single blocking GET. Nothing here checks integrity: callers either verify
the bytes against the pinned registry (see dlprotoc.installer) or, like the
protochashes tool, only compute digests from them.

There is no retry logic. A transient failure is returned to the caller, who
may call again.
"""

import logging
from typing import Optional, Union

import requests
from requests.exceptions import RequestException

from dlprotoc.core.exceptions import TransportError
from dlprotoc.core.platform import CpuArchitecture, OperatingSystem

logger = logging.getLogger(__name__)

DEFAULT_RELEASE_BASE_URL = (
    "https://github.com/protocolbuffers/protobuf/releases/download"
)

TimeoutValue = Optional[Union[float, tuple]]


def build_url(
    os: OperatingSystem,
    arch: CpuArchitecture,
    version: str,
    base_url: str = DEFAULT_RELEASE_BASE_URL,
) -> str:
    """
    Return the URL of a protoc release archive.

    Args:
        os: Operating system
        arch: CPU architecture
        version: protoc version in major.minor form, such as "27.0"
        base_url: Release download root (a mirror may be configured)

    Example:
        >>> build_url(OperatingSystem.LINUX, CpuArchitecture.X86_64, "27.0")
        'https://github.com/protocolbuffers/protobuf/releases/download/v27.0/protoc-27.0-linux-x86_64.zip'
    """
    base_url = base_url.rstrip("/")
    return f"{base_url}/v{version}/protoc-{version}-{os}-{arch}.zip"


def fetch_unverified(
    os: OperatingSystem,
    arch: CpuArchitecture,
    version: str,
    session: Optional[requests.Session] = None,
    timeout: TimeoutValue = None,
    base_url: str = DEFAULT_RELEASE_BASE_URL,
) -> bytes:
    """
    Download a protoc release without verifying its hash.

    Only the installer (which verifies the result) and the protochashes tool
    (which computes hashes from it) should call this.

    Args:
        os: Operating system
        arch: CPU architecture
        version: protoc version
        session: Optional requests session (plain requests.get if None)
        timeout: Request timeout in seconds; None waits indefinitely
        base_url: Release download root

    Returns:
        The full response body

    Raises:
        TransportError: On network failure or a non-success HTTP status
    """
    url = build_url(os, arch, version, base_url=base_url)
    logger.info(f"Downloading from {url}")

    get = session.get if session is not None else requests.get
    try:
        response = get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
        data = response.content
    except RequestException as e:
        failed_url = e.request.url if e.request is not None and e.request.url else url
        raise TransportError(
            f"failed downloading protoc from url: {failed_url}: {e}", url=failed_url
        ) from e

    logger.debug(f"Downloaded {len(data)} bytes from {url}")
    return data


__all__ = ["DEFAULT_RELEASE_BASE_URL", "build_url", "fetch_unverified"]
