"""
Hash verification for downloaded protoc archives.

The registry pins SHA-256 digests, so this is the only algorithm supported.
Comparison is constant-time and a mismatch is always an error.
"""

import hashlib
import logging
import secrets

from dlprotoc.core.exceptions import DigestMismatchError, HashFormatError

logger = logging.getLogger(__name__)

SHA256_HEX_LENGTH = 64


def digest_of(data: bytes) -> str:
    """
    Hash data using the algorithm used to pin protoc releases (SHA-256).

    Args:
        data: Bytes to hash

    Returns:
        Lowercase hex digest

    Example:
        >>> digest_of(b"")
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    return hashlib.sha256(data).hexdigest()


def verify_digest(data: bytes, expected_sha256: str, description: str) -> str:
    """
    Verify data matches the expected digest.

    Args:
        data: Downloaded bytes
        expected_sha256: Pinned hex digest
        description: Names the release in the error message (e.g., 'linux x86_64 31.0')

    Returns:
        The verified digest

    Raises:
        HashFormatError: If expected_sha256 is not a SHA-256 hex string
        DigestMismatchError: If the digest of data differs
    """
    expected = expected_sha256.lower().strip()
    if not _is_valid_hash_format(expected):
        raise HashFormatError(f"Invalid SHA-256 digest: {expected_sha256!r}")

    actual = digest_of(data)
    if not _constant_time_compare(actual, expected):
        logger.debug(f"Checksum mismatch for {description}: got {actual}")
        raise DigestMismatchError(description, expected, actual)

    logger.debug(f"Checksum verified for {description}: {actual}")
    return actual


def _constant_time_compare(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def _is_valid_hash_format(hash_str: str) -> bool:
    if len(hash_str) != SHA256_HEX_LENGTH:
        return False
    return all(c in "0123456789abcdef" for c in hash_str)


__all__ = ["digest_of", "verify_digest"]
