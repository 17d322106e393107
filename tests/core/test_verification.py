"""
Unit tests for verification module.

Tests digest computation and pinned digest verification.
"""

import hashlib

import pytest

from dlprotoc.core.exceptions import DigestMismatchError, HashFormatError
from dlprotoc.core.verification import (
    digest_of,
    verify_digest,
    _constant_time_compare,
    _is_valid_hash_format,
)


class TestDigestOf:
    """Test digest_of function."""

    def test_empty(self):
        assert (
            digest_of(b"")
            == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_matches_hashlib(self):
        data = b"hello world"
        assert digest_of(data) == hashlib.sha256(data).hexdigest()

    def test_deterministic(self):
        assert digest_of(b"protoc") == digest_of(b"protoc")


class TestVerifyDigest:
    """Test verify_digest function."""

    def test_matching_digest(self):
        data = b"release archive"
        expected = hashlib.sha256(data).hexdigest()

        assert verify_digest(data, expected, "linux x86_64 31.0") == expected

    def test_uppercase_expected(self):
        data = b"release archive"
        expected = hashlib.sha256(data).hexdigest().upper()

        verify_digest(data, expected, "linux x86_64 31.0")

    def test_mismatch(self):
        data = b"release archive"
        expected = "a" * 64

        with pytest.raises(DigestMismatchError) as exc_info:
            verify_digest(data, expected, "linux x86_64 31.0")

        err = exc_info.value
        assert err.expected == expected
        assert err.actual == hashlib.sha256(data).hexdigest()
        assert "hash mismatch for linux x86_64 31.0" in str(err)

    def test_single_bit_flip(self):
        data = bytearray(b"release archive")
        expected = digest_of(bytes(data))
        data[3] ^= 0x01

        with pytest.raises(DigestMismatchError):
            verify_digest(bytes(data), expected, "linux x86_64 31.0")

    @pytest.mark.parametrize(
        "expected",
        ["", "abc", "g" * 64, "a" * 63, "a" * 128],
    )
    def test_invalid_expected_digest(self, expected):
        with pytest.raises(HashFormatError):
            verify_digest(b"data", expected, "linux x86_64 31.0")


class TestHelpers:
    """Tests for private helpers."""

    def test_constant_time_compare(self):
        assert _constant_time_compare("abc", "abc") is True
        assert _constant_time_compare("abc", "abd") is False

    def test_valid_hash_format(self):
        assert _is_valid_hash_format("0" * 64) is True
        assert _is_valid_hash_format("0" * 40) is False
