"""
Unit tests for the pinned hash registry.
"""

import re

import pytest

from dlprotoc.core.exceptions import RegistryError, UnknownReleaseError
from dlprotoc.core.platform import CpuArchitecture, OperatingSystem
from dlprotoc.core.versions import (
    KNOWN_RELEASES,
    LATEST_VERSION,
    KnownRelease,
    known_versions,
    latest_known_version,
    lookup_digest,
    releases_for,
    validate_registry,
)

HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")


def _release(version, os=OperatingSystem.LINUX, arch=CpuArchitecture.X86_64):
    return KnownRelease(os=os, arch=arch, version=version, sha256="a" * 64)


class TestKnownReleases:
    """Invariants of the shipped registry."""

    def test_registry_is_valid(self):
        validate_registry(KNOWN_RELEASES)

    def test_triples_are_unique(self):
        keys = [release.key for release in KNOWN_RELEASES]
        assert len(keys) == len(set(keys))

    def test_versions_non_decreasing(self):
        versions = [
            tuple(int(p) for p in release.version.split("."))
            for release in KNOWN_RELEASES
        ]
        assert versions == sorted(versions)

    def test_latest_version_is_last_entry(self):
        assert LATEST_VERSION == KNOWN_RELEASES[-1].version
        assert latest_known_version() == LATEST_VERSION

    def test_digests_are_sha256_hex(self):
        for release in KNOWN_RELEASES:
            assert HEX_DIGEST.match(release.sha256), release

    def test_latest_version_covers_every_platform(self):
        pinned = {(r.os, r.arch) for r in releases_for(LATEST_VERSION)}
        assert pinned == {
            (os, arch) for os in OperatingSystem.all() for arch in CpuArchitecture.all()
        }

    def test_known_hash_for_current_platform(self):
        # Fails on hosts dlprotoc does not support, like the install would.
        lookup_digest(OperatingSystem.current(), CpuArchitecture.current(), LATEST_VERSION)


class TestLookupDigest:
    """Tests for lookup_digest()."""

    def test_exact_match(self):
        digest = lookup_digest(OperatingSystem.LINUX, CpuArchitecture.X86_64, "27.0")
        assert digest == "e2bdce49564dbad4676023d174d9cdcf932238bc0b56a8349a5cb27bbafc26b0"

    def test_osx_aarch64(self):
        digest = lookup_digest(OperatingSystem.OSX, CpuArchitecture.AARCH64, "31.0")
        assert digest == "1fbe70a8d646875f91b6fd57294f763145292b2c9e1374ab09d6e2124afdd950"

    def test_unknown_version(self):
        with pytest.raises(UnknownReleaseError) as exc_info:
            lookup_digest(OperatingSystem.current(), CpuArchitecture.current(), "0.0.0")
        assert "0.0.0" in str(exc_info.value)

    def test_unknown_version_message(self):
        with pytest.raises(UnknownReleaseError, match="unknown hash for linux x86_64 0.0.0"):
            lookup_digest(OperatingSystem.LINUX, CpuArchitecture.X86_64, "0.0.0")

    def test_no_cross_platform_fallback(self):
        # 27.0 was only pinned for linux
        with pytest.raises(UnknownReleaseError):
            lookup_digest(OperatingSystem.OSX, CpuArchitecture.X86_64, "27.0")

    def test_no_prefix_matching(self):
        with pytest.raises(UnknownReleaseError):
            lookup_digest(OperatingSystem.LINUX, CpuArchitecture.X86_64, "31")

    def test_custom_registry(self):
        releases = (_release("1.0"),)
        assert lookup_digest(
            OperatingSystem.LINUX, CpuArchitecture.X86_64, "1.0", releases
        ) == "a" * 64


class TestValidateRegistry:
    """Tests for validate_registry()."""

    def test_empty_registry(self):
        with pytest.raises(RegistryError, match="no releases"):
            validate_registry(())

    def test_duplicate_triple(self):
        with pytest.raises(RegistryError, match="duplicate release"):
            validate_registry((_release("27.0"), _release("27.0")))

    def test_same_version_other_arch_is_fine(self):
        validate_registry(
            (_release("27.0"), _release("27.0", arch=CpuArchitecture.AARCH64))
        )

    def test_decreasing_version(self):
        with pytest.raises(RegistryError, match="out of order"):
            validate_registry((_release("28.0"), _release("27.3")))

    def test_structured_version_order(self):
        # "27.10" < "27.9" as strings, but is the newer release
        validate_registry((_release("27.9"), _release("27.10")))
        with pytest.raises(RegistryError, match="out of order"):
            validate_registry((_release("27.10"), _release("27.9")))

    def test_invalid_version(self):
        with pytest.raises(RegistryError, match="invalid protoc version"):
            validate_registry((_release("not-a-version"),))


class TestRegistryQueries:
    """Tests for known_versions() and releases_for()."""

    def test_known_versions_in_order(self):
        versions = known_versions()
        assert versions[0] == "27.0"
        assert versions[-1] == LATEST_VERSION
        assert len(versions) == len(set(versions))

    def test_releases_for(self):
        releases = releases_for("27.0")
        assert {r.arch for r in releases} == {
            CpuArchitecture.X86_64,
            CpuArchitecture.AARCH64,
        }
        assert all(r.os is OperatingSystem.LINUX for r in releases)

    def test_latest_known_version_empty(self):
        with pytest.raises(RegistryError):
            latest_known_version(())
