"""
Pytest configuration and shared fixtures for dlprotoc tests.
"""

import logging

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.archives import (
    fake_protoc_zip,
    fake_releases,
    linux_x86_64,
)

from dlprotoc.core.platform import clear_platform_cache


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_platform_cache():
    """Platform detection is cached per process; reset it around each test."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI tests reconfigure the root logger; restore it around each test."""
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run in an empty directory so no dlprotoc.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DLPROTOC_RELEASE_BASE_URL", raising=False)
    monkeypatch.delenv("DLPROTOC_TIMEOUT", raising=False)
    return tmp_path
