"""Test fixtures for dlprotoc tests.

- archives: in-memory protoc release archives and matching registries

Import fixtures in your tests using:
    from tests.fixtures.archives import build_zip, fake_protoc_zip
"""

__all__ = [
    "archives",
]
