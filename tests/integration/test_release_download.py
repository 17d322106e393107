"""
Integration tests against the real protobuf release host.

Run with: pytest --integration
"""

import os
import subprocess
import threading

import pytest

from dlprotoc.core.environment import StaticBuildEnvironment
from dlprotoc.core.versions import LATEST_VERSION
from dlprotoc.installer import ProtocInstaller, protoc_executable

pytestmark = pytest.mark.integration


class TestReleaseDownload:
    """Install the latest pinned release and run it."""

    def test_install_and_run(self, tmp_path):
        destination = ProtocInstaller().install_verified(tmp_path / "protoc")
        protoc = protoc_executable(destination)

        assert os.access(protoc, os.X_OK)
        output = subprocess.run(
            [str(protoc), "--version"], capture_output=True, text=True, check=True
        ).stdout
        assert LATEST_VERSION in output

    def test_concurrent_build_output_installs(self, tmp_path):
        environments = [StaticBuildEnvironment(tmp_path) for _ in range(3)]
        results = []
        errors = []

        def install(environment):
            try:
                results.append(ProtocInstaller().install_to_build_output(environment))
            except Exception as e:  # surfaced by the assertion below
                errors.append(e)

        threads = [threading.Thread(target=install, args=(env,)) for env in environments]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert sum(not result.was_cached for result in results) == 1
        assert {env.tool_path for env in environments} == {
            tmp_path / "protoc_zip" / "bin" / "protoc"
        }
