"""
Tests for the dlprotoc command-line interface.
"""

import pytest
import responses

from dlprotoc.cli.parser import CLI
from dlprotoc.core.download import build_url
from dlprotoc.core.platform import CpuArchitecture, OperatingSystem
from dlprotoc.core.versions import KNOWN_RELEASES, LATEST_VERSION


class TestParser:
    def test_no_command_prints_help(self, isolated_cwd, capsys):
        assert CLI().run([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_unknown_option(self, isolated_cwd):
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--bogus"])
        assert exc_info.value.code == 1

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().run(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("dlprotoc ")

    def test_install_options(self):
        args = CLI().parse_args(
            ["install", "--destination", "out/protoc", "--protoc-version", "30.2"]
        )
        assert args.command == "install"
        assert str(args.destination) == "out/protoc"
        assert args.protoc_version == "30.2"


class TestVersionsCommand:
    def test_all_platforms(self, isolated_cwd, capsys):
        assert CLI().run(["versions", "--all-platforms"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == len(KNOWN_RELEASES)
        latest = [line for line in lines if line.endswith("(latest)")]
        assert len(latest) == 4
        assert all(line.startswith(LATEST_VERSION) for line in latest)

    def test_lists_digest(self, isolated_cwd, capsys):
        assert CLI().run(["versions", "--all-platforms"]) == 0

        out = capsys.readouterr().out
        assert (
            "27.0     linux-x86_64     "
            "e2bdce49564dbad4676023d174d9cdcf932238bc0b56a8349a5cb27bbafc26b0"
        ) in out


class TestInstallCommand:
    def test_unknown_version(self, isolated_cwd, capsys):
        destination = isolated_cwd / "protoc"

        code = CLI().run(
            ["install", "--destination", str(destination), "--protoc-version", "0.0.0"]
        )

        assert code == 1
        assert not destination.exists()

    def test_version_requires_destination(self, isolated_cwd):
        assert CLI().run(["install", "--protoc-version", "31.0"]) == 1

    def test_not_run_from_build(self, isolated_cwd, monkeypatch, capsys):
        monkeypatch.delenv("OUT_DIR", raising=False)

        assert CLI().run(["install"]) == 1
        assert "env var OUT_DIR" in capsys.readouterr().err

    def test_already_installed(self, isolated_cwd, monkeypatch, capsys):
        (isolated_cwd / "protoc_zip" / "bin").mkdir(parents=True)
        monkeypatch.setenv("OUT_DIR", str(isolated_cwd))
        monkeypatch.setenv("PROTOC", "")

        assert CLI().run(["install"]) == 0
        assert capsys.readouterr().out.strip() == str(
            isolated_cwd / "protoc_zip" / "bin" / "protoc"
        )


class TestHashesCommand:
    @responses.activate
    def test_prints_literals(self, isolated_cwd, capsys):
        for os in OperatingSystem.all():
            for arch in CpuArchitecture.all():
                responses.add(
                    responses.GET,
                    build_url(os, arch, "31.0"),
                    body=f"{os}-{arch}".encode(),
                    status=200,
                )

        assert CLI().run(["hashes", "31.0"]) == 0

        out = capsys.readouterr().out
        assert out.count("KnownRelease(") == 4
        assert 'version="31.0"' in out

    @responses.activate
    def test_download_failure(self, isolated_cwd):
        url = build_url(OperatingSystem.all()[0], CpuArchitecture.all()[0], "99.0")
        responses.add(responses.GET, url, status=404)

        assert CLI().run(["hashes", "99.0"]) == 1
