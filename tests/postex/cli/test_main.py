"""Tests for the postex command line interface."""

from __future__ import annotations

import io
from collections.abc import Iterator

import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

from postex import __version__
from postex.cli import app
from postex.cli.commands.caps_cmd import render_capabilities
from postex.cli.utils import connect_session, parse_endpoint
from postex.drivers.sessions import ShellSession
from postex.kernel.config import PostExConfig
from postex.kernel.logging import configure_logging
from postex.kernel.ports.detection import detect_capabilities
from postex.kernel.ports.primitives import Primitive


STAT_LINE = (
    b"/etc/hostname 7 8 81a4 0 0 fd01 131 1 0 0 1668608914 1668427627 "
    b"1668427627 1668427627 4096\n"
)


@pytest.fixture
def runner():
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    monkeypatch.delenv("POSTEX_CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # CliRunner closes the stream the CLI pointed loguru at
    configure_logging(level="WARNING", format="console", force_reconfigure=True)


@pytest.fixture
def scripted_shell(monkeypatch: pytest.MonkeyPatch, shell_session):
    """Install a fake ``connect_session`` replaying *output*; returns the peer stream."""

    def install(output: bytes):
        session, stream = shell_session(output)
        monkeypatch.setattr(
            "postex.cli.utils.connect_session", lambda connect, listen, config: session
        )
        return stream

    return install


def _render(table) -> str:
    console = Console(file=io.StringIO(), width=200)
    console.print(table)
    return console.file.getvalue()


class TestMain:
    """Tests for global options."""

    def test_version(self, runner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self, runner) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("shell", "fs", "caps"):
            assert command in result.output

    def test_missing_config_file(self, runner, tmp_path) -> None:
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "caps", "list"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_command_without_session(self, runner) -> None:
        result = runner.invoke(app, ["fs", "cat", "/etc/hostname"])
        assert result.exit_code != 0


class TestCommands:
    """Tests for commands run against a scripted shell."""

    def test_fs_cat(self, runner, scripted_shell, framed) -> None:
        stream = scripted_shell(framed(b"target\n"))
        result = runner.invoke(app, ["--connect", "10.0.0.5:4444", "fs", "cat", "/etc/hostname"])
        assert result.exit_code == 0, result.output
        assert result.output == "target\n"
        assert "cat /etc/hostname" in stream.lines[0]
        assert stream.closed

    def test_fs_ls(self, runner, scripted_shell, framed) -> None:
        scripted_shell(framed(b"group\npasswd\n"))
        result = runner.invoke(app, ["--connect", "h:1", "fs", "ls", "/etc"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["group", "passwd"]

    def test_fs_ls_empty(self, runner, scripted_shell, framed) -> None:
        scripted_shell(framed(b""))
        result = runner.invoke(app, ["--connect", "h:1", "fs", "ls", "/empty"])
        assert result.exit_code == 0
        assert "empty" in result.output

    def test_fs_stat(self, runner, scripted_shell, framed) -> None:
        scripted_shell(framed(STAT_LINE))
        result = runner.invoke(app, ["--connect", "h:1", "fs", "stat", "/etc/hostname"])
        assert result.exit_code == 0, result.output
        assert "inode" in result.output
        assert "131" in result.output

    def test_fs_stat_missing(self, runner, scripted_shell, framed) -> None:
        stream = scripted_shell(framed(b""))
        result = runner.invoke(app, ["--connect", "h:1", "fs", "stat", "/nope"])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert stream.closed

    def test_fs_readlink(self, runner, scripted_shell, framed) -> None:
        scripted_shell(framed(b"/usr/bin/dash\n"))
        result = runner.invoke(app, ["--connect", "h:1", "fs", "readlink", "/bin/sh"])
        assert result.output == "/usr/bin/dash\n"

    def test_shell_run(self, runner, scripted_shell, framed) -> None:
        stream = scripted_shell(framed(b"a b\n"))
        result = runner.invoke(app, ["--connect", "h:1", "shell", "run", "ls", "/tmp/my dir"])
        assert result.exit_code == 0, result.output
        assert result.output == "a b\n"
        assert "ls '/tmp/my dir'" in stream.lines[0]

    def test_shell_run_connection_lost(self, runner, scripted_shell) -> None:
        scripted_shell(b"")
        result = runner.invoke(app, ["--connect", "h:1", "shell", "run", "id"])
        assert result.exit_code == 1


class TestCaps:
    """Tests for the capability report."""

    def test_offline_shell(self, runner) -> None:
        result = runner.invoke(app, ["caps", "list"])
        assert result.exit_code == 0, result.output
        assert "shell transport" in result.output

    def test_offline_rpc(self, runner) -> None:
        result = runner.invoke(app, ["caps", "list", "--transport", "rpc", "--missing"])
        assert result.exit_code == 0, result.output
        assert "rpc transport" in result.output

    def test_live_session(self, runner, scripted_shell) -> None:
        scripted_shell(b"")
        result = runner.invoke(app, ["--connect", "h:1", "caps", "list"])
        assert result.exit_code == 0, result.output
        assert "ShellSession" in result.output

    def test_render_shell_capabilities(self) -> None:
        output = _render(render_capabilities(detect_capabilities(ShellSession), "shell"))
        lines = [line for line in output.splitlines() if " ioctl " in line]
        assert lines
        assert all("file_ioctl" in line for line in lines)

    def test_render_missing_only(self) -> None:
        output = _render(render_capabilities(frozenset(Primitive), "rpc", missing_only=True))
        assert "yes" not in output
        assert " no " not in output


class TestUtils:
    """Tests for endpoint parsing and session selection."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("10.0.0.5:4444", ("10.0.0.5", 4444)),
            ("4444", ("", 4444)),
            ("[::1]:80", ("::1", 80)),
            ("localhost:1", ("localhost", 1)),
        ],
    )
    def test_parse_endpoint(self, value: str, expected: tuple[str, int]) -> None:
        assert parse_endpoint(value) == expected

    @pytest.mark.parametrize("value", ["host:http", "host:0", "host:70000"])
    def test_parse_endpoint_invalid(self, value: str) -> None:
        with pytest.raises(typer.BadParameter):
            parse_endpoint(value)

    def test_connect_session_needs_one_option(self) -> None:
        with pytest.raises(typer.BadParameter):
            connect_session(None, None, PostExConfig())
        with pytest.raises(typer.BadParameter):
            connect_session("h:1", "2", PostExConfig())

    def test_connect_needs_host(self) -> None:
        with pytest.raises(typer.BadParameter, match="HOST:PORT"):
            connect_session("4444", None, PostExConfig())
