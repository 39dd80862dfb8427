"""Tests for the Shell facade."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from postex.kernel.exceptions import InvalidArgumentError, UnsupportedCapabilityError
from postex.kernel.system import Shell


class RecordingShell:
    """Session whose ``shell_exec`` replays canned output per command line."""

    name = "recording"

    def __init__(self, outputs: dict[str, bytes] | None = None) -> None:
        self.outputs = outputs or {}
        self.commands: list[str] = []

    def shell_exec(self, command: str) -> bytes | None:
        self.commands.append(command)
        return self.outputs.get(command)


class TestShellCommands:
    """Tests for command construction and output handling."""

    def test_run_quotes_arguments(self) -> None:
        session = RecordingShell()
        Shell(session).run("ls", "-la", "my dir")
        assert session.commands == ["ls -la 'my dir'"]

    def test_run_decodes_output(self) -> None:
        session = RecordingShell({"whoami": b"root\n"})
        shell = Shell(session)
        assert shell.run("whoami") == "root\n"
        assert shell.whoami() == "root"

    def test_run_handles_no_output(self) -> None:
        assert Shell(RecordingShell()).run("true") == ""

    def test_undecodable_output_is_replaced(self) -> None:
        session = RecordingShell({"cat /bin/x": b"\xff\xfe"})
        assert Shell(session).cat("/bin/x") == "��"

    @pytest.mark.parametrize(
        ("method", "arguments", "expected"),
        [
            ("ls_a", (), "ls -a"),
            ("ls_la", ("/tmp",), "ls -la /tmp"),
            ("ls_al", (), "ls -la"),
            ("head_n", (5, "/etc/passwd"), "head -n 5 /etc/passwd"),
            ("tail_n", (1, "/var/log/syslog"), "tail -n 1 /var/log/syslog"),
            ("cp_r", ("a", "b"), "cp -r a b"),
            ("cp_a", ("a", "b"), "cp -a a b"),
            ("rsync_a", ("a/", "b/"), "rsync -a a/ b/"),
            ("wget_out", ("/tmp/x", "http://h/x"), "wget -q -O /tmp/x http://h/x"),
            ("curl_out", ("/tmp/x", "http://h/x"), "curl -s -o /tmp/x http://h/x"),
            ("rm_rf", ("/tmp/d",), "rm -rf /tmp/d"),
            ("ps_aux", (), "ps aux"),
            ("netstat_anp", (), "netstat -anp"),
            ("mktempdir", (), "mktemp -d"),
        ],
    )
    def test_command_lines(self, method: str, arguments: tuple, expected: str) -> None:
        session = RecordingShell()
        getattr(Shell(session), method)(*arguments)
        assert session.commands == [expected]

    def test_find_lines(self) -> None:
        session = RecordingShell({"find /etc -name '*.conf'": b"/etc/a.conf\n/etc/b.conf\n"})
        assert Shell(session).find("/etc", "-name", "*.conf") == ["/etc/a.conf", "/etc/b.conf"]

    def test_grep_splits_once(self) -> None:
        session = RecordingShell({"grep -r root /etc": b"/etc/passwd:root:x:0:0\n"})
        assert Shell(session).grep("-r", "root", "/etc") == [("/etc/passwd", "root:x:0:0")]

    def test_egrep(self) -> None:
        session = RecordingShell()
        Shell(session).egrep("a|b", "/f")
        assert session.commands == ["grep -E 'a|b' /f"]

    def test_mktemp_chomps(self) -> None:
        session = RecordingShell({"mktemp": b"/tmp/tmp.abc\n"})
        assert Shell(session).mktemp() == "/tmp/tmp.abc"


class TestShellState:
    """Tests for the client-side working directory and environment."""

    def test_pwd_cached(self) -> None:
        session = RecordingShell({"pwd": b"/home/user\n"})
        shell = Shell(session)
        assert shell.pwd() == "/home/user"
        assert shell.pwd() == "/home/user"
        assert session.commands == ["pwd"]

    def test_cd_prefixes_commands(self) -> None:
        session = RecordingShell({"pwd": b"/home/user\n"})
        shell = Shell(session)
        assert shell.cd("../other dir") == "/home/other dir"
        shell.ls()
        assert session.commands[-1] == "cd '/home/other dir' && ls"

    def test_env_prefixes_commands(self) -> None:
        session = RecordingShell()
        shell = Shell(session)
        shell.setenv("LANG", "C")
        shell.setenv("GREETING", "hello world")
        shell.run("locale")
        shell.unsetenv("GREETING")
        shell.run("locale")
        assert session.commands == [
            "env LANG=C GREETING='hello world' locale",
            "env LANG=C locale",
        ]

    def test_state_never_sent_alone(self) -> None:
        session = RecordingShell()
        shell = Shell(session)
        shell.setenv("A", "1")
        shell.unsetenv("A")
        assert session.commands == []

    @pytest.mark.parametrize("name", ["X;rm -rf /", "1ABC", "A B", "$(id)", ""])
    def test_setenv_rejects_invalid_names(self, name: str) -> None:
        session = RecordingShell()
        shell = Shell(session)
        with pytest.raises(InvalidArgumentError, match="environment variable name"):
            shell.setenv(name, "1")
        assert shell.env == {}
        shell.run("true")
        assert session.commands == ["true"]


class TestShellInformation:
    """Tests for parsed system information."""

    def test_time(self) -> None:
        session = RecordingShell({"date +%s": b"1668608914\n"})
        assert Shell(session).time() == datetime(2022, 11, 16, 14, 28, 34, tzinfo=UTC)

    def test_date(self) -> None:
        session = RecordingShell({"date +%s": b"1668608914\n"})
        assert Shell(session).date().isoformat() == "2022-11-16"

    def test_id(self) -> None:
        session = RecordingShell({"id": b"uid=0(root) gid=0(root) groups=0(root)\n"})
        assert Shell(session).id() == {
            "uid": "0(root)",
            "gid": "0(root)",
            "groups": "0(root)",
        }

    def test_uid_gid(self) -> None:
        session = RecordingShell({"id -u": b"1000\n", "id -g": b"100\n"})
        shell = Shell(session)
        assert shell.uid() == 1000
        assert shell.gid() == 100


class TestShellCapabilities:
    def test_every_command_needs_shell_exec(self) -> None:
        class Nothing:
            pass

        shell = Shell(Nothing())
        assert shell.supported_operations() == ["setenv", "unsetenv"]
        with pytest.raises(UnsupportedCapabilityError, match="shell_exec"):
            shell.ls()

    def test_all_commands_supported_with_shell_exec(self) -> None:
        shell = Shell(RecordingShell())
        assert shell.supports("ls", "grep", "curl_out", "python")
