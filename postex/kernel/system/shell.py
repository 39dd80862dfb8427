"""Shell facade.

Every command here is one ``shell_exec`` with a fixed argument list. The
facade keeps its own working directory and environment overlay and
prefixes each command with them (``cd DIR && env K=V ... CMD``), so the
remote shell's real state is never touched.
"""

from __future__ import annotations

import datetime as dt
import posixpath
import re
import shlex
from typing import Any, ClassVar

from postex.kernel.capabilities import OperationRequirement, requires, shell_commands
from postex.kernel.exceptions import InvalidArgumentError
from postex.kernel.logging import get_logger
from postex.kernel.ports.session import Session
from postex.kernel.resource import Resource

logger = get_logger(__name__)

_COMMANDS = (
    "run", "cd", "pwd",
    "ls", "ls_a", "ls_l", "ls_la", "find", "file", "which",
    "cat", "head", "head_n", "tail", "tail_n", "grep", "egrep", "fgrep",
    "touch", "mktemp", "mktempdir", "mkdir", "cp", "cp_r", "cp_a",
    "rsync", "rsync_a", "wget", "wget_out", "curl", "curl_out",
    "rmdir", "rm", "rm_r", "rm_rf",
    "time", "date", "id", "uid", "gid", "whoami", "who", "w", "lastlog", "faillog",
    "ps", "ps_aux", "kill", "ifconfig", "netstat", "netstat_anp", "ping",
    "gcc", "cc", "perl", "python", "ruby",
)  # fmt: skip


_ENV_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _chomp(text: str) -> str:
    return text.removesuffix("\n")


def check_env_name(name: str) -> str:
    """Return *name* if it can appear unquoted in a shell command line.

    Raises
    ------
    InvalidArgumentError
        If *name* is not a valid environment variable name
    """
    if not _ENV_NAME.fullmatch(name):
        raise InvalidArgumentError("name", "must be a valid environment variable name", value=name)
    return name


class Shell(Resource):
    """Convenience commands run through the session's ``shell_exec``.

    Output is decoded with *encoding* (undecodable bytes are replaced).
    """

    OPERATIONS: ClassVar[dict[str, OperationRequirement]] = {
        **shell_commands(*_COMMANDS),
        "setenv": requires(),
        "unsetenv": requires(),
    }

    def __init__(self, session: Session, encoding: str = "utf-8") -> None:
        super().__init__(session)
        self.encoding = encoding
        self.env: dict[str, str] = {}
        self._cwd: str | None = None

    def command(self, command: str, *arguments: Any) -> str:
        """Return the full command line :meth:`run` would send."""
        if arguments:
            command = f"{command} {shlex.join(str(argument) for argument in arguments)}"
        if self.env:
            assignments = " ".join(
                f"{name}={shlex.quote(value)}" for name, value in self.env.items()
            )
            command = f"env {assignments} {command}"
        if self._cwd:
            command = f"cd {shlex.quote(self._cwd)} && {command}"
        return command

    def run(self, command: str, *arguments: Any) -> str:
        """Run *command* with shell-quoted *arguments* and return its output."""
        self._require("run")
        line = self.command(command, *arguments)
        logger.debug("shell: {line}", line=line)
        output = self.session.shell_exec(line)
        return (output or b"").decode(self.encoding, errors="replace")

    # ------------------------------------------------------------
    # client-side state
    # ------------------------------------------------------------

    def pwd(self) -> str:
        if self._cwd is None:
            self._cwd = _chomp(self.run("pwd"))
        return self._cwd

    def cd(self, path: str) -> str:
        self._cwd = posixpath.normpath(posixpath.join(self.pwd(), path))
        return self._cwd

    def setenv(self, name: str, value: str) -> None:
        self.env[check_env_name(name)] = value

    def unsetenv(self, name: str) -> None:
        self.env.pop(name, None)

    # ------------------------------------------------------------
    # files & directories
    # ------------------------------------------------------------

    def ls(self, *arguments: Any) -> str:
        return self.run("ls", *arguments)

    def ls_a(self, *arguments: Any) -> str:
        return self.run("ls", "-a", *arguments)

    def ls_l(self, *arguments: Any) -> str:
        return self.run("ls", "-l", *arguments)

    def ls_la(self, *arguments: Any) -> str:
        return self.run("ls", "-la", *arguments)

    ls_al = ls_la

    def find(self, *arguments: Any) -> list[str]:
        """Return the paths printed by ``find``."""
        return self.run("find", *arguments).splitlines()

    def file(self, *arguments: Any) -> str:
        return self.run("file", *arguments)

    def which(self, *arguments: Any) -> str:
        return self.run("which", *arguments)

    def cat(self, *arguments: Any) -> str:
        return self.run("cat", *arguments)

    def head(self, *arguments: Any) -> str:
        return self.run("head", *arguments)

    def head_n(self, lines: int, *arguments: Any) -> str:
        return self.head("-n", lines, *arguments)

    def tail(self, *arguments: Any) -> str:
        return self.run("tail", *arguments)

    def tail_n(self, lines: int, *arguments: Any) -> str:
        return self.tail("-n", lines, *arguments)

    def grep(self, *arguments: Any) -> list[tuple[str, ...]]:
        """Return each match split once on ``:`` (``(path, text)`` for multi-file greps)."""
        return [tuple(line.split(":", 1)) for line in self.run("grep", *arguments).splitlines()]

    def egrep(self, *arguments: Any) -> list[tuple[str, ...]]:
        return self.grep("-E", *arguments)

    def fgrep(self, *arguments: Any) -> list[tuple[str, ...]]:
        return self.grep("-F", *arguments)

    def touch(self, *arguments: Any) -> str:
        return self.run("touch", *arguments)

    def mktemp(self, *arguments: Any) -> str:
        return _chomp(self.run("mktemp", *arguments))

    def mktempdir(self, *arguments: Any) -> str:
        return self.mktemp("-d", *arguments)

    def mkdir(self, *arguments: Any) -> str:
        return self.run("mkdir", *arguments)

    def cp(self, *arguments: Any) -> str:
        return self.run("cp", *arguments)

    def cp_r(self, *arguments: Any) -> str:
        return self.cp("-r", *arguments)

    def cp_a(self, *arguments: Any) -> str:
        return self.cp("-a", *arguments)

    def rsync(self, *arguments: Any) -> str:
        return self.run("rsync", *arguments)

    def rsync_a(self, *arguments: Any) -> str:
        return self.rsync("-a", *arguments)

    def wget(self, *arguments: Any) -> str:
        return self.run("wget", "-q", *arguments)

    def wget_out(self, path: str, *arguments: Any) -> str:
        return self.wget("-O", path, *arguments)

    def curl(self, *arguments: Any) -> str:
        return self.run("curl", "-s", *arguments)

    def curl_out(self, path: str, *arguments: Any) -> str:
        return self.curl("-o", path, *arguments)

    def rmdir(self, *arguments: Any) -> str:
        return self.run("rmdir", *arguments)

    def rm(self, *arguments: Any) -> str:
        return self.run("rm", *arguments)

    def rm_r(self, *arguments: Any) -> str:
        return self.rm("-r", *arguments)

    def rm_rf(self, *arguments: Any) -> str:
        return self.rm("-rf", *arguments)

    # ------------------------------------------------------------
    # system information
    # ------------------------------------------------------------

    def time(self) -> dt.datetime:
        """Remote clock as an aware UTC datetime."""
        return dt.datetime.fromtimestamp(int(self.run("date", "+%s").strip()), tz=dt.UTC)

    def date(self) -> dt.date:
        return self.time().date()

    def id(self) -> dict[str, str]:
        """Parse ``id`` output, e.g. ``{"uid": "1000(alice)", "gid": ..., "groups": ...}``."""
        fields: dict[str, str] = {}
        for pair in self.run("id").split():
            name, _, value = pair.partition("=")
            fields[name] = value
        return fields

    def uid(self) -> int:
        return int(self.run("id", "-u"))

    def gid(self) -> int:
        return int(self.run("id", "-g"))

    def whoami(self, *arguments: Any) -> str:
        return _chomp(self.run("whoami", *arguments))

    def who(self, *arguments: Any) -> str:
        return self.run("who", *arguments)

    def w(self, *arguments: Any) -> str:
        return self.run("w", *arguments)

    def lastlog(self, *arguments: Any) -> str:
        return self.run("lastlog", *arguments)

    def faillog(self, *arguments: Any) -> str:
        return self.run("faillog", *arguments)

    def ps(self, *arguments: Any) -> str:
        return self.run("ps", *arguments)

    def ps_aux(self, *arguments: Any) -> str:
        return self.ps("aux", *arguments)

    def kill(self, *arguments: Any) -> str:
        return self.run("kill", *arguments)

    # ------------------------------------------------------------
    # network
    # ------------------------------------------------------------

    def ifconfig(self, *arguments: Any) -> str:
        return self.run("ifconfig", *arguments)

    def netstat(self, *arguments: Any) -> str:
        return self.run("netstat", *arguments)

    def netstat_anp(self, *arguments: Any) -> str:
        return self.netstat("-anp", *arguments)

    def ping(self, *arguments: Any) -> str:
        return self.run("ping", *arguments)

    # ------------------------------------------------------------
    # toolchains & interpreters
    # ------------------------------------------------------------

    def gcc(self, *arguments: Any) -> str:
        return self.run("gcc", *arguments)

    def cc(self, *arguments: Any) -> str:
        return self.run("cc", *arguments)

    def perl(self, *arguments: Any) -> str:
        return self.run("perl", *arguments)

    def python(self, *arguments: Any) -> str:
        return self.run("python", *arguments)

    def ruby(self, *arguments: Any) -> str:
        return self.run("ruby", *arguments)


__all__ = ["Shell", "check_env_name"]
