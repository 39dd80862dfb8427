"""Shell-emulated session.

Every primitive becomes one POSIX command sent to an interactive shell.
A shell draws no boundary around a command's output, so each command is
framed::

    echo ---; COMMAND 2>/dev/null | base64; echo ---

and the reply is recovered with a two-phase line scan: skip everything up
to the first delimiter line (prompts, banners, echoed input), then collect
lines up to the second delimiter and base64-decode them. The encoded
payload only ever contains base64 characters and newlines, so the
delimiter can not collide with it even when the raw output contains the
delimiter text.

Commands that change shell state (``cd``, ``export``, ``unset``,
``exit``) are written without framing and nothing is read back.
"""

from __future__ import annotations

import base64
import binascii
import shlex
import threading
from typing import Any, BinaryIO

from postex.drivers.sessions.base import BaseSession
from postex.kernel.config import ShellConfig
from postex.kernel.exceptions import SessionConnectionError
from postex.kernel.logging import get_logger
from postex.kernel.system.shell import check_env_name

logger = get_logger(__name__)

# Field positions in ``stat -t`` output
_STAT_FIELDS = {
    "size": 1,
    "blocks": 2,
    "uid": 4,
    "gid": 5,
    "inode": 7,
    "nlinks": 8,
    "atime": 11,
    "mtime": 12,
    "ctime": 13,
    "blocksize": 14,
}


class ShellSession(BaseSession):
    """Session driving a POSIX shell over a binary stream.

    Args
    ----
        io: Binary stream connected to the shell (``readline``/``write``/``close``)
        config: Framing settings; defaults to :class:`ShellConfig`
        name: Display name

    Example
    -------
    .. code-block:: python

        sock = socket.create_connection(("10.0.0.5", 4444))
        session = ShellSession(sock.makefile("rwb"))
        session.fs_readdir("/etc")
    """

    def __init__(
        self,
        io: BinaryIO | Any,
        config: ShellConfig | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(name=name)
        self.io = io
        self.config = config or ShellConfig()
        self._delimiter = self.config.delimiter.encode(self.config.encoding)
        self._lock = threading.RLock()

    @property
    def delimiter(self) -> str:
        return self.config.delimiter

    @property
    def encoding(self) -> str:
        return self.config.encoding

    # ------------------------------------------------------------
    # line I/O
    # ------------------------------------------------------------

    def shell_puts(self, line: str) -> None:
        """Write one command line to the shell."""
        with self._lock:
            self.io.write(f"{line}\n".encode(self.encoding))
            flush = getattr(self.io, "flush", None)
            if flush is not None:
                flush()

    def shell_gets(self) -> bytes | None:
        """Read one line from the shell; ``None`` at end of stream."""
        line = self.io.readline()
        return line or None

    def _is_delimiter(self, line: bytes) -> bool:
        return line.rstrip(b"\r\n") == self._delimiter

    # ------------------------------------------------------------
    # framing
    # ------------------------------------------------------------

    def frame(self, command: str) -> str:
        """Return the framed command line sent for *command*."""
        marker = shlex.quote(self.delimiter)
        return f"echo {marker}; {command} 2>/dev/null | base64; echo {marker}"

    def shell_exec(self, command: str) -> bytes:
        """Run *command* and return everything it wrote to stdout.

        Raises
        ------
        SessionConnectionError
            If the stream ends before both delimiters are seen, or the
            payload is not valid base64
        """
        with self._lock:
            logger.debug("exec: {command}", command=command)
            self.shell_puts(self.frame(command))

            while True:
                line = self.shell_gets()
                if line is None:
                    raise SessionConnectionError("stream ended before the opening delimiter")
                if self._is_delimiter(line):
                    break

            payload: list[bytes] = []
            while True:
                line = self.shell_gets()
                if line is None:
                    raise SessionConnectionError("stream ended before the closing delimiter")
                if self._is_delimiter(line):
                    break
                payload.append(line)

        try:
            output = base64.b64decode(b"".join(payload))
        except binascii.Error as exc:
            raise SessionConnectionError(f"malformed base64 payload ({exc})") from exc
        logger.debug("exec: {size} bytes of output", size=len(output))
        return output

    def command_exec(self, command: str, *arguments: Any) -> bytes | None:
        """Run a shell-quoted command line; ``None`` when it printed nothing."""
        output = self.shell_exec(shlex.join([command, *(str(arg) for arg in arguments)]))
        return output or None

    def _text(self, output: bytes | None) -> str:
        return (output or b"").decode(self.encoding, errors="replace").removesuffix("\n")

    def _lines(self, output: bytes | None) -> list[str]:
        return (output or b"").decode(self.encoding, errors="replace").splitlines()

    # ------------------------------------------------------------
    # sys
    # ------------------------------------------------------------

    def sys_time(self) -> int:
        return int(self.shell_exec("date +%s"))

    def sys_hostname(self) -> str:
        return self._text(self.shell_exec("echo $HOSTNAME"))

    # ------------------------------------------------------------
    # fs
    # ------------------------------------------------------------

    def fs_getcwd(self) -> str:
        return self._text(self.shell_exec("pwd"))

    def fs_chdir(self, path: str) -> None:
        self.shell_puts(f"cd {shlex.quote(path)} 2>/dev/null")

    def fs_readfile(self, path: str) -> bytes | None:
        return self.command_exec("cat", path)

    def fs_readlink(self, path: str) -> str | None:
        output = self.command_exec("readlink", "-f", path)
        return self._text(output) if output else None

    def fs_readdir(self, path: str) -> list[str]:
        return self._lines(self.command_exec("ls", path))

    def fs_glob(self, pattern: str) -> list[str]:
        # Unquoted so the remote shell expands the pattern
        return self._lines(self.shell_exec(f"ls {pattern}"))

    def fs_mktemp(self, basename: str) -> str:
        return self._text(self.command_exec("mktemp", basename))

    def fs_mkdir(self, path: str) -> None:
        self.command_exec("mkdir", path)

    def fs_copy(self, src: str, dest: str) -> None:
        self.command_exec("cp", "-r", src, dest)

    def fs_unlink(self, path: str) -> None:
        self.command_exec("rm", path)

    def fs_rmdir(self, path: str) -> None:
        self.command_exec("rmdir", path)

    def fs_move(self, src: str, dest: str) -> None:
        self.command_exec("mv", src, dest)

    def fs_link(self, src: str, dest: str) -> None:
        self.command_exec("ln", "-s", src, dest)

    def fs_chgrp(self, group: str | int, path: str) -> None:
        self.command_exec("chgrp", group, path)

    def fs_chown(self, user: str | int, path: str) -> None:
        self.command_exec("chown", user, path)

    def fs_chmod(self, mode: int, path: str) -> None:
        self.command_exec("chmod", f"{mode:04o}", path)

    def fs_stat(self, path: str) -> dict[str, Any] | None:
        """Parse ``stat -t`` output; ``None`` when the path does not exist."""
        output = self.command_exec("stat", "-t", path)
        if output is None:
            return None

        fields = self._text(output).split()
        if len(fields) <= max(_STAT_FIELDS.values()):
            raise SessionConnectionError(f"unexpected stat output for {path!r}")
        stat: dict[str, Any] = {"path": fields[0]}
        for name, index in _STAT_FIELDS.items():
            stat[name] = int(fields[index])
        return stat

    # ------------------------------------------------------------
    # process
    # ------------------------------------------------------------

    def process_getpid(self) -> int:
        return int(self.shell_exec("echo $$"))

    def process_getppid(self) -> int:
        return int(self.shell_exec("echo $PPID"))

    def process_getuid(self) -> int:
        return int(self.command_exec("id", "-u") or b"")

    def process_getgid(self) -> int:
        return int(self.command_exec("id", "-g") or b"")

    def process_environ(self) -> dict[str, str]:
        environ: dict[str, str] = {}
        for line in self._lines(self.command_exec("env")):
            name, sep, value = line.partition("=")
            if sep:
                environ[name] = value
        return environ

    def process_getenv(self, name: str) -> str | None:
        """Return the variable's value, or ``None`` when unset or empty."""
        check_env_name(name)
        return self._text(self.shell_exec(f"echo ${name}")) or None

    def process_setenv(self, name: str, value: str) -> None:
        check_env_name(name)
        self.shell_puts(f"export {name}={shlex.quote(str(value))}")

    def process_unsetenv(self, name: str) -> None:
        check_env_name(name)
        self.shell_puts(f"unset {name}")

    def process_kill(self, pid: int, signal: str | int = "KILL") -> None:
        self.command_exec("kill", "-s", signal, pid)

    def process_spawn(self, program: str, *arguments: Any) -> int:
        """Start *program* in the background with output discarded; return its PID."""
        command = shlex.join([program, *(str(arg) for arg in arguments)])
        return int(self.shell_exec(f"{command} >/dev/null 2>&1 & echo $!"))

    def process_exit(self) -> None:
        self.shell_puts("exit")

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------

    def close(self) -> None:
        logger.info("Closing session {name}", name=self.name)
        self.io.close()


__all__ = ["ShellSession"]
