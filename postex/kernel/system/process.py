"""Process facade over the ``process_*`` primitives."""

from __future__ import annotations

from typing import Any, ClassVar

from postex.kernel.capabilities import OperationRequirement, requires
from postex.kernel.ports.primitives import Primitive
from postex.kernel.remote_process import RemoteProcess
from postex.kernel.resource import Resource

_STREAM_PRIMITIVES = frozenset(
    {
        Primitive.PROCESS_POPEN,
        Primitive.PROCESS_READ,
        Primitive.PROCESS_WRITE,
        Primitive.PROCESS_CLOSE,
    }
)


def _operation_table() -> dict[str, OperationRequirement]:
    table = {
        primitive.value.removeprefix("process_"): requires(primitive)
        for primitive in Primitive.in_group("process") - _STREAM_PRIMITIVES
    }
    table["getenv"] = requires(
        alternatives=(Primitive.PROCESS_GETENV, Primitive.PROCESS_ENVIRON)
    )
    table["popen"] = requires(
        Primitive.PROCESS_POPEN,
        optional=(Primitive.PROCESS_READ, Primitive.PROCESS_WRITE, Primitive.PROCESS_CLOSE),
    )
    return dict(sorted(table.items()))


class Process(Resource):
    """Identity, environment and child processes of the remote shell process."""

    OPERATIONS: ClassVar[dict[str, OperationRequirement]] = _operation_table()

    def _call(self, operation: str, *args: Any) -> Any:
        self._require(operation)
        return getattr(self.session, f"process_{operation}")(*args)

    def getpid(self) -> int:
        return self._call("getpid")

    def getppid(self) -> int:
        return self._call("getppid")

    def getuid(self) -> int:
        return self._call("getuid")

    def setuid(self, uid: int) -> None:
        self._call("setuid", uid)

    def geteuid(self) -> int:
        return self._call("geteuid")

    def seteuid(self, euid: int) -> None:
        self._call("seteuid", euid)

    def getgid(self) -> int:
        return self._call("getgid")

    def setgid(self, gid: int) -> None:
        self._call("setgid", gid)

    def getegid(self) -> int:
        return self._call("getegid")

    def setegid(self, egid: int) -> None:
        self._call("setegid", egid)

    def getsid(self) -> int:
        return self._call("getsid")

    def setsid(self) -> int:
        return self._call("setsid")

    def environ(self) -> dict[str, str]:
        return self._call("environ")

    def getenv(self, name: str) -> str | None:
        """Read one variable, through ``process_environ`` if there is no ``process_getenv``."""
        self._require("getenv")
        if self.has_primitive(Primitive.PROCESS_GETENV):
            return self.session.process_getenv(name)
        return self.session.process_environ().get(name)

    def setenv(self, name: str, value: str) -> None:
        self._call("setenv", name, value)

    def unsetenv(self, name: str) -> None:
        self._call("unsetenv", name)

    def kill(self, pid: int, signal: str | int = "KILL") -> None:
        self._call("kill", pid, signal)

    def spawn(self, program: str, *arguments: str) -> int:
        """Start *program* in the background and return its PID."""
        return self._call("spawn", program, *arguments)

    def popen(self, command: str) -> RemoteProcess:
        """Start *command* and return an open streaming handle on it."""
        self._require("popen")
        return RemoteProcess(self.session, command).open()

    def exit(self) -> None:
        self._call("exit")


__all__ = ["Process"]
