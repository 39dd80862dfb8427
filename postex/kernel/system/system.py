"""System: the unit a caller builds around one session."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import ClassVar

from postex.kernel.capabilities import OperationRequirement, requires
from postex.kernel.ports.primitives import Primitive
from postex.kernel.ports.session import Session
from postex.kernel.resource import Resource
from postex.kernel.system.fs import FS
from postex.kernel.system.process import Process
from postex.kernel.system.shell import Shell


class System(Resource):
    """One :class:`FS`, one :class:`Process` and one :class:`Shell` over a session.

    Examples
    --------
    .. code-block:: python

        system = System(session)
        system.fs.chdir("/etc")
        passwd = system.fs.read("passwd")
        print(system.shell.whoami())
    """

    OPERATIONS: ClassVar[dict[str, OperationRequirement]] = {
        "time": requires(Primitive.SYS_TIME),
        "hostname": requires(Primitive.SYS_HOSTNAME),
        "exit": requires(Primitive.PROCESS_EXIT),
    }

    def __init__(self, session: Session, encoding: str = "utf-8") -> None:
        super().__init__(session)
        self.fs = FS(session)
        self.process = Process(session)
        self.shell = Shell(session, encoding=encoding)

    def time(self) -> datetime:
        """Remote clock as an aware UTC datetime."""
        self._require("time")
        return datetime.fromtimestamp(int(self.session.sys_time()), tz=UTC)

    def hostname(self) -> str:
        self._require("hostname")
        return self.session.sys_hostname()

    def exit(self) -> None:
        """Ask the remote shell process to exit."""
        self._require("exit")
        self.process.exit()


__all__ = ["System"]
