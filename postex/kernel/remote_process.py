"""Streaming handle on a command running on the remote host."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, ClassVar

from postex.kernel.buffered_io import BLOCK_SIZE, BlockReader
from postex.kernel.capabilities import OperationRequirement, requires
from postex.kernel.exceptions import ClosedResourceError
from postex.kernel.logging import get_logger
from postex.kernel.ports.detection import session_name
from postex.kernel.ports.primitives import Primitive
from postex.kernel.ports.session import Session
from postex.kernel.resource import Resource

logger = get_logger(__name__)


class RemoteProcess(Resource):
    """One remote child process driven through ``process_popen``.

    Output is read through ``process_read`` in blocks until the session
    reports the child has finished; input goes through ``process_write``.
    """

    OPERATIONS: ClassVar[dict[str, OperationRequirement]] = {
        "open": requires(Primitive.PROCESS_POPEN),
        "read": requires(Primitive.PROCESS_READ),
        "write": requires(Primitive.PROCESS_WRITE),
        "close": requires(optional=(Primitive.PROCESS_CLOSE,)),
        "reopen": requires(Primitive.PROCESS_POPEN, optional=(Primitive.PROCESS_CLOSE,)),
    }

    def __init__(self, session: Session, command: str) -> None:
        super().__init__(session)
        self.command = command
        self.fd: Any = None
        self._open = False
        self._reader = BlockReader(self._read_block)

    @property
    def closed(self) -> bool:
        return not self._open

    @property
    def eof(self) -> bool:
        return self._reader.eof

    def open(self) -> RemoteProcess:
        if self._open:
            return self
        self._require("open")
        self.fd = self.session.process_popen(self.command)
        self._reader.clear()
        self._open = True
        logger.debug(
            "Started {command!r} on {session}",
            command=self.command,
            session=session_name(self.session),
        )
        return self

    def close(self) -> None:
        if not self._open:
            return
        if self.fd is not None and self.has_primitive(Primitive.PROCESS_CLOSE):
            self.session.process_close(self.fd)
        self.fd = None
        self._open = False
        self._reader.clear()

    def reopen(self, command: str) -> RemoteProcess:
        """Close the current child and start *command* in its place."""
        self.close()
        self.command = command
        return self.open()

    def read(self, size: int = -1) -> bytes:
        """Read output; with a negative *size* read until the child finishes."""
        self._check_open()
        self._require("read")
        return self._reader.read(size)

    def readline(self, size: int = -1) -> bytes:
        self._check_open()
        self._require("read")
        return self._reader.readline(size)

    def __iter__(self) -> Iterator[bytes]:
        while line := self.readline():
            yield line

    def write(self, data: bytes) -> int:
        self._check_open()
        self._require("write")
        return self.session.process_write(self.fd, bytes(data))

    def _read_block(self) -> bytes | None:
        return self.session.process_read(self.fd, BLOCK_SIZE)

    def _check_open(self) -> None:
        if not self._open:
            raise ClosedResourceError(f"process {self.command!r}")

    def __enter__(self) -> RemoteProcess:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{self.command}>"


__all__ = ["RemoteProcess"]
