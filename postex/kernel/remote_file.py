"""Remote file handle.

:class:`RemoteFile` picks an I/O strategy when it is opened, based on the
primitives the session implements:

+----------------+------------------------------------------+-----------------------------+
| Strategy       | Primitives                               | Behaviour                   |
+================+==========================================+=============================+
| random_access  | file_read and/or file_write + file_seek  | block reads, remote seeks   |
| streaming      | file_read and/or file_write, no seek     | block reads, client-side    |
|                |                                          | position, no repositioning  |
| whole_file     | fs_readfile only                         | one fetch into memory,      |
|                |                                          | read-only                   |
+----------------+------------------------------------------+-----------------------------+

``file_open``, ``file_tell``, ``file_close`` and ``file_stat`` are used
whenever they exist.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import Any, ClassVar

from postex.kernel.buffered_io import BLOCK_SIZE, BlockReader
from postex.kernel.capabilities import OperationRequirement, requires
from postex.kernel.captured_file import CapturedFile
from postex.kernel.domain.stat import Stat
from postex.kernel.exceptions import (
    ClosedResourceError,
    DescriptorError,
    InvalidArgumentError,
    NotFoundError,
    UnsupportedCapabilityError,
)
from postex.kernel.logging import get_logger
from postex.kernel.ports.detection import session_capabilities, session_name
from postex.kernel.ports.primitives import Primitive, Whence
from postex.kernel.ports.session import Session
from postex.kernel.resource import Resource

logger = get_logger(__name__)


class FileStrategy(StrEnum):
    """I/O strategy selected when a :class:`RemoteFile` is opened."""

    RANDOM_ACCESS = "random_access"
    STREAMING = "streaming"
    WHOLE_FILE = "whole_file"


class RemoteFile(Resource):
    """A file on the remote host.

    Constructing the object performs no I/O; :meth:`open` (or entering the
    context manager) does. Data is always ``bytes``.

    Examples
    --------
    .. code-block:: python

        with RemoteFile(session, "/etc/passwd") as f:
            for line in f:
                ...
    """

    OPERATIONS: ClassVar[dict[str, OperationRequirement]] = {
        "open": requires(
            alternatives=(Primitive.FILE_READ, Primitive.FILE_WRITE, Primitive.FS_READFILE),
            optional=(Primitive.FILE_OPEN,),
        ),
        "read": requires(alternatives=(Primitive.FILE_READ, Primitive.FS_READFILE)),
        "write": requires(Primitive.FILE_WRITE),
        "seek": requires(
            alternatives=(Primitive.FILE_SEEK, Primitive.FS_READFILE),
            optional=(Primitive.FILE_TELL,),
        ),
        "tell": requires(optional=(Primitive.FILE_TELL,)),
        "ioctl": requires(Primitive.FILE_IOCTL),
        "fcntl": requires(Primitive.FILE_FCNTL),
        "stat": requires(alternatives=(Primitive.FILE_STAT, Primitive.FS_STAT)),
        "flush": requires(),
        "close": requires(optional=(Primitive.FILE_CLOSE,)),
        "reopen": requires(optional=(Primitive.FILE_CLOSE, Primitive.FILE_OPEN)),
    }

    def __init__(self, session: Session, path: str, mode: str = "r") -> None:
        super().__init__(session)
        self.path = str(path)
        self.mode = mode
        self.fd: Any = None
        self.pos = 0
        self.strategy: FileStrategy | None = None
        self._open = False
        self._reader = BlockReader(self._read_block)
        self._captured: CapturedFile | None = None

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return not self._open

    def open(self) -> RemoteFile:
        """Select a strategy and, when the session supports it, obtain a descriptor."""
        if self._open:
            return self
        self._require("open")

        capabilities = session_capabilities(self.session)
        if Primitive.FILE_READ in capabilities or Primitive.FILE_WRITE in capabilities:
            if Primitive.FILE_SEEK in capabilities:
                self.strategy = FileStrategy.RANDOM_ACCESS
            else:
                self.strategy = FileStrategy.STREAMING
            if Primitive.FILE_OPEN in capabilities:
                self.fd = self.session.file_open(self.path, self.mode)
        else:
            self.strategy = FileStrategy.WHOLE_FILE

        self.pos = 0
        self._reader.clear()
        self._open = True
        logger.debug(
            "Opened {path} ({strategy}) on {session}",
            path=self.path,
            strategy=self.strategy,
            session=session_name(self.session),
        )
        return self

    def close(self) -> None:
        """Flush (in write modes), release the descriptor and drop buffers."""
        if not self._open:
            return
        if self._writable_mode:
            self.flush()
        if self.fd is not None and self.has_primitive(Primitive.FILE_CLOSE):
            self.session.file_close(self.fd)
        self.fd = None
        self._open = False
        self._reader.clear()
        if self._captured is not None:
            self._captured.close()
            self._captured = None

    def reopen(self, path: str) -> RemoteFile:
        """Close the current handle and open *path* with the same mode."""
        self.close()
        self.path = str(path)
        self.strategy = None
        return self.open()

    def flush(self) -> RemoteFile:
        """Writes go straight to the session, so there is nothing to push."""
        self._check_open()
        return self

    def __enter__(self) -> RemoteFile:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------
    # reading
    # ------------------------------------------------------------

    def read(self, size: int = -1) -> bytes:
        """Read up to *size* bytes (all remaining when negative); ``b""`` at EOF."""
        self._check_open()
        self._require("read")
        if self.strategy is FileStrategy.WHOLE_FILE:
            captured = self._capture()
            data = captured.read(size)
            self.pos = captured.tell()
            return data

        data = self._reader.read(size)
        self.pos += len(data)
        return data

    def readline(self, size: int = -1) -> bytes:
        self._check_open()
        self._require("read")
        if self.strategy is FileStrategy.WHOLE_FILE:
            captured = self._capture()
            line = captured.readline(size)
            self.pos = captured.tell()
            return line

        line = self._reader.readline(size)
        self.pos += len(line)
        return line

    def readlines(self) -> list[bytes]:
        return list(self)

    def __iter__(self) -> Iterator[bytes]:
        while line := self.readline():
            yield line

    @property
    def eof(self) -> bool:
        """True once the end of the file is known to have been reached."""
        if self.strategy is FileStrategy.WHOLE_FILE:
            captured = self._captured
            return captured is not None and captured.tell() >= len(captured.getbuffer())
        return self._reader.eof

    def _read_block(self) -> bytes | None:
        return self.session.file_read(self.fd, BLOCK_SIZE)

    def _capture(self) -> CapturedFile:
        if self._captured is None:
            contents = self.session.fs_readfile(self.path)
            self._captured = CapturedFile(self.path, contents or b"")
            logger.debug(
                "Captured {size} bytes of {path}",
                size=len(self._captured.getbuffer()),
                path=self.path,
            )
        return self._captured

    # ------------------------------------------------------------
    # writing
    # ------------------------------------------------------------

    def write(self, data: bytes) -> int:
        """Write *data* at the current position and advance by the bytes written."""
        self._check_open()
        self._require("write")
        if self.strategy is FileStrategy.WHOLE_FILE:
            raise UnsupportedCapabilityError(
                "write", [Primitive.FILE_WRITE], session=session_name(self.session)
            )

        self._reader.clear()
        written = self.session.file_write(self.fd, self.pos, bytes(data))
        self.pos += written
        return written

    @property
    def _writable_mode(self) -> bool:
        return any(flag in self.mode for flag in "wa+")

    # ------------------------------------------------------------
    # positioning
    # ------------------------------------------------------------

    def seek(self, offset: int, whence: int = Whence.SET) -> int:
        """Reposition the file and return the new absolute position.

        Raises
        ------
        InvalidArgumentError
            For an unknown *whence* or a negative resulting position
        UnsupportedCapabilityError
            When the session cannot reposition this file
        """
        self._check_open()
        try:
            whence = Whence(whence)
        except ValueError:
            raise InvalidArgumentError("whence", "must be SET, CUR, END, DATA or HOLE", value=whence) from None

        if self.strategy is FileStrategy.WHOLE_FILE:
            return self._seek_captured(offset, whence)

        # Position is tracked in consumed bytes while the remote offset runs
        # ahead by the look-ahead buffer, so relative seeks become absolute.
        if whence is Whence.CUR:
            offset, whence = self.pos + offset, Whence.SET
        if whence is Whence.SET and offset < 0:
            raise InvalidArgumentError("offset", "resulting position must not be negative", value=offset)

        if not self.has_primitive(Primitive.FILE_SEEK):
            if whence is Whence.SET and offset == self.pos:
                return self.pos
            raise UnsupportedCapabilityError(
                "seek", [Primitive.FILE_SEEK], session=session_name(self.session)
            )
        if whence is not Whence.SET:
            self._require_primitive("seek", Primitive.FILE_TELL)

        self._reader.clear()
        self.session.file_seek(self.fd, offset, int(whence))
        if self.has_primitive(Primitive.FILE_TELL):
            self.pos = self.session.file_tell(self.fd)
        else:
            self.pos = offset
        return self.pos

    def _seek_captured(self, offset: int, whence: Whence) -> int:
        if whence in (Whence.DATA, Whence.HOLE):
            raise UnsupportedCapabilityError(
                "seek", [Primitive.FILE_SEEK], session=session_name(self.session)
            )
        captured = self._capture()
        if whence is Whence.SET:
            target = offset
        elif whence is Whence.CUR:
            target = self.pos + offset
        else:
            target = len(captured.getbuffer()) + offset
        if target < 0:
            raise InvalidArgumentError("offset", "resulting position must not be negative", value=target)
        self.pos = captured.seek(target)
        return self.pos

    def tell(self) -> int:
        """Return the current position, asking the session when it can answer."""
        self._check_open()
        if (
            self.strategy is not FileStrategy.WHOLE_FILE
            and self.fd is not None
            and self.has_primitive(Primitive.FILE_TELL)
        ):
            self.pos = self.session.file_tell(self.fd) - self._reader.buffered
        return self.pos

    # ------------------------------------------------------------
    # control & metadata
    # ------------------------------------------------------------

    def ioctl(self, command: Any, argument: Any) -> int:
        self._require("ioctl")
        if self.fd is None:
            raise DescriptorError("ioctl")
        return self.session.file_ioctl(self.fd, command, argument)

    def fcntl(self, command: Any, argument: Any) -> int:
        self._require("fcntl")
        if self.fd is None:
            raise DescriptorError("fcntl")
        return self.session.file_fcntl(self.fd, command, argument)

    def stat(self) -> Stat:
        """Stat the open descriptor if possible, else the path.

        Raises
        ------
        NotFoundError
            If the remote path does not exist
        """
        self._require("stat")
        if self.fd is not None and self.has_primitive(Primitive.FILE_STAT):
            data = self.session.file_stat(self.fd)
        else:
            self._require_primitive("stat", Primitive.FS_STAT)
            data = self.session.fs_stat(self.path)

        if data is None:
            raise NotFoundError(self.path)
        return Stat.from_primitive(self.path, data)

    def _check_open(self) -> None:
        if not self._open:
            raise ClosedResourceError(f"file {self.path}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{self.path}>"


__all__ = ["FileStrategy", "RemoteFile"]
