"""Session port: the sole abstraction over how the remote host is reached.

A session implements some subset of the :class:`Primitive` catalog as
methods named after the primitives. Its ``capabilities`` attribute is the
explicit, enumerable set of primitives it answers to; resources consult it
instead of probing attributes.

Capability sub-protocols
------------------------
+--------------------------+------------------------------------------------+
| Sub-protocol             | Primitives                                     |
+==========================+================================================+
| SupportsShellExec        | shell_exec                                     |
| SupportsReadFile         | fs_readfile                                    |
| SupportsFileDescriptors  | file_open / file_read / file_write / file_close|
| SupportsProcessStreams   | process_popen / read / write / close           |
+--------------------------+------------------------------------------------+

The sub-protocols are for static typing and ``isinstance`` convenience;
resources still gate on ``capabilities`` because a session may define a
method yet not have negotiated it.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from postex.kernel.ports.primitives import Primitive


@runtime_checkable
class Session(Protocol):
    """Capability holder bound to one remote host."""

    @property
    def name(self) -> str:
        """Display name of the session (e.g. ``10.0.0.5:4444``)."""
        ...

    @property
    def capabilities(self) -> frozenset[Primitive]:
        """Primitives this session currently implements."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying transport."""
        ...


@runtime_checkable
class SupportsShellExec(Protocol):
    """Run one shell command and return its full output."""

    @abstractmethod
    def shell_exec(self, command: str) -> bytes:
        """Execute *command* and return everything it wrote to stdout."""
        ...


@runtime_checkable
class SupportsReadFile(Protocol):
    """Read a whole remote file in one call."""

    @abstractmethod
    def fs_readfile(self, path: str) -> bytes | None:
        """Return the file contents, or ``None`` when there is nothing to read."""
        ...


@runtime_checkable
class SupportsFileDescriptors(Protocol):
    """Descriptor-based random access file I/O."""

    @abstractmethod
    def file_open(self, path: str, mode: str = "r") -> int:
        """Open *path* and return an opaque descriptor."""
        ...

    @abstractmethod
    def file_read(self, fd: int, length: int) -> bytes | None:
        """Read up to *length* bytes; ``None`` at end of file."""
        ...

    @abstractmethod
    def file_write(self, fd: int, pos: int, data: bytes) -> int:
        """Write *data* at *pos* and return the number of bytes written."""
        ...

    @abstractmethod
    def file_close(self, fd: int) -> None:
        """Close the descriptor."""
        ...


@runtime_checkable
class SupportsProcessStreams(Protocol):
    """Streaming child processes."""

    @abstractmethod
    def process_popen(self, command: str) -> int:
        """Start *command* and return an opaque process handle."""
        ...

    @abstractmethod
    def process_read(self, fd: int, length: int) -> bytes | None:
        """Read up to *length* bytes of output; ``None`` once the child is done."""
        ...

    @abstractmethod
    def process_write(self, fd: int, data: bytes) -> int:
        """Write *data* to the child's stdin."""
        ...

    @abstractmethod
    def process_close(self, fd: int) -> None:
        """Release the process handle."""
        ...


__all__ = [
    "Session",
    "SupportsFileDescriptors",
    "SupportsProcessStreams",
    "SupportsReadFile",
    "SupportsShellExec",
]
