"""Configuration file for pytest containing fixtures and configuration.

This module provides fixtures that can be used across multiple test files:
- scripted_io: In-memory shell peer replaying pre-recorded output
- framed: Wraps a payload the way a POSIX shell answers a framed command
- shell_session: Factory building a ShellSession over scripted output
- memory_session: Descriptor-capable session backed by in-memory files
- readfile_session: Session implementing only fs_readfile
"""

from __future__ import annotations

import base64
import io
import os
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from postex.drivers.sessions import ShellSession
from postex.kernel.config import ShellConfig
from postex.kernel.ports.primitives import Primitive


class ScriptedIO:
    """Binary stream standing in for a remote shell.

    Reads replay *output*; everything written is kept in ``written``.
    """

    def __init__(self, output: bytes = b"") -> None:
        self._output = io.BytesIO(output)
        self.written = bytearray()
        self.closed = False

    def write(self, data: bytes) -> int:
        self.written.extend(data)
        return len(data)

    def flush(self) -> None:
        pass

    def readline(self) -> bytes:
        return self._output.readline()

    def close(self) -> None:
        self.closed = True

    @property
    def lines(self) -> list[str]:
        return self.written.decode().splitlines()


def _framed(payload: bytes, delimiter: str = "---") -> bytes:
    marker = delimiter.encode() + b"\n"
    return marker + base64.encodebytes(payload) + marker


class MemorySession:
    """Session with descriptor primitives over a dict of in-memory files."""

    name = "memory"

    def __init__(
        self,
        files: dict[str, bytes] | None = None,
        capabilities: Iterable[Primitive] | None = None,
    ) -> None:
        self.files = {path: bytearray(data) for path, data in (files or {}).items()}
        self.capabilities = None if capabilities is None else frozenset(capabilities)
        self.calls: list[tuple[Any, ...]] = []
        self._fds: dict[int, list[Any]] = {}
        self._next_fd = 3

    def file_open(self, path: str, mode: str = "r") -> int:
        self.calls.append(("file_open", path, mode))
        if "w" in mode or (path not in self.files and ("a" in mode or "+" in mode)):
            self.files[path] = bytearray()
        fd = self._next_fd
        self._next_fd += 1
        self._fds[fd] = [path, len(self.files[path]) if "a" in mode else 0]
        return fd

    def file_read(self, fd: int, length: int) -> bytes | None:
        self.calls.append(("file_read", fd, length))
        path, pos = self._fds[fd]
        data = bytes(self.files[path][pos : pos + length])
        if not data:
            return None
        self._fds[fd][1] = pos + len(data)
        return data

    def file_write(self, fd: int, pos: int, data: bytes) -> int:
        self.calls.append(("file_write", fd, pos, data))
        buffer = self.files[self._fds[fd][0]]
        if pos > len(buffer):
            buffer.extend(b"\0" * (pos - len(buffer)))
        buffer[pos : pos + len(data)] = data
        self._fds[fd][1] = pos + len(data)
        return len(data)

    def file_seek(self, fd: int, offset: int, whence: int) -> None:
        self.calls.append(("file_seek", fd, offset, whence))
        path, pos = self._fds[fd]
        base = {os.SEEK_SET: 0, os.SEEK_CUR: pos, os.SEEK_END: len(self.files[path])}[whence]
        self._fds[fd][1] = base + offset

    def file_tell(self, fd: int) -> int:
        self.calls.append(("file_tell", fd))
        return self._fds[fd][1]

    def file_ioctl(self, fd: int, command: int, argument: int) -> int:
        self.calls.append(("file_ioctl", fd, command, argument))
        return 0

    def file_stat(self, fd: int) -> dict[str, Any]:
        self.calls.append(("file_stat", fd))
        path = self._fds[fd][0]
        return {"path": path, "size": len(self.files[path]), "mode": 0o100644}

    def file_close(self, fd: int) -> None:
        self.calls.append(("file_close", fd))
        del self._fds[fd]

    def fs_readfile(self, path: str) -> bytes | None:
        self.calls.append(("fs_readfile", path))
        data = self.files.get(path)
        return None if data is None else bytes(data)

    def fs_stat(self, path: str) -> dict[str, Any] | None:
        self.calls.append(("fs_stat", path))
        if path not in self.files:
            return None
        return {"size": len(self.files[path]), "mode": 0o100644}

    def called(self, primitive: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == primitive]


class ReadFileSession:
    """Session whose only primitive is ``fs_readfile``."""

    name = "readfile-only"

    def __init__(self, files: dict[str, bytes]) -> None:
        self.files = files
        self.calls: list[tuple[str, str]] = []

    def fs_readfile(self, path: str) -> bytes | None:
        self.calls.append(("fs_readfile", path))
        return self.files.get(path)


@pytest.fixture
def scripted_io() -> type[ScriptedIO]:
    """The ScriptedIO class (instantiate with the peer's output)."""
    return ScriptedIO


@pytest.fixture
def framed() -> Callable[..., bytes]:
    """Function wrapping a payload in delimiter lines and base64."""
    return _framed


@pytest.fixture
def shell_session() -> Callable[..., tuple[ShellSession, ScriptedIO]]:
    """Factory: ``shell_session(b"raw peer output", config=None)`` -> (session, io)."""

    def factory(output: bytes = b"", config: ShellConfig | None = None):
        stream = ScriptedIO(output)
        return ShellSession(stream, config=config), stream

    return factory


@pytest.fixture
def memory_session() -> Callable[..., MemorySession]:
    """Factory: ``memory_session({"/path": b"data"}, capabilities=None)``."""
    return MemorySession


@pytest.fixture
def readfile_session() -> Callable[..., ReadFileSession]:
    """Factory: ``readfile_session({"/path": b"data"})``."""
    return ReadFileSession
