"""Filesystem facade.

Path-addressed operations over the ``fs_*`` primitives, plus file and
directory handles. Relative paths are resolved against a client-side
working directory so that most calls need no ``getcwd`` round trip.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterator
from contextlib import contextmanager
from typing import ClassVar

from postex.kernel.capabilities import OperationRequirement, requires
from postex.kernel.domain.stat import Stat
from postex.kernel.exceptions import NotFoundError
from postex.kernel.logging import get_logger
from postex.kernel.ports.primitives import Primitive
from postex.kernel.ports.session import Session
from postex.kernel.remote_dir import RemoteDir
from postex.kernel.remote_file import RemoteFile
from postex.kernel.resource import Resource

logger = get_logger(__name__)

_OPEN = requires(
    alternatives=(Primitive.FILE_READ, Primitive.FILE_WRITE, Primitive.FS_READFILE),
    optional=(Primitive.FILE_OPEN,),
)
_STAT = requires(Primitive.FS_STAT)


class FS(Resource):
    """Filesystem operations bound to one session."""

    OPERATIONS: ClassVar[dict[str, OperationRequirement]] = {
        "getcwd": requires(optional=(Primitive.FS_GETCWD,)),
        "chdir": requires(optional=(Primitive.FS_CHDIR,)),
        "working_directory": requires(optional=(Primitive.FS_GETCWD, Primitive.FS_CHDIR)),
        "expand_path": requires(),
        "join": requires(),
        "readfile": requires(Primitive.FS_READFILE),
        "readlink": requires(Primitive.FS_READLINK),
        "readdir": requires(Primitive.FS_READDIR),
        "glob": requires(Primitive.FS_GLOB),
        "open": _OPEN,
        "read": requires(alternatives=(Primitive.FILE_READ, Primitive.FS_READFILE)),
        "write": requires(Primitive.FILE_WRITE, optional=(Primitive.FILE_OPEN,)),
        "touch": requires(Primitive.FILE_WRITE, optional=(Primitive.FILE_OPEN,)),
        "mktemp": requires(Primitive.FS_MKTEMP),
        "tmpfile": requires(
            Primitive.FS_MKTEMP, Primitive.FILE_WRITE, optional=(Primitive.FILE_OPEN,)
        ),
        "mkdir": requires(Primitive.FS_MKDIR),
        "copy": requires(Primitive.FS_COPY),
        "unlink": requires(Primitive.FS_UNLINK),
        "rm": requires(Primitive.FS_UNLINK),
        "rmdir": requires(Primitive.FS_RMDIR),
        "move": requires(Primitive.FS_MOVE),
        "rename": requires(Primitive.FS_MOVE),
        "link": requires(Primitive.FS_LINK),
        "chgrp": requires(Primitive.FS_CHGRP),
        "chown": requires(Primitive.FS_CHOWN, optional=(Primitive.FS_CHGRP,)),
        "chmod": requires(Primitive.FS_CHMOD),
        "stat": _STAT,
        "exists": _STAT,
        "is_file": _STAT,
        "is_dir": _STAT,
        "is_symlink": _STAT,
        "is_pipe": _STAT,
        "is_socket": _STAT,
        "is_empty": _STAT,
    }

    def __init__(self, session: Session) -> None:
        super().__init__(session)
        self._cwd: str | None = None

    # ------------------------------------------------------------
    # working directory
    # ------------------------------------------------------------

    @property
    def cwd(self) -> str | None:
        """Cached working directory (no round trip)."""
        return self._cwd

    def getcwd(self) -> str | None:
        """Refresh the working directory from the session when it can report one."""
        if self.has_primitive(Primitive.FS_GETCWD):
            self._cwd = self.session.fs_getcwd()
        return self._cwd

    pwd = getcwd

    def chdir(self, path: str) -> str:
        """Change the working directory and return the new absolute path."""
        path = self.expand_path(path)
        if self.has_primitive(Primitive.FS_CHDIR):
            self.session.fs_chdir(path)
        self._cwd = path
        logger.debug("Working directory is now {path}", path=path)
        return path

    @contextmanager
    def working_directory(self, path: str) -> Iterator[str]:
        """Temporarily change directory, restoring the previous one on exit."""
        previous = self._cwd if self._cwd is not None else self.getcwd()
        try:
            yield self.chdir(path)
        finally:
            if previous is not None:
                self.chdir(previous)
            else:
                self._cwd = None

    def expand_path(self, path: str) -> str:
        """Resolve *path* against the cached working directory."""
        path = str(path)
        if self._cwd and not path.startswith("/"):
            return posixpath.normpath(posixpath.join(self._cwd, path))
        return path

    def join(self, *parts: str) -> str:
        return posixpath.join(*parts)

    # ------------------------------------------------------------
    # reading
    # ------------------------------------------------------------

    def readfile(self, path: str) -> bytes | None:
        self._require("readfile")
        return self.session.fs_readfile(self.expand_path(path))

    def readlink(self, path: str) -> str:
        """Return the resolved target of *path*.

        Raises
        ------
        NotFoundError
            If the session reports nothing for *path*
        """
        self._require("readlink")
        path = self.expand_path(path)
        target = self.session.fs_readlink(path)
        if not target:
            raise NotFoundError(path)
        return target

    def readdir(self, path: str = ".") -> RemoteDir:
        """List *path* once and return the entries as a :class:`RemoteDir`."""
        self._require("readdir")
        path = self.expand_path(path)
        return RemoteDir(path, self.session.fs_readdir(path) or ())

    def glob(self, pattern: str) -> list[str]:
        self._require("glob")
        return list(self.session.fs_glob(self.expand_path(pattern)) or ())

    # ------------------------------------------------------------
    # file handles
    # ------------------------------------------------------------

    def open(self, path: str, mode: str = "r") -> RemoteFile:
        """Open a remote file; the result is also a context manager."""
        self._require("open")
        return RemoteFile(self.session, self.expand_path(path), mode).open()

    def read(self, path: str) -> bytes:
        self._require("read")
        with self.open(path) as remote_file:
            return remote_file.read()

    def write(self, path: str, data: bytes) -> int:
        self._require("write")
        with self.open(path, "w") as remote_file:
            return remote_file.write(data)

    def touch(self, path: str) -> None:
        self._require("touch")
        with self.open(path, "a") as remote_file:
            remote_file.write(b"")

    def mktemp(self, basename: str) -> str:
        self._require("mktemp")
        return self.session.fs_mktemp(basename)

    def tmpfile(self, basename: str) -> RemoteFile:
        """Create a temporary file and open it for reading and writing."""
        self._require("tmpfile")
        return self.open(self.session.fs_mktemp(basename), "w+")

    # ------------------------------------------------------------
    # mutation
    # ------------------------------------------------------------

    def mkdir(self, path: str) -> None:
        self._require("mkdir")
        self.session.fs_mkdir(self.expand_path(path))

    def copy(self, path: str, new_path: str) -> None:
        self._require("copy")
        self.session.fs_copy(self.expand_path(path), self.expand_path(new_path))

    def unlink(self, path: str) -> None:
        self._require("unlink")
        self.session.fs_unlink(self.expand_path(path))

    rm = unlink

    def rmdir(self, path: str) -> None:
        self._require("rmdir")
        self.session.fs_rmdir(self.expand_path(path))

    def move(self, path: str, new_path: str) -> None:
        self._require("move")
        self.session.fs_move(self.expand_path(path), self.expand_path(new_path))

    rename = move

    def link(self, path: str, new_path: str) -> None:
        """Create a symbolic link *new_path* pointing at *path*."""
        self._require("link")
        self.session.fs_link(path, self.expand_path(new_path))

    def chgrp(self, group: str | int, path: str) -> None:
        self._require("chgrp")
        self.session.fs_chgrp(group, self.expand_path(path))

    def chown(self, owner: str | int | tuple[str | int, str | int | None], path: str) -> None:
        """Change ownership; *owner* is a user or a ``(user, group)`` pair."""
        self._require("chown")
        if isinstance(owner, tuple):
            user, group = owner
        else:
            user, group = owner, None
        if group is not None:
            self.chgrp(group, path)
        self.session.fs_chown(user, self.expand_path(path))

    def chmod(self, mode: int, path: str) -> None:
        self._require("chmod")
        self.session.fs_chmod(mode, self.expand_path(path))

    # ------------------------------------------------------------
    # status
    # ------------------------------------------------------------

    def stat(self, path: str) -> Stat:
        """Return the :class:`Stat` of *path*.

        Raises
        ------
        NotFoundError
            If the path does not exist on the remote host
        """
        self._require("stat")
        path = self.expand_path(path)
        data = self.session.fs_stat(path)
        if data is None:
            raise NotFoundError(path)
        return Stat.from_primitive(path, data)

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except NotFoundError:
            return False
        return True

    def _stat_predicate(self, path: str, predicate: str) -> bool:
        try:
            result = getattr(self.stat(path), predicate)
        except NotFoundError:
            return False
        return bool(result() if callable(result) else result)

    def is_file(self, path: str) -> bool:
        return self._stat_predicate(path, "is_file")

    def is_dir(self, path: str) -> bool:
        return self._stat_predicate(path, "is_dir")

    def is_symlink(self, path: str) -> bool:
        return self._stat_predicate(path, "is_symlink")

    def is_pipe(self, path: str) -> bool:
        return self._stat_predicate(path, "is_fifo")

    def is_socket(self, path: str) -> bool:
        return self._stat_predicate(path, "is_socket")

    def is_empty(self, path: str) -> bool:
        return self._stat_predicate(path, "zero")


__all__ = ["FS"]
