"""Domain model for remote file status information."""

from __future__ import annotations

import stat as stat_module
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict


class Stat(BaseModel):
    """Status of a remote path, derived once per query.

    Attributes
    ----------
    path : str
        Path that was queried
    size : int | None
        Size in bytes
    blocks : int | None
        Number of allocated blocks
    blocksize : int | None
        Preferred I/O block size
    inode : int | None
        Inode number
    nlinks : int | None
        Number of hard links
    mode : int | None
        Raw ``st_mode``; ``None`` when the transport does not report it
    uid, gid : int | None
        Owner user and group IDs
    atime, mtime, ctime : int | None
        Access, modification and change times in unix seconds
    """

    model_config = ConfigDict(frozen=True)

    path: str
    size: int | None = None
    blocks: int | None = None
    blocksize: int | None = None
    inode: int | None = None
    nlinks: int | None = None
    mode: int | None = None
    uid: int | None = None
    gid: int | None = None
    atime: int | None = None
    mtime: int | None = None
    ctime: int | None = None

    @classmethod
    def from_primitive(cls, path: str, data: Stat | Mapping[str, Any]) -> Stat:
        """Build a Stat from a ``fs_stat`` / ``file_stat`` result."""
        if isinstance(data, Stat):
            return data
        fields = {key: value for key, value in data.items() if key in cls.model_fields}
        fields.setdefault("path", path)
        return cls.model_validate(fields)

    @property
    def ino(self) -> int | None:
        return self.inode

    @property
    def blksize(self) -> int | None:
        return self.blocksize

    @property
    def zero(self) -> bool:
        """True for an empty file."""
        return self.size == 0

    def _has_type(self, predicate: Any) -> bool:
        return self.mode is not None and bool(predicate(self.mode))

    def is_file(self) -> bool:
        return self._has_type(stat_module.S_ISREG)

    def is_dir(self) -> bool:
        return self._has_type(stat_module.S_ISDIR)

    def is_symlink(self) -> bool:
        return self._has_type(stat_module.S_ISLNK)

    def is_fifo(self) -> bool:
        return self._has_type(stat_module.S_ISFIFO)

    def is_socket(self) -> bool:
        return self._has_type(stat_module.S_ISSOCK)


__all__ = ["Stat"]
