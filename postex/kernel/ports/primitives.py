"""Primitive catalog: every named remote operation a session may implement.

A session implements some subset of these names as methods. Nothing in
this module has behaviour; it is the contract between resources and
transports.

Catalog
-------
+-----------+-------------------------------------------------------------+
| Group     | Primitives                                                  |
+===========+=============================================================+
| sys       | time, hostname                                              |
| file      | open, read, write, seek, tell, ioctl, fcntl, stat, close    |
| fs        | getcwd, chdir, readfile, readlink, readdir, glob, mktemp,   |
|           | mkdir, copy, unlink, rmdir, move, link, chgrp, chown,       |
|           | chmod, stat                                                 |
| process   | get/set pid/uid/gid/sid family, environ, getenv, setenv,    |
|           | unsetenv, kill, popen, read, write, close, spawn, exit      |
| shell     | exec                                                        |
+-----------+-------------------------------------------------------------+

Return contracts use ``None`` as the "absent" sentinel: ``file_read`` at
end of file, ``fs_readfile`` / ``fs_stat`` / ``file_stat`` when there is
nothing to report, ``process_read`` once the child has finished.
"""

from __future__ import annotations

import os
from enum import IntEnum, StrEnum


class Primitive(StrEnum):
    """Name of a single session primitive (also the session method name)."""

    # sys
    SYS_TIME = "sys_time"
    SYS_HOSTNAME = "sys_hostname"

    # file (descriptor addressed)
    FILE_OPEN = "file_open"
    FILE_READ = "file_read"
    FILE_WRITE = "file_write"
    FILE_SEEK = "file_seek"
    FILE_TELL = "file_tell"
    FILE_IOCTL = "file_ioctl"
    FILE_FCNTL = "file_fcntl"
    FILE_STAT = "file_stat"
    FILE_CLOSE = "file_close"

    # fs (path addressed)
    FS_GETCWD = "fs_getcwd"
    FS_CHDIR = "fs_chdir"
    FS_READFILE = "fs_readfile"
    FS_READLINK = "fs_readlink"
    FS_READDIR = "fs_readdir"
    FS_GLOB = "fs_glob"
    FS_MKTEMP = "fs_mktemp"
    FS_MKDIR = "fs_mkdir"
    FS_COPY = "fs_copy"
    FS_UNLINK = "fs_unlink"
    FS_RMDIR = "fs_rmdir"
    FS_MOVE = "fs_move"
    FS_LINK = "fs_link"
    FS_CHGRP = "fs_chgrp"
    FS_CHOWN = "fs_chown"
    FS_CHMOD = "fs_chmod"
    FS_STAT = "fs_stat"

    # process
    PROCESS_GETPID = "process_getpid"
    PROCESS_GETPPID = "process_getppid"
    PROCESS_GETUID = "process_getuid"
    PROCESS_SETUID = "process_setuid"
    PROCESS_GETEUID = "process_geteuid"
    PROCESS_SETEUID = "process_seteuid"
    PROCESS_GETGID = "process_getgid"
    PROCESS_SETGID = "process_setgid"
    PROCESS_GETEGID = "process_getegid"
    PROCESS_SETEGID = "process_setegid"
    PROCESS_GETSID = "process_getsid"
    PROCESS_SETSID = "process_setsid"
    PROCESS_ENVIRON = "process_environ"
    PROCESS_GETENV = "process_getenv"
    PROCESS_SETENV = "process_setenv"
    PROCESS_UNSETENV = "process_unsetenv"
    PROCESS_KILL = "process_kill"
    PROCESS_POPEN = "process_popen"
    PROCESS_READ = "process_read"
    PROCESS_WRITE = "process_write"
    PROCESS_CLOSE = "process_close"
    PROCESS_SPAWN = "process_spawn"
    PROCESS_EXIT = "process_exit"

    # shell
    SHELL_EXEC = "shell_exec"

    @property
    def group(self) -> str:
        """Domain of the primitive: ``sys``, ``file``, ``fs``, ``process`` or ``shell``."""
        return self.value.split("_", 1)[0]

    @property
    def rpc_name(self) -> str:
        """Dotted method name used by RPC transports (``fs_stat`` → ``fs.stat``)."""
        return self.value.replace("_", ".", 1)

    @classmethod
    def in_group(cls, group: str) -> frozenset[Primitive]:
        """Return all primitives of one domain."""
        return frozenset(primitive for primitive in cls if primitive.group == group)


class Whence(IntEnum):
    """Reference point for ``file_seek``.

    ``DATA`` and ``HOLE`` are sparse-file modes; their numeric values follow
    Linux and they are only meaningful where the remote OS supports them.
    """

    SET = os.SEEK_SET
    CUR = os.SEEK_CUR
    END = os.SEEK_END
    DATA = 3
    HOLE = 4


__all__ = ["Primitive", "Whence"]
