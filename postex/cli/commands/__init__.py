"""CLI command modules."""

from . import caps_cmd, fs_cmd, shell_cmd

__all__ = ["caps_cmd", "fs_cmd", "shell_cmd"]
