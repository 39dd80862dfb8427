"""Concrete session transports."""

from postex.drivers.sessions.base import BaseSession
from postex.drivers.sessions.remote_shell import BindShell, RemoteShellSession, ReverseShell
from postex.drivers.sessions.rpc_session import RPCClient, RPCSession
from postex.drivers.sessions.shell_session import ShellSession

__all__ = [
    "BaseSession",
    "BindShell",
    "RPCClient",
    "RPCSession",
    "RemoteShellSession",
    "ReverseShell",
    "ShellSession",
]
