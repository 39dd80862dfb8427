"""Shell sessions over TCP sockets (bind and reverse shells)."""

from __future__ import annotations

import socket

from postex.drivers.sessions.shell_session import ShellSession
from postex.kernel.config import ShellConfig
from postex.kernel.logging import get_logger

logger = get_logger(__name__)


class RemoteShellSession(ShellSession):
    """Shell session over a connected socket, named ``ip:port`` of the peer."""

    def __init__(self, sock: socket.socket, config: ShellConfig | None = None) -> None:
        host, port = sock.getpeername()[:2]
        super().__init__(sock.makefile("rwb"), config=config, name=f"{host}:{port}")
        self.socket = sock

    def close(self) -> None:
        super().close()
        self.socket.close()


class BindShell(RemoteShellSession):
    """Session to a shell listening on the remote host."""

    @classmethod
    def connect(cls, host: str, port: int, config: ShellConfig | None = None) -> BindShell:
        sock = socket.create_connection((host, port))
        session = cls(sock, config=config)
        logger.info("Connected to bind shell {name}", name=session.name)
        return session


class ReverseShell(RemoteShellSession):
    """Session to a remote shell that connected back to us."""

    @classmethod
    def listen(
        cls, port: int, host: str = "", config: ShellConfig | None = None
    ) -> ReverseShell:
        """Wait for exactly one connection on *host*:*port*, then stop listening."""
        server = socket.create_server((host, port), backlog=1)
        try:
            logger.info("Listening for a reverse shell on {host}:{port}", host=host or "*", port=port)
            return cls.accept(server, config=config)
        finally:
            server.close()

    @classmethod
    def accept(cls, server: socket.socket, config: ShellConfig | None = None) -> ReverseShell:
        """Accept one connection from an already listening *server* socket."""
        sock, _ = server.accept()
        session = cls(sock, config=config)
        logger.info("Accepted reverse shell from {name}", name=session.name)
        return session


__all__ = ["BindShell", "RemoteShellSession", "ReverseShell"]
