"""Tests for bind and reverse shell sessions over loopback sockets."""

from __future__ import annotations

import base64
import socket
import threading
from collections.abc import Iterator

import pytest

from postex.drivers.sessions import BindShell, ReverseShell


def _serve_shell(sock: socket.socket, replies: dict[str, bytes]) -> None:
    """Answer framed commands like a POSIX shell, then exit on EOF or ``exit``."""
    with sock, sock.makefile("rwb") as stream:
        for raw in stream:
            line = raw.decode().rstrip("\n")
            if line == "exit":
                break
            if not line.startswith("echo ---; "):
                continue
            command = line.removeprefix("echo ---; ").split(" 2>/dev/null")[0]
            payload = base64.encodebytes(replies.get(command, b""))
            stream.write(b"$ " + line.encode() + b"\n---\n" + payload + b"---\n")
            stream.flush()


REPLIES = {"id -u": b"1000\n", "echo $HOSTNAME": b"target\n"}


@pytest.fixture
def listening_shell() -> Iterator[tuple[str, int]]:
    server = socket.create_server(("127.0.0.1", 0))

    def run() -> None:
        sock, _ = server.accept()
        _serve_shell(sock, REPLIES)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    try:
        yield server.getsockname()[:2]
    finally:
        server.close()
        thread.join(timeout=5)


class TestBindShell:
    """Tests for BindShell.connect."""

    def test_connect_and_exec(self, listening_shell: tuple[str, int]) -> None:
        host, port = listening_shell
        with BindShell.connect(host, port) as session:
            assert session.name == f"{host}:{port}"
            assert session.process_getuid() == 1000
            assert session.system.hostname() == "target"
            session.process_exit()


class TestReverseShell:
    """Tests for ReverseShell.accept."""

    def test_accept_and_exec(self) -> None:
        server = socket.create_server(("127.0.0.1", 0))
        host, port = server.getsockname()[:2]

        def connect_back() -> None:
            _serve_shell(socket.create_connection((host, port)), REPLIES)

        thread = threading.Thread(target=connect_back, daemon=True)
        thread.start()
        try:
            with ReverseShell.accept(server) as session:
                assert session.name.startswith("127.0.0.1:")
                assert session.shell_exec("id -u") == b"1000\n"
                session.process_exit()
        finally:
            server.close()
            thread.join(timeout=5)

    def test_close_releases_socket(self) -> None:
        server = socket.create_server(("127.0.0.1", 0))
        host, port = server.getsockname()[:2]
        thread = threading.Thread(
            target=lambda: _serve_shell(socket.create_connection((host, port)), REPLIES),
            daemon=True,
        )
        thread.start()
        try:
            session = ReverseShell.accept(server)
            session.close()
            assert session.socket.fileno() == -1
        finally:
            server.close()
            thread.join(timeout=5)
