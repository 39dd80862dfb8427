"""CLI helper utilities for postex commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

import typer
from rich.console import Console

from postex.drivers.sessions import BindShell, ReverseShell, ShellSession
from postex.kernel.config import PostExConfig
from postex.kernel.exceptions import PostExError

console = Console()
err_console = Console(stderr=True)


class ContextProtocol(Protocol):
    """Protocol for common interface between Click and Typer contexts."""

    @property
    def obj(self) -> dict[str, Any] | None: ...


def parse_endpoint(value: str, default_host: str = "") -> tuple[str, int]:
    """Split ``HOST:PORT`` (or a bare ``PORT``) into a host and an integer port.

    Raises
    ------
    typer.BadParameter
        If the port is not a number between 1 and 65535
    """
    host, sep, port = value.rpartition(":")
    if not sep:
        host = default_host
    host = host.strip("[]")
    try:
        number = int(port)
    except ValueError:
        raise typer.BadParameter(f"invalid port in {value!r}") from None
    if not 0 < number < 65536:
        raise typer.BadParameter(f"port out of range in {value!r}")
    return host, number


def connect_session(
    connect: str | None, listen: str | None, config: PostExConfig
) -> ShellSession:
    """Open a bind-shell (``--connect``) or reverse-shell (``--listen``) session."""
    if connect and listen:
        raise typer.BadParameter("use either --connect or --listen, not both")
    if connect:
        host, port = parse_endpoint(connect)
        if not host:
            raise typer.BadParameter("--connect needs HOST:PORT")
        return BindShell.connect(host, port, config=config.shell)
    if listen:
        host, port = parse_endpoint(listen)
        err_console.print(f"[dim]Waiting for a connection on {host or '*'}:{port}...[/dim]")
        return ReverseShell.listen(port, host=host, config=config.shell)
    raise typer.BadParameter("a session is required: pass --connect HOST:PORT or --listen [HOST:]PORT")


@contextmanager
def open_session(ctx: ContextProtocol) -> Iterator[ShellSession]:
    """Connect using the global options and close the session afterwards.

    :class:`PostExError` raised inside the block is reported in red and
    turned into exit status 1.
    """
    options = ctx.obj or {}
    session = connect_session(
        options.get("connect"),
        options.get("listen"),
        options.get("config") or PostExConfig(),
    )
    try:
        yield session
    except PostExError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    finally:
        session.close()


__all__ = ["connect_session", "console", "err_console", "open_session", "parse_endpoint"]
