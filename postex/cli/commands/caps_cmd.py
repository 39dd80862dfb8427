"""Capability commands for the postex CLI."""

from enum import StrEnum

import typer
from rich.table import Table

from postex.cli.utils import console, open_session
from postex.drivers.sessions import ShellSession
from postex.kernel import (
    FS,
    Primitive,
    Process,
    RemoteFile,
    RemoteProcess,
    Resource,
    Shell,
    System,
    detect_capabilities,
    missing_primitives,
)

app = typer.Typer()

RESOURCES: dict[str, type[Resource]] = {
    "file": RemoteFile,
    "process-handle": RemoteProcess,
    "fs": FS,
    "process": Process,
    "shell": Shell,
    "system": System,
}


class Transport(StrEnum):
    SHELL = "shell"
    RPC = "rpc"


def _offline_capabilities(transport: Transport) -> frozenset[Primitive]:
    if transport is Transport.RPC:
        return frozenset(Primitive)
    return detect_capabilities(ShellSession)


def render_capabilities(
    capabilities: frozenset[Primitive], title: str, missing_only: bool = False
) -> Table:
    """Build a table of every resource operation and whether it can run."""
    table = Table(title=title)
    table.add_column("Resource", style="cyan")
    table.add_column("Operation")
    table.add_column("Supported")
    table.add_column("Missing", style="dim")

    for label, resource in RESOURCES.items():
        for operation, requirement in resource.OPERATIONS.items():
            missing = missing_primitives(requirement, capabilities)
            if missing_only and not missing:
                continue
            status = "[red]no[/red]" if missing else "[green]yes[/green]"
            table.add_row(label, operation, status, ", ".join(str(p) for p in missing))
    return table


@app.command("list")
def list_capabilities(
    ctx: typer.Context,
    transport: Transport = typer.Option(
        Transport.SHELL,
        "--transport",
        "-t",
        help="Transport to describe when no session is given",
    ),
    missing_only: bool = typer.Option(False, "--missing", help="Only show unsupported operations"),
) -> None:
    """Show which resource operations a session (or transport type) supports."""
    options = ctx.obj or {}
    if options.get("connect") or options.get("listen"):
        with open_session(ctx) as session:
            table = render_capabilities(session.capabilities, session.name, missing_only)
    else:
        table = render_capabilities(
            _offline_capabilities(transport), f"{transport.value} transport", missing_only
        )
    console.print(table)
