"""Filesystem commands for the postex CLI."""

import datetime as dt

import typer
from rich.table import Table

from postex.cli.utils import console, open_session

app = typer.Typer()


@app.command("ls")
def list_directory(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Remote directory"),
) -> None:
    """List the entries of a remote directory."""
    with open_session(ctx) as session, session.system.fs.readdir(path) as directory:
        entries = list(directory)

    if not entries:
        console.print(f"[yellow]{path} is empty[/yellow]")
        return
    for entry in entries:
        typer.echo(entry)


@app.command("cat")
def cat_file(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Remote file"),
) -> None:
    """Print the contents of a remote file."""
    with open_session(ctx) as session:
        data = session.system.fs.read(path)
    typer.echo(data, nl=False)


@app.command("stat")
def stat_path(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Remote path"),
) -> None:
    """Show size, ownership and timestamps of a remote path."""
    with open_session(ctx) as session:
        stat = session.system.fs.stat(path)

    table = Table(title=stat.path, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field, value in stat.model_dump(exclude={"path"}).items():
        if value is None:
            continue
        if field in {"atime", "mtime", "ctime"}:
            timestamp = dt.datetime.fromtimestamp(value, tz=dt.UTC).isoformat()
            table.add_row(field, f"{value} ({timestamp})")
        else:
            table.add_row(field, str(value))
    console.print(table)


@app.command("readlink")
def read_link(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Remote symbolic link"),
) -> None:
    """Print the fully resolved target of a remote path."""
    with open_session(ctx) as session:
        typer.echo(session.system.fs.readlink(path))
