"""Shell commands for the postex CLI."""

import typer

from postex.cli.utils import open_session

app = typer.Typer()


@app.command("run")
def run_command(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Program to run on the remote host"),
    arguments: list[str] | None = typer.Argument(None, help="Arguments (each shell-quoted)"),
) -> None:
    """Run one command remotely and print its output."""
    with open_session(ctx) as session:
        output = session.system.shell.run(command, *(arguments or []))
    typer.echo(output, nl=False)
