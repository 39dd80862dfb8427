"""postex CLI - Main entrypoint."""

from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console

from postex import __version__
from postex.cli.commands import caps_cmd, fs_cmd, shell_cmd
from postex.kernel.config import load_config
from postex.kernel.exceptions import ConfigurationError
from postex.kernel.logging import configure_logging

# Create the main Typer app
app = typer.Typer(
    name="postex",
    help="postex - drive a remote host through whatever primitives its session offers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

# Create console for rich output
console = Console()

# Add subcommands
app.add_typer(shell_cmd.app, name="shell", help="Run shell commands")
app.add_typer(fs_cmd.app, name="fs", help="Inspect the remote filesystem")
app.add_typer(caps_cmd.app, name="caps", help="Inspect session capabilities")


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    *,
    connect: str | None = typer.Option(
        None, "--connect", "-c", help="Connect to a bind shell at HOST:PORT"
    ),
    listen: str | None = typer.Option(
        None, "--listen", "-l", help="Accept one reverse shell on [HOST:]PORT"
    ),
    config_path: Path | None = typer.Option(None, "--config", help="Configuration file"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warning|error"
    ),
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit"),
) -> None:
    """postex - capability-negotiated post-exploitation sessions.

    Global flags are parsed here and stored on `ctx.obj` for subcommands.
    """
    if version:
        console.print(f"[bold blue]postex[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()

    try:
        config = load_config(config_path)
        logging_config = config.logging
        if log_level:
            logging_config = replace(logging_config, level=log_level.upper())
    except (ConfigurationError, FileNotFoundError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    configure_logging(
        level=logging_config.level,
        format=logging_config.format,  # type: ignore[arg-type]
        output_file=logging_config.output_file,
        use_color=logging_config.use_color,
        include_timestamp=logging_config.include_timestamp,
        force_reconfigure=True,
    )

    if ctx.obj is None:
        ctx.obj = {}
    ctx.obj.update({
        "connect": connect,
        "listen": listen,
        "config": config,
    })


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
