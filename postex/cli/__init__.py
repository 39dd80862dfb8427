"""Command line front-end for postex."""

from postex.cli.main import app, main

__all__ = ["app", "main"]
