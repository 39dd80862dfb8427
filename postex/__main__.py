"""Entry point for ``python -m postex``."""

from __future__ import annotations


def main() -> None:
    """Run the command line interface."""
    from postex.cli import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
