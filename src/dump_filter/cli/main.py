"""Main CLI application entry point."""

from __future__ import annotations

import typer

from dump_filter.cli.commands import filter_dump

app = typer.Typer(
    name="dump-filter",
    help="Stream a mysqldump file, skipping INSERT statements for selected tables.",
    no_args_is_help=True,
    add_completion=False,
)

# Single command: runs directly as `dump-filter FILE ...`
app.command()(filter_dump.filter_dump)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
