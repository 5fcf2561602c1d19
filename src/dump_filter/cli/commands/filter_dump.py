"""Filter dump command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from dump_filter import __version__
from dump_filter.cli.common import LogFormatOption, VerboseOption, console, setup_logging
from dump_filter.cli.progress import RichProgress
from dump_filter.core.config import get_settings
from dump_filter.core.logging import get_logger, log_context
from dump_filter.dump import (
    FilterConfig,
    NullProgress,
    ProgressObserver,
    TimingFormat,
    TimingSink,
    filter_dump_file,
    parse_exclusions,
)

logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"dump-filter {__version__}")
        raise typer.Exit(0)


def filter_dump(
    file: Annotated[
        Path,
        typer.Argument(
            help="The path to the mysqldump file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    except_: Annotated[
        list[str] | None,
        typer.Option(
            "--except",
            "-e",
            "--ignore",
            "--exclude",
            metavar="TABLE",
            help="Tables to drop INSERT statements for (repeatable, comma-separated lists allowed)",
        ),
    ] = None,
    log: Annotated[
        bool,
        typer.Option(
            "--log",
            help="Log time spent on each CREATE TABLE and INSERT INTO statement to stderr",
        ),
    ] = False,
    fmt: Annotated[
        TimingFormat | None,
        typer.Option(
            "--format",
            case_sensitive=False,
            help="Format of the timing log (default or csv)",
        ),
    ] = None,
    progress: Annotated[
        bool,
        typer.Option(
            "--progress",
            help="Show a progress bar on stderr",
        ),
    ] = False,
    verbose: VerboseOption = 0,
    log_format: LogFormatOption = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ] = False,
) -> None:
    """Stream a mysqldump file to stdout, dropping INSERT statements for excluded tables.

    CREATE TABLE statements are always kept; only the INSERT INTO lines of
    excluded tables are removed.

    Examples:

        dump-filter dump.sql --except audit_log > filtered.sql

        dump-filter dump.sql -e audit_log,sessions -e cache --progress | mysql mydb

        dump-filter dump.sql --log --format csv > /dev/null 2> timings.csv
    """
    settings = get_settings()
    setup_logging(
        verbosity=verbose,
        log_format=log_format or settings.log_format,
        default_level=settings.log_level,
    )

    timing_format = fmt or TimingFormat(settings.timing_format)
    excluded = parse_exclusions([*settings.excluded_tables, *(except_ or [])])
    config = FilterConfig(excluded_tables=excluded, read_buffer_size=settings.read_buffer_size)

    observer: ProgressObserver = NullProgress()
    with log_context(source=str(file)):
        logger.info("dump_filter_started", excluded_tables=sorted(excluded), log=log)
        try:
            try:
                if progress:
                    observer = RichProgress(
                        file.stat().st_size,
                        console,
                        refresh_per_second=settings.progress_refresh_per_second,
                    )
                sink = TimingSink(console, timing_format, observer) if log else None
                stats = filter_dump_file(
                    file,
                    sys.stdout.buffer,
                    config,
                    sink=sink,
                    progress=observer,
                )
            finally:
                observer.close()
        except OSError as e:
            logger.error("dump_filter_failed", error=str(e))
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(1) from e

        logger.info("dump_filter_finished", **stats.to_dict())
