"""Rich progress bar for the filter pass."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
)

IDLE_MESSAGE = "Processing..."


class RichProgress:
    """Byte-based progress bar with the current table as its message.

    Drawn on the given (stderr) console and cleared when closed. Anything
    written to stderr while the bar is live (timing records, log events) goes
    inside ``suspend()``, which takes the bar down and redraws it afterwards.
    """

    def __init__(self, total_bytes: int, console: Console, refresh_per_second: float = 10.0):
        self.progress = Progress(
            BarColumn(bar_width=40),
            DownloadColumn(),
            TextColumn("("),
            TimeRemainingColumn(),
            TextColumn(")"),
            TextColumn("{task.fields[message]}"),
            console=console,
            transient=True,
            refresh_per_second=refresh_per_second,
            redirect_stdout=False,
            redirect_stderr=False,
        )
        self.task: TaskID = self.progress.add_task("filter", total=total_bytes, message="")
        self.progress.start()
        self.running = True

    @property
    def console(self) -> Console:
        return self.progress.console

    def advance(self, nbytes: int) -> None:
        self.progress.advance(self.task, nbytes)

    def table_started(self, table_name: str, skipped: bool) -> None:
        if skipped:
            label = f"[bright_black]{escape(table_name)}[/bright_black] (skip)"
        else:
            label = f"[green]{escape(table_name)}[/green]"
        self.progress.update(self.task, message=f"Table: {label}")

    def table_finished(self) -> None:
        self.progress.update(self.task, message=IDLE_MESSAGE)

    @contextmanager
    def suspend(self) -> Iterator[None]:
        """Clear the bar, let the caller write to stderr, then redraw it."""
        if not self.running:
            yield
            return
        self.progress.live.stop()
        try:
            yield
        finally:
            self.progress.live.start(refresh=True)

    def close(self) -> None:
        self.running = False
        self.progress.stop()
