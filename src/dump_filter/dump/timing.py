"""Timing records written to the diagnostic stream."""

from __future__ import annotations

from enum import Enum

from rich.console import Console

from dump_filter.dump.phases import TimingObservation
from dump_filter.dump.progress import NullProgress, ProgressObserver


class TimingFormat(str, Enum):
    """Textual form of a timing record."""

    DEFAULT = "default"
    CSV = "csv"


def format_observation(observation: TimingObservation, fmt: TimingFormat) -> str:
    """Render one observation.

    default: ``CREATE TABLE users took 12 ms``
    csv:     ``CREATE,users,12``
    """
    if fmt == TimingFormat.CSV:
        return (
            f"{observation.phase_kind.short_label},"
            f"{observation.table_name},{observation.duration_ms}"
        )
    return (
        f"{observation.phase_kind.label} {observation.table_name} "
        f"took {observation.duration_ms} ms"
    )


class TimingSink:
    """Writes timing records to a rich console, one line per closed phase.

    Records are written inside the progress observer's ``suspend()`` scope
    so they land above a live progress bar instead of through it.
    """

    def __init__(
        self,
        console: Console,
        fmt: TimingFormat = TimingFormat.DEFAULT,
        progress: ProgressObserver | None = None,
    ):
        self.console = console
        self.fmt = fmt
        self.progress: ProgressObserver = progress or NullProgress()
        self.records_written = 0

    def emit(self, observation: TimingObservation) -> None:
        """Write one record."""
        text = format_observation(observation, self.fmt)
        with self.progress.suspend():
            self.console.out(text, highlight=False)
        self.records_written += 1
