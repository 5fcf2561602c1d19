"""Single forward pass over a dump file.

Reads the input line by line, classifies each line, feeds the phase
tracker, forwards the line unless it was dropped, and writes timing records
as phases close. Memory use does not depend on the size of the input.

I/O errors are not handled here; they propagate to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from dump_filter.core.logging import get_logger
from dump_filter.dump.classifier import LineKind, classify_line
from dump_filter.dump.phases import DefiningTable, TimingObservation
from dump_filter.dump.progress import NullProgress, ProgressObserver
from dump_filter.dump.timing import TimingSink
from dump_filter.dump.tracker import Clock, PhaseTracker

logger = get_logger(__name__)

DEFAULT_READ_BUFFER_SIZE = 1024 * 1024


@dataclass
class FilterConfig:
    """Configuration for one filter pass."""

    excluded_tables: frozenset[str] = field(default_factory=frozenset)
    read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE


@dataclass
class FilterStats:
    """Counters collected during a pass."""

    lines_read: int = 0
    lines_forwarded: int = 0
    lines_dropped: int = 0
    bytes_read: int = 0
    bytes_written: int = 0
    tables_seen: int = 0
    observations: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, int | float]:
        """Convert to dictionary for logging."""
        return {
            "lines_read": self.lines_read,
            "lines_forwarded": self.lines_forwarded,
            "lines_dropped": self.lines_dropped,
            "bytes_read": self.bytes_read,
            "bytes_written": self.bytes_written,
            "tables_seen": self.tables_seen,
            "observations": self.observations,
            "duration_seconds": round(self.duration_seconds, 3),
        }


def filter_dump(
    lines: Iterable[bytes],
    output: BinaryIO,
    config: FilterConfig,
    sink: TimingSink | None = None,
    progress: ProgressObserver | None = None,
    clock: Clock = time.perf_counter,
) -> FilterStats:
    """Filter a stream of raw dump lines into ``output``.

    Args:
        lines: Raw lines, terminators included (a binary file object works)
        output: Binary stream receiving forwarded lines
        config: Exclusion set and read options
        sink: Where timing records go; None disables timing output
        progress: Advisory progress observer
        clock: Clock used for phase timing

    Returns:
        FilterStats for the pass
    """
    progress = progress or NullProgress()
    tracker = PhaseTracker(config.excluded_tables, clock=clock)
    stats = FilterStats()
    start_time = time.time()

    def record(observation: TimingObservation | None) -> None:
        if observation is not None and sink is not None:
            sink.emit(observation)
            stats.observations += 1

    for raw in lines:
        stats.lines_read += 1
        stats.bytes_read += len(raw)
        progress.advance(len(raw))

        line = classify_line(raw)
        decision = tracker.feed(line)
        record(decision.closed)

        if isinstance(decision.opened, DefiningTable):
            stats.tables_seen += 1
            if logger.is_enabled_for(logging.DEBUG):
                with progress.suspend():
                    logger.debug(
                        "table_definition_started",
                        table=decision.opened.name,
                        skip_inserts=tracker.skip_inserts,
                    )
            progress.table_started(decision.opened.name, tracker.skip_inserts)
        elif line.kind == LineKind.PHASE_END_MARKER:
            progress.table_finished()

        if decision.forward:
            output.write(raw)
            stats.lines_forwarded += 1
            stats.bytes_written += len(raw)
        else:
            stats.lines_dropped += 1

    record(tracker.finish())
    output.flush()

    stats.duration_seconds = time.time() - start_time
    return stats


def filter_dump_file(
    path: Path,
    output: BinaryIO,
    config: FilterConfig,
    sink: TimingSink | None = None,
    progress: ProgressObserver | None = None,
    clock: Clock = time.perf_counter,
) -> FilterStats:
    """Open ``path`` and run ``filter_dump`` over it, reading from offset 0 to EOF."""
    with open(path, "rb", buffering=config.read_buffer_size) as handle:
        return filter_dump(handle, output, config, sink=sink, progress=progress, clock=clock)
