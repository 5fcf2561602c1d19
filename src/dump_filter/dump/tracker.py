"""Phase tracker: the state machine behind the dump filter.

Consumes classified lines in order, keeps the current phase, closes phases
into timing observations and decides whether each line is forwarded.

Transitions (pre-transition state decides what gets closed):

    CREATE TABLE  any active phase is closed, then DefiningTable(name) opens
                  and the skip flag is recomputed for ``name``
    INSERT INTO   DefiningTable(t) closes; InsertingRows(t) opens unless t is
                  excluded, in which case the tracker returns to Idle
    UNLOCK TABLES InsertingRows(t) closes; the tracker returns to Idle

A ``CREATE TABLE`` line without a table name is ordinary content.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from dump_filter.dump.classifier import ClassifiedLine, LineKind
from dump_filter.dump.phases import (
    DefiningTable,
    Idle,
    InsertingRows,
    Phase,
    TimingObservation,
)

Clock = Callable[[], float]


def parse_exclusions(values: Iterable[str] | None) -> frozenset[str]:
    """Merge repeatable, comma-separated table lists into one exclusion set.

    Entries are trimmed; empty entries are dropped.
    """
    tables: set[str] = set()
    for value in values or ():
        for name in value.split(","):
            name = name.strip()
            if name:
                tables.add(name)
    return frozenset(tables)


@dataclass
class LineDecision:
    """What the tracker decided for one line."""

    forward: bool
    closed: TimingObservation | None = None
    opened: Phase | None = None


class PhaseTracker:
    """Single-pass phase state machine.

    Args:
        excluded_tables: Tables whose ``INSERT INTO`` lines are dropped
        clock: Monotonic clock in seconds (``time.perf_counter`` by default)
    """

    def __init__(
        self,
        excluded_tables: Iterable[str] = (),
        clock: Clock = time.perf_counter,
    ):
        self.excluded_tables = frozenset(name.strip() for name in excluded_tables)
        self.clock = clock
        self.phase: Phase = Idle()
        self.skip_inserts = False

    def is_excluded(self, table_name: str) -> bool:
        """Check exclusion set membership."""
        return table_name.strip() in self.excluded_tables

    def feed(self, line: ClassifiedLine) -> LineDecision:
        """Advance the state machine by one classified line."""
        closed: TimingObservation | None = None
        opened: Phase | None = None

        if line.kind == LineKind.TABLE_DEFINITION_START and line.table_name is not None:
            closed = self._close()
            self.skip_inserts = self.is_excluded(line.table_name)
            self.phase = opened = DefiningTable(name=line.table_name, started_at=self.clock())

        elif line.kind == LineKind.ROW_INSERTION_START:
            if isinstance(self.phase, DefiningTable):
                name = self.phase.name
                closed = self._close()
                if self.skip_inserts:
                    self.phase = opened = Idle()
                else:
                    self.phase = opened = InsertingRows(name=name, started_at=self.clock())

        elif line.kind == LineKind.PHASE_END_MARKER:
            if isinstance(self.phase, InsertingRows):
                closed = self._close()
            self.phase = opened = Idle()

        forward = not (self.skip_inserts and line.kind == LineKind.ROW_INSERTION_START)
        return LineDecision(forward=forward, closed=closed, opened=opened)

    def finish(self) -> TimingObservation | None:
        """Close the active phase at end of input, if any."""
        closed = self._close()
        self.phase = Idle()
        return closed

    def _close(self) -> TimingObservation | None:
        if isinstance(self.phase, Idle):
            return None
        return TimingObservation.close(self.phase, self.clock())
