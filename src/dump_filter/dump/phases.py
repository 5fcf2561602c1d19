"""Phase model for the dump filter.

A phase is the span between a statement-opening line and its close. Exactly
one phase value is live at a time: ``Idle`` carries no payload, the two
active variants carry the table name and the clock reading at which they
started.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class PhaseKind(str, Enum):
    """Kind of a measured phase. Values are the statement labels."""

    DEFINING_TABLE = "CREATE TABLE"
    INSERTING_ROWS = "INSERT INTO"

    @property
    def label(self) -> str:
        """Statement label used in the default log form."""
        return self.value

    @property
    def short_label(self) -> str:
        """Keyword used in the csv log form."""
        return "CREATE" if self is PhaseKind.DEFINING_TABLE else "INSERT"


@dataclass
class Idle:
    """Not inside any tracked phase."""

    kind: ClassVar[PhaseKind | None] = None


@dataclass
class DefiningTable:
    """Inside a ``CREATE TABLE`` statement."""

    name: str
    started_at: float
    kind: ClassVar[PhaseKind] = PhaseKind.DEFINING_TABLE


@dataclass
class InsertingRows:
    """Inside the ``INSERT INTO`` statements of a table."""

    name: str
    started_at: float
    kind: ClassVar[PhaseKind] = PhaseKind.INSERTING_ROWS


ActivePhase = DefiningTable | InsertingRows
Phase = Idle | DefiningTable | InsertingRows


@dataclass(frozen=True)
class TimingObservation:
    """Elapsed time of one closed phase."""

    phase_kind: PhaseKind
    table_name: str
    duration_seconds: float

    @property
    def duration_ms(self) -> int:
        """Duration truncated to whole milliseconds."""
        return int(self.duration_seconds * 1000)

    @classmethod
    def close(cls, phase: ActivePhase, now: float) -> TimingObservation:
        """Build the observation for ``phase`` closing at ``now``."""
        return cls(
            phase_kind=phase.kind,
            table_name=phase.name,
            duration_seconds=max(now - phase.started_at, 0.0),
        )
