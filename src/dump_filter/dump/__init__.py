"""Streaming mysqldump filter.

Classifies dump lines, tracks CREATE TABLE / INSERT INTO phases, drops the
INSERT statements of excluded tables and times each phase.
"""

from dump_filter.dump.classifier import ClassifiedLine, LineKind, classify_line, extract_table_name
from dump_filter.dump.phases import (
    DefiningTable,
    Idle,
    InsertingRows,
    Phase,
    PhaseKind,
    TimingObservation,
)
from dump_filter.dump.progress import NullProgress, ProgressObserver
from dump_filter.dump.stream import FilterConfig, FilterStats, filter_dump, filter_dump_file
from dump_filter.dump.timing import TimingFormat, TimingSink, format_observation
from dump_filter.dump.tracker import LineDecision, PhaseTracker, parse_exclusions

__all__ = [
    "ClassifiedLine",
    "DefiningTable",
    "FilterConfig",
    "FilterStats",
    "Idle",
    "InsertingRows",
    "LineDecision",
    "LineKind",
    "NullProgress",
    "Phase",
    "PhaseKind",
    "PhaseTracker",
    "ProgressObserver",
    "TimingFormat",
    "TimingObservation",
    "TimingSink",
    "classify_line",
    "extract_table_name",
    "filter_dump",
    "filter_dump_file",
    "format_observation",
    "parse_exclusions",
]
