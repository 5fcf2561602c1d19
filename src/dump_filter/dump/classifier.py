"""Line classification for mysqldump output.

Only a handful of literal prefixes matter to the filter. Lines are handled
as raw bytes so that forwarding never alters them; only the table name of
a ``CREATE TABLE`` line is decoded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CREATE_TABLE_PREFIX = b"CREATE TABLE"
INSERT_INTO_PREFIX = b"INSERT INTO"
UNLOCK_TABLES_PREFIX = b"UNLOCK TABLES;"

# Identifier quoting emitted by mysqldump (backticks, or double quotes with ANSI_QUOTES)
QUOTE_CHARS = '`"'


class LineKind(str, Enum):
    """Category of a single dump line."""

    TABLE_DEFINITION_START = "table_definition_start"
    ROW_INSERTION_START = "row_insertion_start"
    PHASE_END_MARKER = "phase_end_marker"
    OTHER = "other"


@dataclass
class ClassifiedLine:
    """A classified line.

    ``table_name`` is only set for ``TABLE_DEFINITION_START`` lines whose
    name could be extracted. A definition line without a name is treated
    as ordinary content by the tracker.
    """

    kind: LineKind
    table_name: str | None = None

    @property
    def opens_table(self) -> bool:
        """True if this line starts a trackable table definition."""
        return self.kind == LineKind.TABLE_DEFINITION_START and self.table_name is not None


def extract_table_name(line: bytes) -> str | None:
    """Return the third whitespace-delimited token with its quoting removed.

    ``CREATE TABLE `orders` (`` gives ``orders``. Returns None when the line
    has fewer than three tokens.
    """
    tokens = line.decode("utf-8", errors="replace").split()
    if len(tokens) < 3:
        return None
    return tokens[2].strip(QUOTE_CHARS)


def classify_line(line: bytes) -> ClassifiedLine:
    """Classify one raw line (terminator included, if present)."""
    if line.startswith(CREATE_TABLE_PREFIX):
        return ClassifiedLine(LineKind.TABLE_DEFINITION_START, extract_table_name(line))
    if line.startswith(INSERT_INTO_PREFIX):
        return ClassifiedLine(LineKind.ROW_INSERTION_START)
    if line.startswith(UNLOCK_TABLES_PREFIX):
        return ClassifiedLine(LineKind.PHASE_END_MARKER)
    return ClassifiedLine(LineKind.OTHER)
