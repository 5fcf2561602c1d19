"""Progress observer contract.

The stream reports byte counts and table changes to an observer. Observers
are advisory: they never influence forwarding or timing. Any diagnostic
text written while an observer is rendering goes through ``suspend()``.
"""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from typing import Protocol


class ProgressObserver(Protocol):
    """Receives progress updates from the filter pass."""

    def advance(self, nbytes: int) -> None:
        """Record ``nbytes`` more bytes read."""
        ...

    def table_started(self, table_name: str, skipped: bool) -> None:
        """A table definition opened."""
        ...

    def table_finished(self) -> None:
        """The dump released its table locks."""
        ...

    def suspend(self) -> AbstractContextManager[object]:
        """Scope in which diagnostic text may be written safely."""
        ...

    def close(self) -> None:
        """Stop rendering."""
        ...


class NullProgress:
    """Observer that renders nothing."""

    def advance(self, nbytes: int) -> None:
        pass

    def table_started(self, table_name: str, skipped: bool) -> None:
        pass

    def table_finished(self) -> None:
        pass

    def suspend(self) -> AbstractContextManager[object]:
        return nullcontext()

    def close(self) -> None:
        pass
