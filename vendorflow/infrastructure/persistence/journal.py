"""Undo journal for backends without native transactions.

Writes made inside ``journaled()`` are recorded per task (contextvar), so
a failure only compensates the writes of the task that failed, never a
concurrent task's writes to other documents.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UndoEntry:
    """One write to reverse: drop an inserted row or restore previous column values."""

    action: str  # "insert" | "update"
    table: str
    record_id: str
    previous: dict[str, Any] | None = None


class UndoJournal:
    def __init__(self) -> None:
        self.entries: list[UndoEntry] = []

    def record_insert(self, table: str, record_id: str) -> None:
        self.entries.append(UndoEntry("insert", table, record_id))

    def record_update(self, table: str, record_id: str, previous: dict[str, Any]) -> None:
        self.entries.append(UndoEntry("update", table, record_id, previous))


class JournalScope:
    """Per-store handle on the active journal of the current task."""

    def __init__(self, name: str) -> None:
        self._active: ContextVar[UndoJournal | None] = ContextVar(name, default=None)

    @property
    def current(self) -> UndoJournal | None:
        return self._active.get()

    @asynccontextmanager
    async def journaled(
        self, undo: Callable[[UndoEntry], Awaitable[None]]
    ) -> AsyncIterator[None]:
        """Run the body; on any exception replay undo() over the journal in reverse.

        A nested call joins the outer journal.
        """
        if self._active.get() is not None:
            yield
            return
        journal = UndoJournal()
        token = self._active.set(journal)
        try:
            yield
        except BaseException:
            self._active.reset(token)
            token = None
            for entry in reversed(journal.entries):
                try:
                    await undo(entry)
                except Exception:
                    logger.exception(
                        "Compensation failed for %s %s/%s",
                        entry.action,
                        entry.table,
                        entry.record_id,
                    )
            raise
        finally:
            if token is not None:
                self._active.reset(token)
