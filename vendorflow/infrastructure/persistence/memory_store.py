"""Process-local record store (dict tables).

Used for tests and single-process deployments. Records are deep-copied on
the way in and out so callers never share mutable state with the store.
"""

from __future__ import annotations

import copy
import itertools
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from vendorflow.domain.exceptions import ConflictException
from vendorflow.infrastructure.persistence.journal import JournalScope, UndoEntry
from vendorflow.infrastructure.persistence.tables import UNIQUE_COLUMNS


class MemoryRecordStore:
    """IRecordStore backed by dicts; transactions use an undo journal."""

    def __init__(self, unique_columns: dict[str, tuple[str, ...]] | None = None) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._order: dict[tuple[str, str], int] = {}
        self._counter = itertools.count()
        self._unique = UNIQUE_COLUMNS if unique_columns is None else unique_columns
        self._journal = JournalScope(f"memory_store_{id(self)}")

    def _check_unique(self, table: str, record: dict[str, Any], record_id: str) -> None:
        for column in self._unique.get(table, ()):
            value = record.get(column)
            if value is None:
                continue
            for other_id, other in self._tables[table].items():
                if other_id != record_id and other.get(column) == value:
                    raise ConflictException(
                        f"Duplicate value for {table}.{column}", resource_type=table
                    )

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        record_id = record.get("id")
        if not record_id:
            raise ValueError("record must carry an id")
        if record_id in self._tables[table]:
            raise ConflictException(f"Duplicate id for {table}", resource_type=table)
        self._check_unique(table, record, record_id)
        self._tables[table][record_id] = copy.deepcopy(record)
        self._order[(table, record_id)] = next(self._counter)
        if (journal := self._journal.current) is not None:
            journal.record_insert(table, record_id)
        return copy.deepcopy(record)

    async def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        record = self._tables[table].get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def update(
        self, table: str, record_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        record = self._tables[table].get(record_id)
        if record is None:
            return None
        self._check_unique(table, {**record, **changes}, record_id)
        previous = {key: copy.deepcopy(record.get(key)) for key in changes}
        record.update(copy.deepcopy(changes))
        if (journal := self._journal.current) is not None:
            journal.record_update(table, record_id, previous)
        return copy.deepcopy(record)

    async def find(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        filters = filters or {}
        rows = [
            (record_id, record)
            for record_id, record in self._tables[table].items()
            if all(record.get(key) == value for key, value in filters.items())
        ]
        if order_by is not None:
            # Insertion order breaks ties, so "newest first" holds for equal timestamps.
            rows.sort(
                key=lambda item: (
                    item[1].get(order_by) is not None,
                    item[1].get(order_by),
                    self._order[(table, item[0])],
                ),
                reverse=descending,
            )
        records = [copy.deepcopy(record) for _, record in rows]
        return records[:limit] if limit is not None else records

    async def _undo(self, entry: UndoEntry) -> None:
        if entry.action == "insert":
            self._tables[entry.table].pop(entry.record_id, None)
            self._order.pop((entry.table, entry.record_id), None)
        elif entry.previous is not None and entry.record_id in self._tables[entry.table]:
            self._tables[entry.table][entry.record_id].update(entry.previous)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self._journal.journaled(self._undo):
            yield

    async def close(self) -> None:
        return None

    def count(self, table: str) -> int:
        return len(self._tables[table])
