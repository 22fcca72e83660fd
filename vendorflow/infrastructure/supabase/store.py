"""Record store over Supabase PostgREST.

REST calls cannot share a database transaction, so transaction() keeps an
undo journal and compensates in reverse order when the body fails:
inserted rows are deleted, updated rows get their previous values back.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from vendorflow.infrastructure.persistence.journal import JournalScope, UndoEntry
from vendorflow.infrastructure.supabase._rest_client import PostgrestClient
from vendorflow.infrastructure.supabase._rest_encoding import encode_filter


def _by_id(record_id: str) -> dict[str, str]:
    return {"id": encode_filter(record_id)}


class SupabaseRecordStore:
    """IRecordStore on PostgREST."""

    def __init__(self, client: PostgrestClient) -> None:
        self._client = client
        self._journal = JournalScope(f"supabase_store_{id(self)}")

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        if not record.get("id"):
            raise ValueError("record must carry an id")
        row = await self._client.insert(table, record)
        if (journal := self._journal.current) is not None:
            journal.record_insert(table, record["id"])
        return row

    async def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        rows = await self._client.select(table, {**_by_id(record_id), "limit": "1"})
        return rows[0] if rows else None

    async def update(
        self, table: str, record_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        journal = self._journal.current
        if journal is not None:
            current = await self.get(table, record_id)
            if current is None:
                return None
            previous = {key: current.get(key) for key in changes}
        rows = await self._client.patch(table, _by_id(record_id), changes)
        if not rows:
            return None
        if journal is not None:
            journal.record_update(table, record_id, previous)
        return rows[0]

    async def find(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params = {key: encode_filter(value) for key, value in (filters or {}).items()}
        if order_by is not None:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
        return await self._client.select(table, params)

    async def _undo(self, entry: UndoEntry) -> None:
        if entry.action == "insert":
            await self._client.delete(entry.table, _by_id(entry.record_id))
        elif entry.previous is not None:
            await self._client.patch(entry.table, _by_id(entry.record_id), entry.previous)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self._journal.journaled(self._undo):
            yield

    async def close(self) -> None:
        await self._client.aclose()
