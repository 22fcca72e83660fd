"""Persistence port shared by every storage backend.

Backends store flat records (dicts keyed by column name) in named tables.
Records are never deleted; an ``id`` key is required on insert. Every
backend must make ``transaction()`` all-or-nothing for the writes issued
inside it by the current task.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol


class IRecordStore(Protocol):
    """Protocol for table-oriented record storage (DIP)."""

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert record and return it as stored. Unique violations raise ConflictException."""

    async def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        """Return record by id or None."""

    async def update(
        self, table: str, record_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Apply changes to record; return updated record or None if missing."""

    async def find(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return records whose columns equal every filter value."""

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Group writes; any exception inside undoes them. Nested use joins the outer one."""

    async def close(self) -> None:
        """Release connections/clients."""
