"""Base repository: row <-> entity mapping over an IRecordStore table."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from vendorflow.application.interfaces.record_store import IRecordStore


EntityType = TypeVar("EntityType")


class BaseRepository(Generic[EntityType]):
    """Base repository with get_by_id, create and find helpers.

    Subclasses implement _to_row and _from_row for their entity.
    """

    table: str

    def __init__(self, store: IRecordStore) -> None:
        self.store = store

    def _to_row(self, entity: EntityType) -> dict[str, Any]:
        raise NotImplementedError

    def _from_row(self, row: dict[str, Any]) -> EntityType:
        raise NotImplementedError

    async def get_by_id(self, entity_id: str) -> EntityType | None:
        """Return a single record by id, or None."""
        row = await self.store.get(self.table, entity_id)
        return self._from_row(row) if row is not None else None

    async def create(self, entity: EntityType) -> EntityType:
        """Insert the entity and return it as stored."""
        row = await self.store.insert(self.table, self._to_row(entity))
        return self._from_row(row)

    async def _find(
        self,
        filters: dict[str, Any],
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[EntityType]:
        rows = await self.store.find(
            self.table, filters, order_by=order_by, descending=descending, limit=limit
        )
        return [self._from_row(row) for row in rows]

    async def _update(self, entity_id: str, changes: dict[str, Any]) -> EntityType | None:
        row = await self.store.update(self.table, entity_id, changes)
        return self._from_row(row) if row is not None else None
