"""Relational record store on SQLAlchemy 2.x async ORM.

Record keys are column names; they are translated to mapped attribute
names per model (e.g. the ``metadata`` column of notifications).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from vendorflow.domain.exceptions import ConflictException
from vendorflow.infrastructure.persistence.database import Base
from vendorflow.infrastructure.persistence.models import MODELS_BY_TABLE


def _column_to_attr(model: type[Base]) -> dict[str, str]:
    mapper = sa_inspect(model)
    return {prop.columns[0].name: prop.key for prop in mapper.column_attrs}


class SqlRecordStore:
    """IRecordStore on an async session factory.

    Outside transaction() each call runs in its own short transaction;
    inside, every call of the current task shares one session.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine
        self._current: ContextVar[AsyncSession | None] = ContextVar(
            f"sql_store_session_{id(self)}", default=None
        )
        self._columns = {table: _column_to_attr(model) for table, model in MODELS_BY_TABLE.items()}

    def _model(self, table: str) -> Any:
        try:
            return MODELS_BY_TABLE[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}") from None

    def _to_attrs(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        mapping = self._columns[table]
        return {mapping.get(key, key): value for key, value in record.items()}

    def _to_record(self, table: str, obj: Any) -> dict[str, Any]:
        return {column: getattr(obj, attr) for column, attr in self._columns[table].items()}

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        current = self._current.get()
        if current is not None:
            yield current
            return
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        model = self._model(table)
        async with self._session() as session:
            obj = model(**self._to_attrs(table, record))
            session.add(obj)
            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictException(
                    f"Duplicate or invalid record for {table}", resource_type=table
                ) from e
            return self._to_record(table, obj)

    async def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        model = self._model(table)
        async with self._session() as session:
            obj = await session.get(model, record_id)
            return self._to_record(table, obj) if obj is not None else None

    async def update(
        self, table: str, record_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        model = self._model(table)
        async with self._session() as session:
            obj = await session.get(model, record_id)
            if obj is None:
                return None
            for attr, value in self._to_attrs(table, changes).items():
                setattr(obj, attr, value)
            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictException(
                    f"Duplicate or invalid record for {table}", resource_type=table
                ) from e
            return self._to_record(table, obj)

    async def find(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        model = self._model(table)
        stmt = select(model)
        for key, value in self._to_attrs(table, filters or {}).items():
            column = getattr(model, key)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        if order_by is not None:
            column = getattr(model, self._columns[table].get(order_by, order_by))
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session() as session:
            result = await session.execute(stmt)
            return [self._to_record(table, obj) for obj in result.scalars().all()]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._current.get() is not None:
            yield
            return
        async with self._session_factory() as session:
            async with session.begin():
                token = self._current.set(session)
                try:
                    yield
                finally:
                    self._current.reset(token)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
