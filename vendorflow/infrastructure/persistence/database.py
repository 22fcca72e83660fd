"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Only used when storage_backend is 'postgres'. The engine is built by
create_engine_and_sessionmaker() at startup (lifespan), so importing this
module does not trigger Settings validation.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from vendorflow.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def create_engine_and_sessionmaker(
    settings: Settings,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Build the async engine and session factory from settings."""
    pool_size = settings.db_pool_size if settings.db_pool_size is not None else 10
    max_overflow = (
        settings.db_max_overflow if settings.db_max_overflow is not None else 20
    )
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=3600,
    )
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )
    return engine, session_factory


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables (idempotent)."""
    from vendorflow.infrastructure.persistence import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")
