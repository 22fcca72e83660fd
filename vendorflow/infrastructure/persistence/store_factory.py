"""Select and build the record store for the configured backend."""

from __future__ import annotations

import logging

from vendorflow.application.interfaces.record_store import IRecordStore
from vendorflow.core.config import Settings
from vendorflow.infrastructure.persistence.memory_store import MemoryRecordStore

logger = logging.getLogger(__name__)


async def create_record_store(settings: Settings) -> IRecordStore:
    """Return a ready store for settings.storage_backend (memory, postgres, supabase)."""
    backend = settings.storage_backend
    if backend == "postgres":
        from vendorflow.infrastructure.persistence.database import (
            create_engine_and_sessionmaker,
            create_schema,
        )
        from vendorflow.infrastructure.persistence.sql_store import SqlRecordStore

        engine, session_factory = create_engine_and_sessionmaker(settings)
        await create_schema(engine)
        store: IRecordStore = SqlRecordStore(session_factory, engine)
    elif backend == "supabase":
        from vendorflow.infrastructure.supabase import PostgrestClient, SupabaseRecordStore

        key = settings.supabase_service_key
        client = PostgrestClient(
            settings.supabase_url,
            key.get_secret_value() if key else "",
            timeout=settings.supabase_timeout_seconds,
        )
        store = SupabaseRecordStore(client)
    else:
        store = MemoryRecordStore()
    logger.info("Record store ready (backend=%s)", backend)
    return store
