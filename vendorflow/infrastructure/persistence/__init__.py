"""Persistence: record stores (memory, SQL), ORM models, repositories."""

from vendorflow.infrastructure.persistence.memory_store import MemoryRecordStore
from vendorflow.infrastructure.persistence.store_factory import create_record_store

__all__ = ["MemoryRecordStore", "create_record_store"]
