"""Pytest configuration and fixtures for vendorflow.

Services run on the in-memory record store; HTTP tests use the FastAPI app
with that same store placed on app.state, so seeded data is visible to
requests.
"""

import os

os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest
from httpx import ASGITransport, AsyncClient

from vendorflow.application.services import (
    ChainLedger,
    KeyedLockRegistry,
    NotificationEmitter,
    PermissionRegistry,
    ProvenanceTracker,
)
from vendorflow.application.use_cases.sharing import SharingChainService
from vendorflow.core.config import get_settings
from vendorflow.infrastructure.persistence.memory_store import MemoryRecordStore
from vendorflow.infrastructure.persistence.repositories import (
    DocumentDirectory,
    NotificationRepository,
    ProvenanceRepository,
    SharingChainRepository,
    SharingPermissionRepository,
)

get_settings.cache_clear()


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def locks() -> KeyedLockRegistry:
    return KeyedLockRegistry()


@pytest.fixture
def documents(store: MemoryRecordStore) -> DocumentDirectory:
    return DocumentDirectory(store)


@pytest.fixture
def registry(store: MemoryRecordStore, locks: KeyedLockRegistry) -> PermissionRegistry:
    return PermissionRegistry(SharingPermissionRepository(store), store, locks)


@pytest.fixture
def ledger(store: MemoryRecordStore) -> ChainLedger:
    return ChainLedger(SharingChainRepository(store))


@pytest.fixture
def tracker(store: MemoryRecordStore) -> ProvenanceTracker:
    return ProvenanceTracker(ProvenanceRepository(store))


@pytest.fixture
def emitter(store: MemoryRecordStore) -> NotificationEmitter:
    return NotificationEmitter(NotificationRepository(store))


@pytest.fixture
def make_service(store, documents, registry, ledger, tracker, emitter, locks):
    """Factory for SharingChainService; keyword overrides replace collaborators/options."""

    def _make(**overrides) -> SharingChainService:
        kwargs = {
            "store": store,
            "documents": documents,
            "permissions": registry,
            "ledger": ledger,
            "provenance": tracker,
            "notifications": emitter,
            "locks": locks,
            "share_link_base_url": "https://vendorflow.test",
        }
        kwargs.update(overrides)
        return SharingChainService(**kwargs)

    return _make


@pytest.fixture
def service(make_service) -> SharingChainService:
    return make_service()


@pytest.fixture
async def client(store: MemoryRecordStore) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) backed by the test store."""
    from vendorflow.core.limiter import limiter
    from vendorflow.main import create_app

    app = create_app()
    app.state.record_store = store
    app.state.locks = KeyedLockRegistry()
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
