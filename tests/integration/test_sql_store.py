"""Integration tests for SqlRecordStore against PostgreSQL.

Set TEST_DATABASE_URL (postgresql+asyncpg://...) to run; skipped otherwise.
"""

import os

import pytest

from vendorflow.application.dtos import RelayRequest, ShareRequest
from vendorflow.application.services import (
    ChainLedger,
    KeyedLockRegistry,
    NotificationEmitter,
    PermissionRegistry,
    ProvenanceTracker,
)
from vendorflow.application.use_cases.sharing import SharingChainService
from vendorflow.core.config import Settings
from vendorflow.domain.exceptions import ConflictException
from vendorflow.domain.value_objects import ShareRights
from vendorflow.infrastructure.persistence.database import (
    create_engine_and_sessionmaker,
    create_schema,
)
from vendorflow.infrastructure.persistence.repositories import (
    DocumentDirectory,
    NotificationRepository,
    ProvenanceRepository,
    SharingChainRepository,
    SharingPermissionRepository,
)
from vendorflow.infrastructure.persistence.sql_store import SqlRecordStore
from vendorflow.infrastructure.persistence.tables import DOCUMENTS
from vendorflow.shared.utils.generators import generate_cuid

DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "")

pytestmark = [
    pytest.mark.requires_db,
    pytest.mark.skipif(not DATABASE_URL, reason="TEST_DATABASE_URL not set"),
]


@pytest.fixture
async def sql_store():
    settings = Settings(storage_backend="postgres", database_url=DATABASE_URL)
    engine, session_factory = create_engine_and_sessionmaker(settings)
    await create_schema(engine)
    store = SqlRecordStore(session_factory, engine)
    yield store
    await store.close()


async def test_insert_get_update_find(sql_store: SqlRecordStore) -> None:
    doc_id = generate_cuid()
    owner = f"owner-{doc_id}"
    await DocumentDirectory(sql_store).register(doc_id, owner, "w9", "w9.pdf")

    row = await sql_store.get(DOCUMENTS, doc_id)
    assert row["owner_user_id"] == owner
    updated = await sql_store.update(DOCUMENTS, doc_id, {"file_name": "renamed.pdf"})
    assert updated["file_name"] == "renamed.pdf"
    found = await sql_store.find(DOCUMENTS, {"owner_user_id": owner, "file_name": "renamed.pdf"})
    assert [r["id"] for r in found] == [doc_id]
    assert await sql_store.update(DOCUMENTS, "missing", {"file_name": "x"}) is None


async def test_duplicate_id_is_conflict(sql_store: SqlRecordStore) -> None:
    doc_id = generate_cuid()
    directory = DocumentDirectory(sql_store)
    await directory.register(doc_id, "owner", "w9")
    with pytest.raises(ConflictException):
        await directory.register(doc_id, "owner", "w9")


async def test_transaction_rolls_back(sql_store: SqlRecordStore) -> None:
    doc_id = generate_cuid()
    with pytest.raises(RuntimeError):
        async with sql_store.transaction():
            await DocumentDirectory(sql_store).register(doc_id, "owner", "w9")
            raise RuntimeError("boom")
    assert await sql_store.get(DOCUMENTS, doc_id) is None


async def test_sharing_flow_on_postgres(sql_store: SqlRecordStore) -> None:
    suffix = generate_cuid()
    owner, holder, relayee = f"a-{suffix}", f"b-{suffix}", f"c-{suffix}"
    doc_id = f"doc-{suffix}"
    locks = KeyedLockRegistry()
    registry = PermissionRegistry(SharingPermissionRepository(sql_store), sql_store, locks)
    service = SharingChainService(
        store=sql_store,
        documents=DocumentDirectory(sql_store),
        permissions=registry,
        ledger=ChainLedger(SharingChainRepository(sql_store)),
        provenance=ProvenanceTracker(ProvenanceRepository(sql_store)),
        notifications=NotificationEmitter(NotificationRepository(sql_store)),
        locks=locks,
    )
    await DocumentDirectory(sql_store).register(doc_id, owner, "w9")
    await registry.grant(owner, holder, ["w9"], max_chain_depth=2)

    root = await service.share_document(ShareRequest(doc_id, owner, holder, ShareRights()))
    relay = await service.relay_document(
        RelayRequest(root.edge.share_token, holder, relayee, ShareRights())
    )
    assert relay.chain_path == [owner, holder, relayee]
    assert relay.chain_complete

    inbox = await service.notifications.list_for(relayee)
    assert inbox.notifications[0].metadata["parentChainId"] == root.edge.id

    outcome = await service.revoke_chain(root.edge.id, owner)
    assert set(outcome.revoked_chain_ids) == {root.edge.id, relay.edge.id}
