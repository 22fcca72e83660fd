"""Tests for the Supabase (PostgREST) record store over httpx.MockTransport."""

import json
from datetime import UTC, datetime

import httpx
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
from vendorflow.domain.exceptions import ConflictException, StorageBackendException
from vendorflow.domain.value_objects import ShareRights
from vendorflow.infrastructure.persistence.repositories import (
    DocumentDirectory,
    NotificationRepository,
    ProvenanceRepository,
    SharingChainRepository,
    SharingPermissionRepository,
)
from vendorflow.infrastructure.persistence.tables import SHARING_CHAINS
from vendorflow.infrastructure.supabase import PostgrestClient, SupabaseRecordStore

_RESERVED = {"select", "order", "limit"}


def _as_operand(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class FakePostgrest:
    """Just enough PostgREST: eq./is.null filters, order, limit, return=representation."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_next: int | None = None

    def _matches(self, row: dict, params: httpx.QueryParams) -> bool:
        for key, op in params.multi_items():
            if key in _RESERVED:
                continue
            if op == "is.null":
                if row.get(key) is not None:
                    return False
            elif _as_operand(row.get(key)) != op.removeprefix("eq."):
                return False
        return True

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_next is not None:
            status, self.fail_next = self.fail_next, None
            return httpx.Response(status, json={"message": "backend says no"})
        table = self.tables.setdefault(request.url.path.rsplit("/", 1)[-1], {})
        params = request.url.params
        if request.method == "POST":
            row = json.loads(request.content)
            if row["id"] in table:
                return httpx.Response(409, json={"message": "duplicate key value"})
            table[row["id"]] = row
            return httpx.Response(201, json=[row])
        matched = [row for row in table.values() if self._matches(row, params)]
        if request.method == "GET":
            if "order" in params:
                column, direction = params["order"].rsplit(".", 1)
                matched.sort(
                    key=lambda r: (r.get(column) is None, _as_operand(r.get(column))),
                    reverse=direction == "desc",
                )
            if "limit" in params:
                matched = matched[: int(params["limit"])]
            return httpx.Response(200, json=matched)
        if request.method == "PATCH":
            changes = json.loads(request.content)
            for row in matched:
                row.update(changes)
            return httpx.Response(200, json=matched)
        if request.method == "DELETE":
            for row in matched:
                table.pop(row["id"], None)
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def backend() -> FakePostgrest:
    return FakePostgrest()


@pytest.fixture
async def supabase_store(backend: FakePostgrest):
    http = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    client = PostgrestClient("https://project.supabase.co/", "service-key", http_client=http)
    yield SupabaseRecordStore(client)
    await http.aclose()


async def test_insert_sends_representation_request(
    supabase_store: SupabaseRecordStore, backend: FakePostgrest
) -> None:
    at = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    row = await supabase_store.insert("things", {"id": "r1", "created_at": at})
    request = backend.requests[-1]
    assert request.method == "POST"
    assert request.url.path == "/rest/v1/things"
    assert request.headers["Prefer"] == "return=representation"
    assert request.headers["apikey"] == "service-key"
    assert request.headers["Authorization"] == "Bearer service-key"
    assert json.loads(request.content) == {"id": "r1", "created_at": at.isoformat()}
    assert row["id"] == "r1"


async def test_get_uses_id_filter(
    supabase_store: SupabaseRecordStore, backend: FakePostgrest
) -> None:
    await supabase_store.insert("things", {"id": "r1"})
    assert (await supabase_store.get("things", "r1")) == {"id": "r1"}
    assert await supabase_store.get("things", "r2") is None
    params = backend.requests[-1].url.params
    assert params["id"] == "eq.r2"
    assert params["limit"] == "1"
    assert params["select"] == "*"


async def test_find_encodes_filters_order_and_limit(
    supabase_store: SupabaseRecordStore, backend: FakePostgrest
) -> None:
    await supabase_store.find(
        "things",
        {"status": "active", "is_read": False, "parent_chain_id": None},
        order_by="created_at",
        descending=True,
        limit=5,
    )
    params = backend.requests[-1].url.params
    assert params["status"] == "eq.active"
    assert params["is_read"] == "eq.false"
    assert params["parent_chain_id"] == "is.null"
    assert params["order"] == "created_at.desc"
    assert params["limit"] == "5"


async def test_conflict_maps_to_conflict_exception(
    supabase_store: SupabaseRecordStore,
) -> None:
    await supabase_store.insert("things", {"id": "r1"})
    with pytest.raises(ConflictException):
        await supabase_store.insert("things", {"id": "r1"})


async def test_server_error_maps_to_storage_exception(
    supabase_store: SupabaseRecordStore, backend: FakePostgrest
) -> None:
    backend.fail_next = 500
    with pytest.raises(StorageBackendException) as exc_info:
        await supabase_store.get("things", "r1")
    assert exc_info.value.details["status_code"] == 500
    assert "backend says no" in exc_info.value.message


async def test_transport_error_maps_to_storage_exception() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    store = SupabaseRecordStore(PostgrestClient("https://x.supabase.co", "k", http_client=http))
    with pytest.raises(StorageBackendException):
        await store.find("things")
    await http.aclose()


async def test_transaction_compensates_in_reverse(
    supabase_store: SupabaseRecordStore, backend: FakePostgrest
) -> None:
    await supabase_store.insert("things", {"id": "r1", "value": 1})
    with pytest.raises(RuntimeError):
        async with supabase_store.transaction():
            await supabase_store.update("things", "r1", {"value": 2})
            await supabase_store.insert("things", {"id": "r2", "value": 9})
            raise RuntimeError("boom")
    assert backend.tables["things"] == {"r1": {"id": "r1", "value": 1}}
    assert [r.method for r in backend.requests[-2:]] == ["DELETE", "PATCH"]


async def test_update_missing_row_returns_none(supabase_store: SupabaseRecordStore) -> None:
    assert await supabase_store.update("things", "nope", {"value": 1}) is None
    async with supabase_store.transaction():
        assert await supabase_store.update("things", "nope", {"value": 1}) is None


async def test_sharing_flow_runs_on_supabase_store(
    supabase_store: SupabaseRecordStore, backend: FakePostgrest
) -> None:
    locks = KeyedLockRegistry()
    documents = DocumentDirectory(supabase_store)
    registry = PermissionRegistry(SharingPermissionRepository(supabase_store), supabase_store, locks)
    service = SharingChainService(
        store=supabase_store,
        documents=documents,
        permissions=registry,
        ledger=ChainLedger(SharingChainRepository(supabase_store)),
        provenance=ProvenanceTracker(ProvenanceRepository(supabase_store)),
        notifications=NotificationEmitter(NotificationRepository(supabase_store)),
        locks=locks,
    )
    await documents.register("doc-1", "user-a", "insurance")
    await registry.grant("user-a", "user-b", ["insurance"], max_chain_depth=3)

    root = await service.share_document(ShareRequest("doc-1", "user-a", "user-b", ShareRights()))
    relay = await service.relay_document(
        RelayRequest(root.edge.share_token, "user-b", "user-c", ShareRights())
    )
    assert relay.chain_path == ["user-a", "user-b", "user-c"]

    outcome = await service.revoke_chain(root.edge.id, "user-a")
    assert set(outcome.revoked_chain_ids) == {root.edge.id, relay.edge.id}
    statuses = {row["status"] for row in backend.tables[SHARING_CHAINS].values()}
    assert statuses == {"revoked"}
