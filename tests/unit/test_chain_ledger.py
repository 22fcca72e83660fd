"""Tests for ChainLedger (tokens, relay clamping, ancestry, cascade revoke, expiry)."""

from datetime import UTC, datetime, timedelta
from itertools import cycle

import pytest

from vendorflow.application.services import ChainLedger
from vendorflow.application.services.chain_ledger import mask_token
from vendorflow.domain.enums import ChainStatus
from vendorflow.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ResourceNotFoundException,
)
from vendorflow.domain.value_objects import ChainDepthLimit, ShareRights
from vendorflow.infrastructure.persistence.memory_store import MemoryRecordStore
from vendorflow.infrastructure.persistence.repositories import SharingChainRepository
from vendorflow.infrastructure.persistence.tables import SHARING_CHAINS
from vendorflow.shared.utils.datetime import utc_now


async def _root(ledger: ChainLedger, **overrides):
    kwargs = {
        "document_id": "doc-1",
        "from_user_id": "user-a",
        "to_user_id": "user-b",
        "permissions": ShareRights(),
        "max_chain_depth": ChainDepthLimit(3),
    }
    kwargs.update(overrides)
    return await ledger.create_root_edge(**kwargs)


async def test_root_edge_defaults(ledger: ChainLedger) -> None:
    edge = await _root(ledger, share_reason="onboarding")
    assert edge.is_root
    assert edge.depth == 1
    assert edge.status == ChainStatus.ACTIVE
    assert edge.share_reason == "onboarding"
    assert len(edge.share_token) >= 32
    assert (await ledger.get_by_token(edge.share_token)).id == edge.id


async def test_token_collision_draws_again(store: MemoryRecordStore) -> None:
    tokens = iter(["token-one-aaaaaaaaaaaa", "token-one-aaaaaaaaaaaa", "token-two-bbbbbbbbbbbb"])
    ledger = ChainLedger(SharingChainRepository(store), token_factory=lambda: next(tokens))
    first = await _root(ledger)
    second = await _root(ledger, to_user_id="user-c")
    assert first.share_token == "token-one-aaaaaaaaaaaa"
    assert second.share_token == "token-two-bbbbbbbbbbbb"


async def test_token_exhaustion_raises_conflict(store: MemoryRecordStore) -> None:
    tokens = cycle(["always-the-same-token"])
    ledger = ChainLedger(
        SharingChainRepository(store), token_factory=lambda: next(tokens), max_token_attempts=3
    )
    await _root(ledger)
    with pytest.raises(ConflictException):
        await _root(ledger, to_user_id="user-c")
    assert store.count(SHARING_CHAINS) == 1


async def test_relay_clamps_rights_expiry_and_depth(ledger: ChainLedger) -> None:
    expires = utc_now() + timedelta(days=1)
    root = await _root(
        ledger,
        permissions=ShareRights(can_relay=True, can_view=True, can_download=False),
        expires_at=expires,
    )
    relay = await ledger.create_relay_edge(
        root.id,
        "user-b",
        "user-c",
        ShareRights(can_relay=True, can_view=True, can_download=True),
        max_chain_depth=ChainDepthLimit(5),
        expires_at=expires + timedelta(days=30),
    )
    assert relay.parent_chain_id == root.id
    assert relay.document_id == "doc-1"
    assert relay.depth == 2
    assert relay.permissions == ShareRights(can_relay=True, can_view=True, can_download=False)
    assert relay.expires_at == expires
    assert relay.max_chain_depth == ChainDepthLimit(3)


async def test_relay_accepts_naive_expiry_under_expiring_parent(ledger: ChainLedger) -> None:
    parent_expiry = utc_now() + timedelta(days=2)
    root = await _root(
        ledger, permissions=ShareRights(can_relay=True), expires_at=parent_expiry
    )
    naive = datetime.now() + timedelta(days=1)
    relay = await ledger.create_relay_edge(
        root.id, "user-b", "user-c", ShareRights(), expires_at=naive
    )
    assert relay.expires_at == naive.replace(tzinfo=UTC)

    later = await ledger.create_relay_edge(
        root.id, "user-b", "user-d", ShareRights(), expires_at=datetime(2098, 1, 1)
    )
    assert later.expires_at == parent_expiry


async def test_relay_hop_limit_tightens(ledger: ChainLedger) -> None:
    root = await _root(ledger)
    relay = await ledger.create_relay_edge(
        root.id, "user-b", "user-c", ShareRights(), max_chain_depth=ChainDepthLimit(2)
    )
    assert relay.max_chain_depth == ChainDepthLimit(2)


async def test_relay_from_non_relayable_parent_denied(ledger: ChainLedger) -> None:
    root = await _root(ledger, permissions=ShareRights(can_relay=False))
    with pytest.raises(AuthorizationException):
        await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())


async def test_relay_by_non_recipient_denied(ledger: ChainLedger) -> None:
    root = await _root(ledger)
    with pytest.raises(AuthorizationException):
        await ledger.create_relay_edge(root.id, "user-x", "user-c", ShareRights())


async def test_relay_from_revoked_or_missing_parent_not_found(ledger: ChainLedger) -> None:
    root = await _root(ledger)
    await ledger.revoke(root.id)
    with pytest.raises(ResourceNotFoundException):
        await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())
    with pytest.raises(ResourceNotFoundException):
        await ledger.create_relay_edge("missing", "user-b", "user-c", ShareRights())


async def test_chain_path_and_ancestry(ledger: ChainLedger) -> None:
    root = await _root(ledger)
    hop = await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())
    leaf = await ledger.create_relay_edge(hop.id, "user-c", "user-d", ShareRights())
    assert [e.id for e in await ledger.ancestry(leaf)] == [root.id, hop.id, leaf.id]
    assert await ledger.chain_path(leaf) == ["user-a", "user-b", "user-c", "user-d"]


async def test_ancestry_stops_on_cycle(ledger: ChainLedger, store: MemoryRecordStore) -> None:
    root = await _root(ledger)
    child = await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())
    await store.update(SHARING_CHAINS, root.id, {"parent_chain_id": child.id})
    lineage = await ledger.ancestry(await ledger.get(child.id))
    assert [e.id for e in lineage] == [root.id, child.id]


async def test_revoke_cascades_to_subtree_only(ledger: ChainLedger) -> None:
    root = await _root(ledger)
    branch = await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())
    leaf = await ledger.create_relay_edge(branch.id, "user-c", "user-d", ShareRights())
    sibling = await ledger.create_relay_edge(root.id, "user-b", "user-e", ShareRights())

    revoked = await ledger.revoke(branch.id)

    assert {e.id for e in revoked} == {branch.id, leaf.id}
    assert (await ledger.get(root.id)).status == ChainStatus.ACTIVE
    assert (await ledger.get(sibling.id)).status == ChainStatus.ACTIVE
    assert (await ledger.get(leaf.id)).status == ChainStatus.REVOKED


async def test_revoke_is_idempotent(ledger: ChainLedger) -> None:
    root = await _root(ledger)
    await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())
    assert len(await ledger.revoke(root.id)) == 2
    assert await ledger.revoke(root.id) == []


async def test_revoke_terminates_on_cycle(ledger: ChainLedger, store: MemoryRecordStore) -> None:
    root = await _root(ledger)
    child = await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())
    await store.update(SHARING_CHAINS, root.id, {"parent_chain_id": child.id})
    revoked = await ledger.revoke(root.id)
    assert {e.id for e in revoked} == {root.id, child.id}


async def test_revoke_unknown_raises(ledger: ChainLedger) -> None:
    with pytest.raises(ResourceNotFoundException):
        await ledger.revoke("missing")


async def test_expiry_sweep(ledger: ChainLedger) -> None:
    now = utc_now()
    stale = await _root(ledger, expires_at=now - timedelta(minutes=1))
    fresh = await _root(ledger, to_user_id="user-c", expires_at=now + timedelta(days=1))
    await _root(ledger, to_user_id="user-d")

    due = await ledger.list_due_for_expiry(now)
    assert [e.id for e in due] == [stale.id]

    expired = await ledger.expire(stale.id)
    assert expired is not None and expired.status == ChainStatus.EXPIRED
    assert await ledger.expire(stale.id) is None
    assert (await ledger.get(fresh.id)).status == ChainStatus.ACTIVE


async def test_sent_and_received(ledger: ChainLedger) -> None:
    root = await _root(ledger)
    await ledger.create_relay_edge(root.id, "user-b", "user-c", ShareRights())
    assert len(await ledger.sent_by("user-a")) == 1
    assert len(await ledger.sent_by("user-b")) == 1
    assert len(await ledger.received_by("user-b")) == 1
    assert await ledger.received_by("user-a") == []


def test_mask_token_hides_most_of_token() -> None:
    assert mask_token("abcdefghijklmnop") == "abcdef..."
    assert mask_token("abc") == "***"
