"""Chain ledger: the append-mostly forest of sharing edges.

Each edge records one hop of a document (who gave it to whom, with which
rights). Edges are created active and only ever move to revoked or
expired. Revocation cascades to every descendant edge.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from vendorflow.application.interfaces.repositories import ISharingChainRepository
from vendorflow.domain.entities import SharingChainEdge
from vendorflow.domain.enums import ChainStatus
from vendorflow.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ResourceNotFoundException,
)
from vendorflow.domain.value_objects import ChainDepthLimit, ShareRights
from vendorflow.shared.telemetry.logging import get_logger
from vendorflow.shared.utils.datetime import ensure_utc, utc_now
from vendorflow.shared.utils.generators import generate_cuid, generate_share_token

logger = get_logger(__name__)


def mask_token(share_token: str) -> str:
    """Short, non-secret form of a token for errors and logs."""
    return f"{share_token[:6]}..." if len(share_token) > 6 else "***"


class ChainLedger:
    """Create, look up, walk and revoke sharing-chain edges."""

    def __init__(
        self,
        chain_repo: ISharingChainRepository,
        token_factory: Callable[[], str] | None = None,
        max_token_attempts: int = 5,
    ) -> None:
        self._repo = chain_repo
        self._token_factory = token_factory or generate_share_token
        self._max_token_attempts = max_token_attempts

    async def _new_token(self) -> str:
        """Draw tokens until one is unused. Raises ConflictException after max attempts."""
        for _ in range(self._max_token_attempts):
            token = self._token_factory()
            if await self._repo.get_by_token(token) is None:
                return token
            logger.warning("Share token collision, drawing a new token")
        raise ConflictException(
            "Could not allocate a unique share token", resource_type="sharing_chain"
        )

    async def create_root_edge(
        self,
        document_id: str,
        from_user_id: str,
        to_user_id: str,
        permissions: ShareRights,
        max_chain_depth: ChainDepthLimit,
        share_reason: str | None = None,
        expires_at: datetime | None = None,
    ) -> SharingChainEdge:
        """Append a root edge (depth 1, no parent)."""
        edge = SharingChainEdge(
            id=generate_cuid(),
            document_id=document_id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            parent_chain_id=None,
            share_token=await self._new_token(),
            permissions=permissions,
            share_reason=share_reason,
            expires_at=ensure_utc(expires_at),
            status=ChainStatus.ACTIVE,
            shared_at=utc_now(),
            depth=1,
            max_chain_depth=max_chain_depth,
        )
        return await self._repo.create(edge)

    async def create_relay_edge(
        self,
        parent_edge_id: str,
        from_user_id: str,
        to_user_id: str,
        permissions: ShareRights,
        max_chain_depth: ChainDepthLimit | None = None,
        share_reason: str | None = None,
        expires_at: datetime | None = None,
    ) -> SharingChainEdge:
        """Append an edge under parent_edge_id.

        The parent must be usable and allow relaying. Rights are clamped to
        the parent's, expires_at to the parent's, and the depth limit to the
        parent's (tightened by max_chain_depth when given).
        """
        parent = await self._repo.get_by_id(parent_edge_id)
        if parent is None or not parent.is_usable():
            raise ResourceNotFoundException("sharing_chain", parent_edge_id)
        if not parent.permissions.can_relay:
            raise AuthorizationException("sharing_chain", "relay")
        if parent.to_user_id != from_user_id:
            raise AuthorizationException(
                "sharing_chain", "relay", "Only the recipient of a share can relay it"
            )
        expires_at = ensure_utc(expires_at)
        parent_expiry = ensure_utc(parent.expires_at)
        if parent_expiry is not None and (expires_at is None or expires_at > parent_expiry):
            expires_at = parent_expiry
        edge = SharingChainEdge(
            id=generate_cuid(),
            document_id=parent.document_id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            parent_chain_id=parent.id,
            share_token=await self._new_token(),
            permissions=permissions.clamp_to(parent.permissions),
            share_reason=share_reason,
            expires_at=expires_at,
            status=ChainStatus.ACTIVE,
            shared_at=utc_now(),
            depth=parent.depth + 1,
            max_chain_depth=parent.max_chain_depth.tighten(max_chain_depth),
        )
        return await self._repo.create(edge)

    async def get(self, chain_id: str) -> SharingChainEdge:
        edge = await self._repo.get_by_id(chain_id)
        if edge is None:
            raise ResourceNotFoundException("sharing_chain", chain_id)
        return edge

    async def get_by_token(self, share_token: str) -> SharingChainEdge | None:
        return await self._repo.get_by_token(share_token)

    async def get_history(self, document_id: str) -> list[SharingChainEdge]:
        """Every edge of the document, oldest first."""
        return await self._repo.list_by_document(document_id)

    async def ancestry(self, edge: SharingChainEdge) -> list[SharingChainEdge]:
        """Edges from the root down to edge (inclusive).

        Stops at a missing parent or a repeated id, so corrupt data cannot
        loop forever.
        """
        lineage = [edge]
        seen = {edge.id}
        current = edge
        while current.parent_chain_id is not None:
            parent = await self._repo.get_by_id(current.parent_chain_id)
            if parent is None or parent.id in seen:
                logger.warning(
                    "Broken ancestry for chain %s at parent %s",
                    edge.id,
                    current.parent_chain_id,
                )
                break
            seen.add(parent.id)
            lineage.append(parent)
            current = parent
        lineage.reverse()
        return lineage

    async def chain_path(self, edge: SharingChainEdge) -> list[str]:
        """User ids from the root sharer to edge's recipient."""
        lineage = await self.ancestry(edge)
        return [lineage[0].from_user_id, *(e.to_user_id for e in lineage)]

    async def children(self, chain_id: str) -> list[SharingChainEdge]:
        return await self._repo.list_children(chain_id)

    async def revoke(self, chain_id: str) -> list[SharingChainEdge]:
        """Revoke chain_id and every descendant.

        Iterative walk with a visited set. Only active edges change; the
        returned list holds exactly the edges whose status flipped, so a
        second call returns an empty list.
        """
        root = await self.get(chain_id)
        revoked: list[SharingChainEdge] = []
        visited: set[str] = set()
        pending = [root]
        while pending:
            edge = pending.pop()
            if edge.id in visited:
                continue
            visited.add(edge.id)
            if edge.status == ChainStatus.ACTIVE:
                updated = await self._repo.update_status(edge.id, ChainStatus.REVOKED)
                if updated is not None:
                    revoked.append(updated)
            pending.extend(
                child for child in await self._repo.list_children(edge.id)
                if child.id not in visited
            )
        return revoked

    async def list_due_for_expiry(self, now: datetime | None = None) -> list[SharingChainEdge]:
        """Active edges whose expires_at has passed."""
        now = now or utc_now()
        return [e for e in await self._repo.list_active() if e.is_past_expiry(now)]

    async def expire(self, chain_id: str) -> SharingChainEdge | None:
        """Mark a still-active edge expired. Returns None when nothing changed."""
        edge = await self.get(chain_id)
        if not edge.expire():
            return None
        return await self._repo.update_status(edge.id, ChainStatus.EXPIRED)

    async def sent_by(self, user_id: str) -> list[SharingChainEdge]:
        return await self._repo.list_by_sender(user_id)

    async def received_by(self, user_id: str) -> list[SharingChainEdge]:
        return await self._repo.list_by_recipient(user_id)
