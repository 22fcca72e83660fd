"""Sharing chain (edge) repository."""

from __future__ import annotations

from typing import Any

from vendorflow.domain.entities import SharingChainEdge
from vendorflow.domain.enums import ChainStatus
from vendorflow.domain.value_objects import ChainDepthLimit, ShareRights
from vendorflow.infrastructure.persistence.repositories.base import BaseRepository
from vendorflow.infrastructure.persistence.tables import SHARING_CHAINS
from vendorflow.shared.utils.datetime import parse_datetime


class SharingChainRepository(BaseRepository[SharingChainEdge]):
    """ISharingChainRepository on a record store."""

    table = SHARING_CHAINS

    def _to_row(self, entity: SharingChainEdge) -> dict[str, Any]:
        return {
            "id": entity.id,
            "document_id": entity.document_id,
            "from_user_id": entity.from_user_id,
            "to_user_id": entity.to_user_id,
            "parent_chain_id": entity.parent_chain_id,
            "share_token": entity.share_token,
            "permissions": entity.permissions.to_dict(),
            "share_reason": entity.share_reason,
            "expires_at": entity.expires_at,
            "status": entity.status.value,
            "shared_at": entity.shared_at,
            "depth": entity.depth,
            "max_chain_depth": entity.max_chain_depth.value,
        }

    def _from_row(self, row: dict[str, Any]) -> SharingChainEdge:
        return SharingChainEdge(
            id=row["id"],
            document_id=row["document_id"],
            from_user_id=row["from_user_id"],
            to_user_id=row["to_user_id"],
            parent_chain_id=row.get("parent_chain_id"),
            share_token=row["share_token"],
            permissions=ShareRights.from_dict(row.get("permissions")),
            share_reason=row.get("share_reason"),
            expires_at=parse_datetime(row.get("expires_at")),
            status=ChainStatus(row["status"]),
            shared_at=parse_datetime(row["shared_at"]),
            depth=int(row["depth"]),
            max_chain_depth=ChainDepthLimit(int(row["max_chain_depth"])),
        )

    async def get_by_token(self, share_token: str) -> SharingChainEdge | None:
        edges = await self._find({"share_token": share_token}, limit=1)
        return edges[0] if edges else None

    async def list_by_document(self, document_id: str) -> list[SharingChainEdge]:
        return await self._find({"document_id": document_id}, order_by="shared_at")

    async def list_children(self, parent_chain_id: str) -> list[SharingChainEdge]:
        return await self._find({"parent_chain_id": parent_chain_id}, order_by="shared_at")

    async def list_by_sender(self, user_id: str) -> list[SharingChainEdge]:
        return await self._find({"from_user_id": user_id}, order_by="shared_at")

    async def list_by_recipient(self, user_id: str) -> list[SharingChainEdge]:
        return await self._find({"to_user_id": user_id}, order_by="shared_at")

    async def list_active(self) -> list[SharingChainEdge]:
        return await self._find({"status": ChainStatus.ACTIVE.value}, order_by="shared_at")

    async def update_status(
        self, chain_id: str, status: ChainStatus
    ) -> SharingChainEdge | None:
        return await self._update(chain_id, {"status": status.value})
