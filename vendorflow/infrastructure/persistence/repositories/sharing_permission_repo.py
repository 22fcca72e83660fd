"""Sharing permission repository."""

from __future__ import annotations

from typing import Any

from vendorflow.domain.entities import SharingPermission
from vendorflow.domain.enums import PermissionStatus
from vendorflow.domain.exceptions import ResourceNotFoundException
from vendorflow.domain.value_objects import ChainDepthLimit, DocumentTypeScope
from vendorflow.infrastructure.persistence.repositories.base import BaseRepository
from vendorflow.infrastructure.persistence.tables import SHARING_PERMISSIONS
from vendorflow.shared.utils.datetime import parse_datetime


class SharingPermissionRepository(BaseRepository[SharingPermission]):
    """ISharingPermissionRepository on a record store."""

    table = SHARING_PERMISSIONS

    def _to_row(self, entity: SharingPermission) -> dict[str, Any]:
        return {
            "id": entity.id,
            "granter_user_id": entity.granter_user_id,
            "grantee_user_id": entity.grantee_user_id,
            "document_types": entity.document_types.as_list(),
            "can_relay": entity.can_relay,
            "can_view_history": entity.can_view_history,
            "max_chain_depth": entity.max_chain_depth.value,
            "status": entity.status.value,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }

    def _from_row(self, row: dict[str, Any]) -> SharingPermission:
        return SharingPermission(
            id=row["id"],
            granter_user_id=row["granter_user_id"],
            grantee_user_id=row["grantee_user_id"],
            document_types=DocumentTypeScope.of(row["document_types"]),
            can_relay=bool(row["can_relay"]),
            can_view_history=bool(row["can_view_history"]),
            max_chain_depth=ChainDepthLimit(int(row["max_chain_depth"])),
            status=PermissionStatus(row["status"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    async def save(self, permission: SharingPermission) -> SharingPermission:
        row = self._to_row(permission)
        changes = {k: v for k, v in row.items() if k not in ("id", "created_at")}
        updated = await self._update(permission.id, changes)
        if updated is None:
            raise ResourceNotFoundException("sharing_permission", permission.id)
        return updated

    async def list_for_user(self, user_id: str) -> list[SharingPermission]:
        granted = await self._find({"granter_user_id": user_id})
        received = await self._find({"grantee_user_id": user_id})
        merged = {p.id: p for p in [*granted, *received]}
        return sorted(merged.values(), key=lambda p: p.created_at, reverse=True)

    async def list_active_for_pair(
        self, granter_user_id: str, grantee_user_id: str
    ) -> list[SharingPermission]:
        return await self._find(
            {
                "granter_user_id": granter_user_id,
                "grantee_user_id": grantee_user_id,
                "status": PermissionStatus.ACTIVE.value,
            },
            order_by="created_at",
        )
