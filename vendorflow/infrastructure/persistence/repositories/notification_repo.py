"""Sharing notification repository."""

from __future__ import annotations

from typing import Any

from vendorflow.domain.entities import SharingNotification
from vendorflow.domain.enums import NotificationType
from vendorflow.infrastructure.persistence.repositories.base import BaseRepository
from vendorflow.infrastructure.persistence.tables import SHARING_NOTIFICATIONS
from vendorflow.shared.utils.datetime import parse_datetime


class NotificationRepository(BaseRepository[SharingNotification]):
    """INotificationRepository on a record store."""

    table = SHARING_NOTIFICATIONS

    def _to_row(self, entity: SharingNotification) -> dict[str, Any]:
        return {
            "id": entity.id,
            "from_user_id": entity.from_user_id,
            "to_user_id": entity.to_user_id,
            "type": entity.notification_type.value,
            "message": entity.message,
            "document_id": entity.document_id,
            "chain_id": entity.chain_id,
            "metadata": dict(entity.metadata),
            "is_read": entity.is_read,
            "created_at": entity.created_at,
        }

    def _from_row(self, row: dict[str, Any]) -> SharingNotification:
        return SharingNotification(
            id=row["id"],
            from_user_id=row["from_user_id"],
            to_user_id=row["to_user_id"],
            notification_type=NotificationType(row["type"]),
            message=row["message"],
            document_id=row.get("document_id"),
            chain_id=row.get("chain_id"),
            metadata=dict(row.get("metadata") or {}),
            is_read=bool(row.get("is_read", False)),
            created_at=parse_datetime(row.get("created_at")),
        )

    async def list_for_user(
        self, user_id: str, unread_only: bool = False
    ) -> list[SharingNotification]:
        filters: dict[str, Any] = {"to_user_id": user_id}
        if unread_only:
            filters["is_read"] = False
        return await self._find(filters, order_by="created_at", descending=True)

    async def mark_read(self, notification_id: str) -> SharingNotification | None:
        return await self._update(notification_id, {"is_read": True})
