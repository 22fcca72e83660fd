"""Notification emitter: inbox entries for share activity."""

from __future__ import annotations

from typing import Any

from vendorflow.application.dtos.sharing import NotificationInbox
from vendorflow.application.interfaces.repositories import INotificationRepository
from vendorflow.domain.entities import SharingNotification
from vendorflow.domain.enums import NotificationType
from vendorflow.domain.exceptions import AuthorizationException, ResourceNotFoundException
from vendorflow.shared.utils.datetime import utc_now
from vendorflow.shared.utils.generators import generate_cuid


_RESPONSE_TYPES = frozenset(
    {NotificationType.SHARE_ACCEPTED, NotificationType.SHARE_REJECTED}
)


class NotificationEmitter:
    """Write notifications and serve per-user inboxes."""

    def __init__(self, notification_repo: INotificationRepository) -> None:
        self._repo = notification_repo

    async def notify(
        self,
        from_user_id: str,
        to_user_id: str,
        notification_type: NotificationType,
        message: str,
        document_id: str | None = None,
        chain_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> SharingNotification:
        notification = SharingNotification(
            id=generate_cuid(),
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            notification_type=notification_type,
            message=message,
            document_id=document_id,
            chain_id=chain_id,
            metadata=metadata or {},
            is_read=False,
            created_at=utc_now(),
        )
        return await self._repo.create(notification)

    async def get(self, notification_id: str) -> SharingNotification:
        notification = await self._repo.get_by_id(notification_id)
        if notification is None:
            raise ResourceNotFoundException("sharing_notification", notification_id)
        return notification

    async def list_for(self, user_id: str, unread_only: bool = False) -> NotificationInbox:
        """Newest first, with the user's unread count."""
        notifications = await self._repo.list_for_user(user_id, unread_only=unread_only)
        if unread_only:
            unread = len(notifications)
        else:
            unread = sum(1 for n in notifications if not n.is_read)
        return NotificationInbox(notifications=notifications, unread_count=unread)

    async def mark_read(
        self, notification_id: str, user_id: str | None = None
    ) -> SharingNotification:
        """Mark read. Idempotent. When user_id is given it must be the recipient."""
        notification = await self.get(notification_id)
        if user_id is not None and notification.to_user_id != user_id:
            raise AuthorizationException("sharing_notification", "read")
        if not notification.mark_read():
            return notification
        updated = await self._repo.mark_read(notification_id)
        return updated or notification

    async def find_response(self, request: SharingNotification) -> SharingNotification | None:
        """The share_accepted or share_rejected reply already sent for request, if any."""
        for notification in await self._repo.list_for_user(request.from_user_id):
            if (
                notification.notification_type in _RESPONSE_TYPES
                and notification.metadata.get("requestId") == request.id
            ):
                return notification
        return None
