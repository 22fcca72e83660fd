"""User-scoped sharing views: notification inbox and dashboard stats."""

from typing import Annotated

from fastapi import APIRouter, Query

from vendorflow.api.v1.dependencies import (
    NotificationEmitterDep,
    PathUserDep,
    SharingServiceDep,
)
from vendorflow.schemas.sharing import NotificationListResponse, SharingStatsResponse

router = APIRouter()


@router.get("/{user_id}/sharing-notifications", response_model=NotificationListResponse)
async def list_sharing_notifications(
    user_id: PathUserDep,
    notifications: NotificationEmitterDep,
    unread_only: Annotated[bool, Query(alias="unreadOnly")] = False,
):
    """Inbox, newest first, with the unread count."""
    inbox = await notifications.list_for(user_id, unread_only=unread_only)
    return NotificationListResponse.from_inbox(inbox)


@router.get("/{user_id}/sharing-stats", response_model=SharingStatsResponse)
async def get_sharing_stats(user_id: PathUserDep, service: SharingServiceDep):
    stats = await service.get_sharing_stats(user_id)
    return SharingStatsResponse.model_validate(stats)
