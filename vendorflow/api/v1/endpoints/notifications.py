"""Notifications API: mark read, answer a share request."""

from fastapi import APIRouter, Request

from vendorflow.api.v1.dependencies import (
    CurrentUserDep,
    NotificationEmitterDep,
    SharingServiceDep,
)
from vendorflow.core.limiter import limit_writes
from vendorflow.schemas.sharing import (
    NotificationResponse,
    RespondToShareRequest,
    SuccessResponse,
)

router = APIRouter()


@router.post("/{notification_id}/read", response_model=SuccessResponse)
@limit_writes
async def mark_notification_read(
    request: Request,
    notification_id: str,
    current_user_id: CurrentUserDep,
    notifications: NotificationEmitterDep,
):
    """Mark a notification read. Idempotent."""
    await notifications.mark_read(notification_id, user_id=current_user_id)
    return SuccessResponse()


@router.post("/{notification_id}/respond", response_model=NotificationResponse)
@limit_writes
async def respond_to_share(
    request: Request,
    notification_id: str,
    body: RespondToShareRequest,
    current_user_id: CurrentUserDep,
    service: SharingServiceDep,
):
    """Accept or reject a share request; returns the notification sent to the sharer."""
    response = await service.respond_to_share(notification_id, current_user_id, body.accept)
    return NotificationResponse.from_entity(response)
