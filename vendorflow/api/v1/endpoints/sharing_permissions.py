"""Sharing permissions API: a user's grants (as granter or grantee)."""

from fastapi import APIRouter, Request

from vendorflow.api.v1.dependencies import PathUserDep, PermissionRegistryDep
from vendorflow.core.limiter import limit_writes
from vendorflow.domain.exceptions import AuthorizationException
from vendorflow.schemas.sharing import (
    SharingPermissionCreate,
    SharingPermissionResponse,
    SharingPermissionUpdate,
    SuccessResponse,
)

router = APIRouter()


@router.get("/{user_id}/sharing-permissions", response_model=list[SharingPermissionResponse])
async def list_sharing_permissions(
    user_id: PathUserDep,
    registry: PermissionRegistryDep,
):
    """Grants where the user is granter or grantee, newest first."""
    permissions = await registry.find(user_id)
    return [SharingPermissionResponse.model_validate(p) for p in permissions]


@router.post(
    "/{user_id}/sharing-permissions",
    response_model=SharingPermissionResponse,
    status_code=201,
)
@limit_writes
async def grant_sharing_permission(
    request: Request,
    user_id: PathUserDep,
    body: SharingPermissionCreate,
    registry: PermissionRegistryDep,
):
    """Grant sharing rights to another user. Replaces any active grant for the pair."""
    if body.granter_user_id is not None and body.granter_user_id != user_id:
        raise AuthorizationException("sharing_permission", "grant")
    permission = await registry.grant(
        granter_user_id=user_id,
        grantee_user_id=body.grantee_user_id,
        document_types=body.document_types,
        can_relay=body.can_relay,
        can_view_history=body.can_view_history,
        max_chain_depth=body.max_chain_depth,
    )
    return SharingPermissionResponse.model_validate(permission)


@router.put(
    "/{user_id}/sharing-permissions/{permission_id}",
    response_model=SharingPermissionResponse,
)
@limit_writes
async def update_sharing_permission(
    request: Request,
    user_id: PathUserDep,
    permission_id: str,
    body: SharingPermissionUpdate,
    registry: PermissionRegistryDep,
):
    """Change the terms of an active grant (granter only)."""
    permission = await registry.update(
        permission_id,
        user_id,
        document_types=body.document_types,
        can_relay=body.can_relay,
        can_view_history=body.can_view_history,
        max_chain_depth=body.max_chain_depth,
    )
    return SharingPermissionResponse.model_validate(permission)


@router.delete(
    "/{user_id}/sharing-permissions/{permission_id}",
    response_model=SuccessResponse,
)
@limit_writes
async def revoke_sharing_permission(
    request: Request,
    user_id: PathUserDep,
    permission_id: str,
    registry: PermissionRegistryDep,
):
    """Revoke a grant (granter only). Existing chains keep their snapshot."""
    await registry.revoke(permission_id, acting_user_id=user_id)
    return SuccessResponse()
