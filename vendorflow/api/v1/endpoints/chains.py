"""Chains API: relay, token access, revocation, expiry sweep."""

from fastapi import APIRouter, Request

from vendorflow.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SharingServiceDep
from vendorflow.application.dtos.sharing import RelayRequest
from vendorflow.core.limiter import limit_token_access, limit_writes
from vendorflow.schemas.sharing import (
    AccessResponse,
    ExpireResponse,
    ProvenanceResponse,
    RelayDocumentRequest,
    RelayResponse,
    RevokeResponse,
    SharingChainResponse,
)

router = APIRouter()


@router.post("/relay", response_model=RelayResponse, status_code=201)
@limit_writes
async def relay_document(
    request: Request,
    body: RelayDocumentRequest,
    current_user_id: CurrentUserDep,
    service: SharingServiceDep,
):
    """Relay a received share (identified by its token) to another user."""
    outcome = await service.relay_document(
        RelayRequest(
            share_token=body.parent_token,
            from_user_id=current_user_id,
            to_user_id=body.to_user_id,
            permissions=body.permissions.to_rights(),
            share_reason=body.share_reason,
            expires_at=body.expires_at,
        )
    )
    return RelayResponse(
        chain=SharingChainResponse.model_validate(outcome.edge),
        share_link=outcome.share_link,
        provenance=ProvenanceResponse.model_validate(outcome.provenance),
        chain_path=outcome.chain_path,
    )


@router.get("/access/{token}", response_model=AccessResponse)
@limit_token_access
async def access_shared_document(
    request: Request,
    token: str,
    requested_by: OptionalUserDep,
    service: SharingServiceDep,
):
    """Resolve a share token to the document and its chain path."""
    result = await service.access_shared_document(token, requested_by=requested_by)
    return AccessResponse.from_result(result)


@router.post("/expire", response_model=ExpireResponse)
@limit_writes
async def expire_due_chains(
    request: Request,
    current_user_id: CurrentUserDep,
    service: SharingServiceDep,
):
    """Mark every active chain edge past its expiry as expired."""
    expired = await service.expire_due_edges()
    return ExpireResponse(expired_chain_ids=expired)


@router.post("/{chain_id}/revoke", response_model=RevokeResponse)
@limit_writes
async def revoke_chain(
    request: Request,
    chain_id: str,
    current_user_id: CurrentUserDep,
    service: SharingServiceDep,
):
    """Revoke a chain edge and everything relayed from it."""
    outcome = await service.revoke_chain(chain_id, revoked_by_user_id=current_user_id)
    return RevokeResponse(
        revoked_chain=SharingChainResponse.model_validate(outcome.edge),
        revoked_chain_ids=outcome.revoked_chain_ids,
    )
