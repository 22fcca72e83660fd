"""Documents API: start a sharing chain, read a document's chain history."""

from fastapi import APIRouter, Request

from vendorflow.api.v1.dependencies import CurrentUserDep, SharingServiceDep
from vendorflow.application.dtos.sharing import ShareRequest
from vendorflow.core.limiter import limit_writes
from vendorflow.domain.exceptions import ValidationException
from vendorflow.schemas.sharing import (
    ChainHistoryResponse,
    ProvenanceResponse,
    ShareDocumentRequest,
    ShareResponse,
    SharingChainResponse,
)

router = APIRouter()


@router.post("/{document_id}/share", response_model=ShareResponse, status_code=201)
@limit_writes
async def share_document(
    request: Request,
    document_id: str,
    body: ShareDocumentRequest,
    current_user_id: CurrentUserDep,
    service: SharingServiceDep,
):
    """Share a document the caller owns with another user (root edge)."""
    if body.document_id is not None and body.document_id != document_id:
        raise ValidationException("documentId does not match the URL", field="document_id")
    outcome = await service.share_document(
        ShareRequest(
            document_id=document_id,
            from_user_id=current_user_id,
            to_user_id=body.to_user_id,
            permissions=body.permissions.to_rights(),
            share_reason=body.share_reason,
            expires_at=body.expires_at,
        )
    )
    return ShareResponse(
        chain=SharingChainResponse.model_validate(outcome.edge),
        share_link=outcome.share_link,
        provenance=ProvenanceResponse.model_validate(outcome.provenance),
    )


@router.get("/{document_id}/chain-history", response_model=ChainHistoryResponse)
async def get_chain_history(
    document_id: str,
    current_user_id: CurrentUserDep,
    service: SharingServiceDep,
):
    """All chains of a document with provenance and graph data.

    The caller must be the owner or hold a grant with canViewHistory.
    """
    history = await service.get_chain_history(document_id, requested_by=current_user_id)
    return ChainHistoryResponse.from_history(history)
