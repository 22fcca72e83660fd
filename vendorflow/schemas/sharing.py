"""Sharing-chain API schemas (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from vendorflow.application.dtos.sharing import (
    AccessResult,
    ChainHistory,
    ChainVisualization,
    NotificationInbox,
)
from vendorflow.domain.entities import SharingNotification
from vendorflow.domain.enums import ChainStatus, NotificationType, PermissionStatus
from vendorflow.domain.value_objects import ChainDepthLimit, DocumentTypeScope, ShareRights


class CamelModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase in JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _unwrap_depth(v: Any) -> Any:
    return v.value if isinstance(v, ChainDepthLimit) else v


class ShareRightsBody(CamelModel):
    """Three-flag rights snapshot."""

    can_relay: bool = True
    can_view: bool = True
    can_download: bool = True

    def to_rights(self) -> ShareRights:
        return ShareRights(
            can_relay=self.can_relay,
            can_view=self.can_view,
            can_download=self.can_download,
        )


# ---- Requests ----


class ShareDocumentRequest(CamelModel):
    """Body for POST /documents/{id}/share. documentId, when sent, must match the path."""

    document_id: str | None = None
    to_user_id: str = Field(..., min_length=1, max_length=128)
    share_reason: str | None = Field(default=None, max_length=1000)
    permissions: ShareRightsBody = Field(default_factory=ShareRightsBody)
    expires_at: datetime | None = None


class RelayDocumentRequest(CamelModel):
    """Body for POST /chains/relay."""

    parent_token: str = Field(..., min_length=16, max_length=256)
    to_user_id: str = Field(..., min_length=1, max_length=128)
    share_reason: str | None = Field(default=None, max_length=1000)
    permissions: ShareRightsBody = Field(default_factory=ShareRightsBody)
    expires_at: datetime | None = None


class SharingPermissionCreate(CamelModel):
    """Body for POST /users/{id}/sharing-permissions (granter is the path user)."""

    granter_user_id: str | None = None
    grantee_user_id: str = Field(..., min_length=1, max_length=128)
    document_types: list[str] = Field(..., min_length=1)
    can_relay: bool = True
    can_view_history: bool = False
    max_chain_depth: int = Field(default=3, ge=-1)


class SharingPermissionUpdate(CamelModel):
    """Body for PUT /users/{id}/sharing-permissions/{permissionId}; omitted fields are kept."""

    document_types: list[str] | None = Field(default=None, min_length=1)
    can_relay: bool | None = None
    can_view_history: bool | None = None
    max_chain_depth: int | None = Field(default=None, ge=-1)


class RespondToShareRequest(CamelModel):
    accept: bool


# ---- Responses ----


class SharingChainResponse(CamelModel):
    """Chain edge. The share token is only handed out through shareLink."""

    id: str
    document_id: str
    from_user_id: str
    to_user_id: str
    parent_chain_id: str | None
    permissions: ShareRightsBody
    share_reason: str | None
    expires_at: datetime | None
    status: ChainStatus
    shared_at: datetime
    depth: int
    max_chain_depth: int

    normalize_depth = field_validator("max_chain_depth", mode="before")(_unwrap_depth)


class ProvenanceResponse(CamelModel):
    document_id: str
    original_owner_id: str
    current_holder_id: str
    chain_depth: int
    access_path: list[str]
    total_shares: int
    last_shared_at: datetime | None
    is_original: bool


class ShareResponse(CamelModel):
    chain: SharingChainResponse
    share_link: str
    provenance: ProvenanceResponse | None = None


class RelayResponse(ShareResponse):
    chain_path: list[str]


class DocumentResponse(CamelModel):
    id: str
    owner_user_id: str
    document_type: str
    file_name: str | None = None


class AccessResponse(CamelModel):
    document: DocumentResponse
    chain: SharingChainResponse
    chain_path: list[str]
    chain_depth: int

    @classmethod
    def from_result(cls, result: AccessResult) -> AccessResponse:
        return cls(
            document=DocumentResponse.model_validate(result.document),
            chain=SharingChainResponse.model_validate(result.edge),
            chain_path=result.chain_path,
            chain_depth=result.chain_depth,
        )


class VisualizationNodeResponse(CamelModel):
    id: str
    is_original_owner: bool
    is_current_holder: bool


class VisualizationEdgeResponse(CamelModel):
    id: str
    source: str
    target: str
    status: str
    depth: int
    shared_at: datetime


class VisualizationResponse(CamelModel):
    nodes: list[VisualizationNodeResponse]
    edges: list[VisualizationEdgeResponse]


class ChainHistoryResponse(CamelModel):
    chain_history: list[SharingChainResponse]
    provenance: ProvenanceResponse | None
    visualization_data: VisualizationResponse

    @classmethod
    def from_history(cls, history: ChainHistory) -> ChainHistoryResponse:
        visualization: ChainVisualization = history.visualization
        return cls(
            chain_history=[SharingChainResponse.model_validate(e) for e in history.chains],
            provenance=(
                ProvenanceResponse.model_validate(history.provenance)
                if history.provenance
                else None
            ),
            visualization_data=VisualizationResponse.model_validate(visualization),
        )


class RevokeResponse(CamelModel):
    revoked_chain: SharingChainResponse
    revoked_chain_ids: list[str]


class ExpireResponse(CamelModel):
    expired_chain_ids: list[str]


class SharingPermissionResponse(CamelModel):
    id: str
    granter_user_id: str
    grantee_user_id: str
    document_types: list[str]
    can_relay: bool
    can_view_history: bool
    max_chain_depth: int
    status: PermissionStatus
    created_at: datetime
    updated_at: datetime

    normalize_depth = field_validator("max_chain_depth", mode="before")(_unwrap_depth)

    @field_validator("document_types", mode="before")
    @classmethod
    def normalize_types(cls, v: Any) -> Any:
        return v.as_list() if isinstance(v, DocumentTypeScope) else v


class NotificationResponse(CamelModel):
    id: str
    from_user_id: str
    to_user_id: str
    type: NotificationType
    message: str
    document_id: str | None
    chain_id: str | None
    metadata: dict[str, Any]
    is_read: bool
    created_at: datetime | None

    @classmethod
    def from_entity(cls, n: SharingNotification) -> NotificationResponse:
        return cls(
            id=n.id,
            from_user_id=n.from_user_id,
            to_user_id=n.to_user_id,
            type=n.notification_type,
            message=n.message,
            document_id=n.document_id,
            chain_id=n.chain_id,
            metadata=n.metadata,
            is_read=n.is_read,
            created_at=n.created_at,
        )


class NotificationListResponse(CamelModel):
    notifications: list[NotificationResponse]
    unread_count: int

    @classmethod
    def from_inbox(cls, inbox: NotificationInbox) -> NotificationListResponse:
        return cls(
            notifications=[NotificationResponse.from_entity(n) for n in inbox.notifications],
            unread_count=inbox.unread_count,
        )


class SuccessResponse(CamelModel):
    success: bool = True


class SharingStatsResponse(CamelModel):
    user_id: str
    total_documents_shared: int
    total_active_chains: int
    total_recipients: int
    total_received: int
