"""DTOs for sharing-chain use cases (no dependency on ORM or HTTP schemas)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vendorflow.domain.entities import (
        DocumentProvenance,
        SharingChainEdge,
        SharingNotification,
    )
    from vendorflow.domain.value_objects import ShareRights


@dataclass(frozen=True)
class DocumentRef:
    """Read-only view of a document owned by the host application."""

    id: str
    owner_user_id: str
    document_type: str
    file_name: str | None = None


@dataclass(frozen=True)
class ShareRequest:
    """Input for a root share (owner -> recipient)."""

    document_id: str
    from_user_id: str
    to_user_id: str
    permissions: ShareRights
    share_reason: str | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True)
class RelayRequest:
    """Input for relaying a received share onward."""

    share_token: str
    from_user_id: str
    to_user_id: str
    permissions: ShareRights
    share_reason: str | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True)
class ShareOutcome:
    """Result of share/relay: the new edge, updated provenance, and link."""

    edge: SharingChainEdge
    provenance: DocumentProvenance
    share_link: str
    chain_path: list[str] = field(default_factory=list)
    chain_complete: bool = False


@dataclass(frozen=True)
class RevokeOutcome:
    """Revoked edge plus every edge id whose status actually changed."""

    edge: SharingChainEdge
    revoked_chain_ids: list[str]


@dataclass(frozen=True)
class AccessResult:
    """What a share-token holder may see."""

    document: DocumentRef
    edge: SharingChainEdge
    chain_path: list[str]
    chain_depth: int


@dataclass(frozen=True)
class VisualizationNode:
    id: str
    is_original_owner: bool
    is_current_holder: bool


@dataclass(frozen=True)
class VisualizationEdge:
    id: str
    source: str
    target: str
    status: str
    depth: int
    shared_at: datetime


@dataclass(frozen=True)
class ChainVisualization:
    """Node/edge graph of a document's sharing tree, for rendering."""

    nodes: list[VisualizationNode] = field(default_factory=list)
    edges: list[VisualizationEdge] = field(default_factory=list)


@dataclass(frozen=True)
class ChainHistory:
    """All edges of a document (oldest first), its provenance, and the graph."""

    document_id: str
    chains: list[SharingChainEdge]
    provenance: DocumentProvenance | None
    visualization: ChainVisualization


@dataclass(frozen=True)
class NotificationInbox:
    notifications: list[SharingNotification]
    unread_count: int


@dataclass(frozen=True)
class SharingStats:
    """Dashboard counters for one user."""

    user_id: str
    total_documents_shared: int
    total_active_chains: int
    total_recipients: int
    total_received: int
