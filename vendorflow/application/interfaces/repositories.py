"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from vendorflow.application.dtos.sharing import DocumentRef
    from vendorflow.domain.entities import (
        DocumentProvenance,
        SharingChainEdge,
        SharingNotification,
        SharingPermission,
    )
    from vendorflow.domain.enums import ChainStatus


class ISharingPermissionRepository(Protocol):
    """Protocol for sharing permission repository (DIP)."""

    async def create(self, permission: SharingPermission) -> SharingPermission:
        """Persist a new grant."""

    async def get_by_id(self, permission_id: str) -> SharingPermission | None:
        """Return grant by ID."""

    async def save(self, permission: SharingPermission) -> SharingPermission:
        """Persist mutable fields of an existing grant."""

    async def list_for_user(self, user_id: str) -> list[SharingPermission]:
        """Return grants where user is granter or grantee (newest first)."""

    async def list_active_for_pair(
        self, granter_user_id: str, grantee_user_id: str
    ) -> list[SharingPermission]:
        """Return active grants from granter to grantee."""


class ISharingChainRepository(Protocol):
    """Protocol for sharing chain (edge) repository (DIP)."""

    async def create(self, edge: SharingChainEdge) -> SharingChainEdge:
        """Persist a new edge. Duplicate share_token raises ConflictException."""

    async def get_by_id(self, chain_id: str) -> SharingChainEdge | None:
        """Return edge by ID."""

    async def get_by_token(self, share_token: str) -> SharingChainEdge | None:
        """Return edge by share token."""

    async def list_by_document(self, document_id: str) -> list[SharingChainEdge]:
        """Return all edges of a document, oldest first."""

    async def list_children(self, parent_chain_id: str) -> list[SharingChainEdge]:
        """Return edges relayed directly from parent_chain_id."""

    async def list_by_sender(self, user_id: str) -> list[SharingChainEdge]:
        """Return edges the user created."""

    async def list_by_recipient(self, user_id: str) -> list[SharingChainEdge]:
        """Return edges the user received."""

    async def list_active(self) -> list[SharingChainEdge]:
        """Return every active edge."""

    async def update_status(
        self, chain_id: str, status: ChainStatus
    ) -> SharingChainEdge | None:
        """Set edge status; return updated edge or None if missing."""


class IProvenanceRepository(Protocol):
    """Protocol for document provenance repository (DIP)."""

    async def get_by_document(self, document_id: str) -> DocumentProvenance | None:
        """Return provenance for document."""

    async def create(self, provenance: DocumentProvenance) -> DocumentProvenance:
        """Persist a new provenance row."""

    async def save(self, provenance: DocumentProvenance) -> DocumentProvenance:
        """Persist mutable fields of existing provenance."""


class INotificationRepository(Protocol):
    """Protocol for sharing notification repository (DIP)."""

    async def create(self, notification: SharingNotification) -> SharingNotification:
        """Persist a new notification."""

    async def get_by_id(self, notification_id: str) -> SharingNotification | None:
        """Return notification by ID."""

    async def list_for_user(
        self, user_id: str, unread_only: bool = False
    ) -> list[SharingNotification]:
        """Return notifications addressed to user (newest first)."""

    async def mark_read(self, notification_id: str) -> SharingNotification | None:
        """Set is_read; return updated notification or None if missing."""


class IDocumentDirectory(Protocol):
    """Protocol for resolving documents owned by the host application (DIP)."""

    async def get(self, document_id: str) -> DocumentRef | None:
        """Return document reference or None."""
