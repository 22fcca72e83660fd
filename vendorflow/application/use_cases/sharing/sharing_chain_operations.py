"""Sharing-chain operations: share, relay, access, history, revoke, respond, expire.

Coordinates the permission registry, chain ledger, provenance tracker and
notification emitter. Every chain mutation holds the document's lock and
runs inside one store transaction, so ledger, provenance and notification
writes land together or not at all.
"""

from __future__ import annotations

from datetime import datetime

from vendorflow.application.dtos.sharing import (
    AccessResult,
    ChainHistory,
    DocumentRef,
    RelayRequest,
    RevokeOutcome,
    ShareOutcome,
    ShareRequest,
    SharingStats,
)
from vendorflow.application.interfaces.record_store import IRecordStore
from vendorflow.application.interfaces.repositories import IDocumentDirectory
from vendorflow.application.services.chain_ledger import ChainLedger, mask_token
from vendorflow.application.services.keyed_locks import KeyedLockRegistry
from vendorflow.application.services.notification_emitter import NotificationEmitter
from vendorflow.application.services.permission_registry import PermissionRegistry
from vendorflow.application.services.provenance_tracker import ProvenanceTracker
from vendorflow.application.use_cases.sharing.chain_visualization import (
    build_chain_visualization,
)
from vendorflow.domain.entities import (
    DocumentProvenance,
    SharingChainEdge,
    SharingNotification,
)
from vendorflow.domain.enums import ChainStatus, NotificationType
from vendorflow.domain.exceptions import (
    AuthorizationException,
    DepthExceededException,
    ResourceNotFoundException,
    ShareExpiredException,
    ValidationException,
)
from vendorflow.domain.value_objects import ChainDepthLimit
from vendorflow.shared.telemetry.logging import get_logger
from vendorflow.shared.telemetry.tracing import traced
from vendorflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class SharingChainService:
    """Entry point for every sharing-chain use case."""

    def __init__(
        self,
        store: IRecordStore,
        documents: IDocumentDirectory,
        permissions: PermissionRegistry,
        ledger: ChainLedger,
        provenance: ProvenanceTracker,
        notifications: NotificationEmitter,
        locks: KeyedLockRegistry,
        share_link_base_url: str = "http://localhost:5000",
        require_sharing_grant: bool = True,
        default_max_chain_depth: int = 3,
    ) -> None:
        self.store = store
        self.documents = documents
        self.permissions = permissions
        self.ledger = ledger
        self.provenance = provenance
        self.notifications = notifications
        self.locks = locks
        self.share_link_base_url = share_link_base_url.rstrip("/")
        self.require_sharing_grant = require_sharing_grant
        self.default_max_chain_depth = ChainDepthLimit(default_max_chain_depth)

    def share_link(self, share_token: str) -> str:
        return f"{self.share_link_base_url}/shared/{share_token}"

    async def _document(self, document_id: str) -> DocumentRef:
        document = await self.documents.get(document_id)
        if document is None:
            raise ResourceNotFoundException("document", document_id)
        return document

    @traced("sharing.share_document")
    async def share_document(self, request: ShareRequest) -> ShareOutcome:
        """Start a chain: document owner shares with a recipient.

        The owner needs an active grant to the recipient covering the
        document type (unless grants are not required). The grant caps the
        recipient's relay right and the chain's depth.
        """
        if request.from_user_id == request.to_user_id:
            raise ValidationException("Cannot share a document with yourself", field="to_user_id")
        document = await self._document(request.document_id)
        if document.owner_user_id != request.from_user_id:
            raise AuthorizationException(
                "document",
                "share",
                "Only the document owner can start a sharing chain; relay a received share instead",
            )

        rights = request.permissions
        grant = await self.permissions.get_active_grant(request.from_user_id, request.to_user_id)
        if grant is not None:
            if not grant.covers(document.document_type):
                raise AuthorizationException(
                    "document",
                    "share",
                    f"Sharing permission does not cover {document.document_type} documents",
                )
            rights = rights.clamp_to(grant.share_ceiling())
            depth_limit = grant.max_chain_depth
        elif self.require_sharing_grant:
            raise AuthorizationException(
                "document", "share", "No active sharing permission for this recipient"
            )
        else:
            depth_limit = self.default_max_chain_depth

        async with self.locks.document(document.id):
            async with self.store.transaction():
                edge = await self.ledger.create_root_edge(
                    document_id=document.id,
                    from_user_id=request.from_user_id,
                    to_user_id=request.to_user_id,
                    permissions=rights,
                    max_chain_depth=depth_limit,
                    share_reason=request.share_reason,
                    expires_at=request.expires_at,
                )
                provenance = await self.provenance.on_root_share(
                    document.id, document.owner_user_id, request.to_user_id, edge.shared_at
                )
                await self.notifications.notify(
                    from_user_id=request.from_user_id,
                    to_user_id=request.to_user_id,
                    notification_type=NotificationType.SHARE_REQUEST,
                    message=f"A {document.document_type} document was shared with you",
                    document_id=document.id,
                    chain_id=edge.id,
                    metadata={
                        "shareReason": request.share_reason,
                        "depth": edge.depth,
                        "shareLink": self.share_link(edge.share_token),
                    },
                )
                complete = await self._notify_if_complete(edge, provenance.original_owner_id)

        logger.info(
            "Document %s shared by %s with %s (chain %s)",
            document.id,
            request.from_user_id,
            request.to_user_id,
            edge.id,
        )
        return ShareOutcome(
            edge=edge,
            provenance=provenance,
            share_link=self.share_link(edge.share_token),
            chain_path=[request.from_user_id, request.to_user_id],
            chain_complete=complete,
        )

    @traced("sharing.relay_document")
    async def relay_document(self, request: RelayRequest) -> ShareOutcome:
        """Pass a received share on to another user.

        Rights are narrowed to the parent's; the depth limit is the parent's,
        tightened by any grant the relayer holds toward the new recipient.
        """
        if request.from_user_id == request.to_user_id:
            raise ValidationException("Cannot share a document with yourself", field="to_user_id")
        parent = await self.ledger.get_by_token(request.share_token)
        if parent is None or not parent.is_usable():
            raise ResourceNotFoundException("sharing_chain", mask_token(request.share_token))
        if parent.to_user_id != request.from_user_id:
            raise AuthorizationException(
                "sharing_chain", "relay", "Only the recipient of a share can relay it"
            )
        if not parent.permissions.can_relay:
            raise AuthorizationException(
                "sharing_chain", "relay", "This share does not allow relaying"
            )

        rights = request.permissions.clamp_to(parent.permissions)
        depth_limit = parent.max_chain_depth
        hop_grant = await self.permissions.get_active_grant(
            request.from_user_id, request.to_user_id
        )
        if hop_grant is not None:
            rights = rights.clamp_to(hop_grant.share_ceiling())
            depth_limit = depth_limit.tighten(hop_grant.max_chain_depth)
        new_depth = parent.depth + 1
        if not depth_limit.allows(new_depth):
            raise DepthExceededException(parent.document_id, new_depth, depth_limit.value)

        async with self.locks.document(parent.document_id):
            async with self.store.transaction():
                edge = await self.ledger.create_relay_edge(
                    parent_edge_id=parent.id,
                    from_user_id=request.from_user_id,
                    to_user_id=request.to_user_id,
                    permissions=rights,
                    max_chain_depth=depth_limit,
                    share_reason=request.share_reason,
                    expires_at=request.expires_at,
                )
                provenance = await self.provenance.advance(
                    edge.document_id, request.to_user_id, edge.shared_at
                )
                await self.notifications.notify(
                    from_user_id=request.from_user_id,
                    to_user_id=request.to_user_id,
                    notification_type=NotificationType.SHARE_REQUEST,
                    message="A document was relayed to you",
                    document_id=edge.document_id,
                    chain_id=edge.id,
                    metadata={
                        "shareReason": request.share_reason,
                        "depth": edge.depth,
                        "parentChainId": parent.id,
                        "shareLink": self.share_link(edge.share_token),
                    },
                )
                complete = await self._notify_if_complete(edge, provenance.original_owner_id)
                chain_path = await self.ledger.chain_path(edge)

        logger.info(
            "Chain %s relayed by %s to %s at depth %d (chain %s)",
            parent.id,
            request.from_user_id,
            request.to_user_id,
            edge.depth,
            edge.id,
        )
        return ShareOutcome(
            edge=edge,
            provenance=provenance,
            share_link=self.share_link(edge.share_token),
            chain_path=chain_path,
            chain_complete=complete,
        )

    async def _notify_if_complete(self, edge: SharingChainEdge, owner_id: str) -> bool:
        """Tell the original owner when edge used up the chain's depth."""
        if not edge.reaches_limit():
            return False
        if owner_id != edge.from_user_id:
            await self.notifications.notify(
                from_user_id=edge.from_user_id,
                to_user_id=owner_id,
                notification_type=NotificationType.CHAIN_COMPLETE,
                message=f"Your document reached its maximum sharing depth ({edge.depth})",
                document_id=edge.document_id,
                chain_id=edge.id,
                metadata={"depth": edge.depth, "holder": edge.to_user_id},
            )
        return True

    @traced("sharing.access_shared_document")
    async def access_shared_document(
        self, share_token: str, requested_by: str | None = None
    ) -> AccessResult:
        """Resolve a share token to the document, its edge and chain path.

        requested_by is the caller when known. Link access is otherwise
        anonymous and is logged as such.
        """
        edge = await self.ledger.get_by_token(share_token)
        if edge is None:
            raise ResourceNotFoundException("sharing_chain", mask_token(share_token))
        if edge.status != ChainStatus.ACTIVE:
            raise ShareExpiredException(edge.id, edge.status.value)
        if edge.is_past_expiry():
            raise ShareExpiredException(edge.id, "expired")
        if not edge.permissions.can_view:
            raise AuthorizationException("sharing_chain", "view")
        lineage = await self.ledger.ancestry(edge)
        for ancestor in lineage:
            if not ancestor.is_usable():
                raise ShareExpiredException(edge.id, ancestor.status.value)
        document = await self._document(edge.document_id)
        logger.info("Share %s accessed by %s", edge.id, requested_by or "anonymous")
        return AccessResult(
            document=document,
            edge=edge,
            chain_path=[lineage[0].from_user_id, *(e.to_user_id for e in lineage)],
            chain_depth=edge.depth,
        )

    @traced("sharing.get_chain_history")
    async def get_chain_history(self, document_id: str, requested_by: str) -> ChainHistory:
        """Full history of a document's chains with provenance and graph.

        requested_by must be the owner, the original owner or a recipient
        whose sharer granted canViewHistory for the document type.
        """
        document = await self._document(document_id)
        provenance = await self.provenance.get(document_id)
        await self._authorize_history(document, requested_by, provenance)
        edges = await self.ledger.get_history(document_id)
        return ChainHistory(
            document_id=document_id,
            chains=edges,
            provenance=provenance,
            visualization=build_chain_visualization(edges, provenance),
        )

    async def _authorize_history(
        self,
        document: DocumentRef,
        user_id: str,
        provenance: DocumentProvenance | None,
    ) -> None:
        if user_id == document.owner_user_id:
            return
        if provenance is not None and user_id == provenance.original_owner_id:
            return
        for edge in await self.ledger.received_by(user_id):
            if edge.document_id != document.id or edge.status != ChainStatus.ACTIVE:
                continue
            grant = await self.permissions.get_active_grant(edge.from_user_id, user_id)
            if grant is not None and grant.can_view_history and grant.covers(document.document_type):
                return
        raise AuthorizationException("document", "view_history")

    @traced("sharing.revoke_chain")
    async def revoke_chain(self, chain_id: str, revoked_by_user_id: str) -> RevokeOutcome:
        """Revoke an edge and everything relayed from it.

        Allowed for the edge's sharer and anyone upstream of it. Only the
        immediately-downstream holders hear about it: the recipient of the
        revoked edge and the recipients of its direct child edges, each once.
        Deeper descendants lose access without a notice, and the revoker is
        never notified.
        """
        edge = await self.ledger.get(chain_id)
        path = await self.ledger.chain_path(edge)
        if revoked_by_user_id not in path[:-1]:
            raise AuthorizationException("sharing_chain", "revoke")

        async with self.locks.document(edge.document_id):
            async with self.store.transaction():
                revoked = await self.ledger.revoke(chain_id)
                if revoked:
                    await self.provenance.on_revoke(
                        edge.document_id,
                        edge.from_user_id,
                        {e.to_user_id for e in revoked},
                    )
                    await self._notify_revoked(edge, revoked, revoked_by_user_id)
                edge = await self.ledger.get(chain_id)

        if revoked:
            logger.info(
                "Chain %s revoked by %s (%d edge(s))", chain_id, revoked_by_user_id, len(revoked)
            )
        return RevokeOutcome(edge=edge, revoked_chain_ids=[e.id for e in revoked])

    async def _notify_revoked(
        self, edge: SharingChainEdge, revoked: list[SharingChainEdge], revoked_by: str
    ) -> None:
        revoked_ids = {e.id for e in revoked}
        targets: list[tuple[str, str]] = []
        if edge.id in revoked_ids:
            targets.append((edge.to_user_id, edge.id))
        for child in revoked:
            if child.parent_chain_id == edge.id:
                targets.append((child.to_user_id, child.id))
        notified: set[str] = set()
        for user_id, target_chain_id in targets:
            if user_id == revoked_by or user_id in notified:
                continue
            notified.add(user_id)
            await self.notifications.notify(
                from_user_id=revoked_by,
                to_user_id=user_id,
                notification_type=NotificationType.SHARE_REVOKED,
                message="Access to a shared document was revoked",
                document_id=edge.document_id,
                chain_id=target_chain_id,
                metadata={"revokedChainId": edge.id},
            )

    @traced("sharing.respond_to_share")
    async def respond_to_share(
        self, notification_id: str, user_id: str, accept: bool
    ) -> SharingNotification:
        """Accept or reject a share request from the recipient's inbox.

        Rejecting revokes the edge (and anything relayed from it). Either
        way the sharer gets a share_accepted or share_rejected notification.
        """
        request = await self.notifications.get(notification_id)
        if request.to_user_id != user_id:
            raise AuthorizationException("sharing_notification", "respond")
        if request.notification_type != NotificationType.SHARE_REQUEST or request.chain_id is None:
            raise ValidationException("Only share requests can be answered", field="notification_type")
        edge = await self.ledger.get(request.chain_id)

        async with self.locks.document(edge.document_id):
            async with self.store.transaction():
                if await self.notifications.find_response(request) is not None:
                    raise ValidationException(
                        "Share request was already answered", field="notification_id"
                    )
                await self.notifications.mark_read(notification_id)
                revoked: list[SharingChainEdge] = []
                if not accept:
                    revoked = await self.ledger.revoke(edge.id)
                    if revoked:
                        await self.provenance.on_revoke(
                            edge.document_id, edge.from_user_id, {e.to_user_id for e in revoked}
                        )
                        await self._notify_revoked(edge, revoked, user_id)
                response = await self.notifications.notify(
                    from_user_id=user_id,
                    to_user_id=request.from_user_id,
                    notification_type=(
                        NotificationType.SHARE_ACCEPTED if accept else NotificationType.SHARE_REJECTED
                    ),
                    message="Your share was accepted" if accept else "Your share was declined",
                    document_id=edge.document_id,
                    chain_id=edge.id,
                    metadata={"requestId": notification_id},
                )

        logger.info(
            "Share %s %s by %s", edge.id, "accepted" if accept else "rejected", user_id
        )
        return response

    @traced("sharing.expire_due_edges")
    async def expire_due_edges(self, now: datetime | None = None) -> list[str]:
        """Mark active edges past their expires_at as expired. Returns their ids."""
        now = now or utc_now()
        expired: list[str] = []
        for edge in await self.ledger.list_due_for_expiry(now):
            async with self.locks.document(edge.document_id):
                updated = await self.ledger.expire(edge.id)
            if updated is not None:
                expired.append(updated.id)
        if expired:
            logger.info("Expired %d sharing chain edge(s)", len(expired))
        return expired

    async def get_sharing_stats(self, user_id: str) -> SharingStats:
        sent = await self.ledger.sent_by(user_id)
        received = await self.ledger.received_by(user_id)
        return SharingStats(
            user_id=user_id,
            total_documents_shared=len({e.document_id for e in sent}),
            total_active_chains=sum(1 for e in sent if e.status == ChainStatus.ACTIVE),
            total_recipients=len({e.to_user_id for e in sent}),
            total_received=len(received),
        )
