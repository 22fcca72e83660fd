"""Sharing-chain edge domain entity.

One hop of a document's sharing tree: ``from_user_id`` handed the document
to ``to_user_id``. Root edges have no parent; relay edges point at the edge
they were relayed from. Everything except ``status`` is fixed at creation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from vendorflow.domain.enums import ChainStatus
from vendorflow.domain.exceptions import ValidationException
from vendorflow.domain.value_objects.core import ChainDepthLimit, ShareRights
from vendorflow.shared.utils.datetime import is_past


@dataclass
class SharingChainEdge:
    """Edge of the sharing forest.

    ``depth`` counts hops from the root share (root = 1). ``max_chain_depth``
    is the effective limit of the permission chain that produced this edge,
    captured at share time alongside the rights snapshot.
    """

    id: str
    document_id: str
    from_user_id: str
    to_user_id: str
    parent_chain_id: str | None
    share_token: str
    permissions: ShareRights
    share_reason: str | None
    expires_at: datetime | None
    status: ChainStatus
    shared_at: datetime
    depth: int
    max_chain_depth: ChainDepthLimit

    def __post_init__(self) -> None:
        if self.from_user_id == self.to_user_id:
            raise ValidationException("Cannot share a document with yourself", field="to_user_id")
        if self.depth < 1:
            raise ValidationException("Chain depth starts at 1", field="depth")
        if self.parent_chain_id is not None and self.parent_chain_id == self.id:
            raise ValidationException("An edge cannot be its own parent", field="parent_chain_id")

    @property
    def is_root(self) -> bool:
        return self.parent_chain_id is None

    def is_past_expiry(self, now: datetime | None = None) -> bool:
        return is_past(self.expires_at, now)

    def is_usable(self, now: datetime | None = None) -> bool:
        """Active and not past expires_at."""
        return self.status == ChainStatus.ACTIVE and not self.is_past_expiry(now)

    def reaches_limit(self) -> bool:
        """True when no further relay can fit under the chain's depth limit."""
        return not self.max_chain_depth.allows(self.depth + 1)

    def revoke(self) -> bool:
        """Transition active -> revoked. Terminal states are left alone (returns False)."""
        if self.status != ChainStatus.ACTIVE:
            return False
        self.status = ChainStatus.REVOKED
        return True

    def expire(self) -> bool:
        """Transition active -> expired. Terminal states are left alone (returns False)."""
        if self.status != ChainStatus.ACTIVE:
            return False
        self.status = ChainStatus.EXPIRED
        return True
