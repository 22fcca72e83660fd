"""Document provenance domain entity.

One denormalized row per document summarizing who holds it and how it got
there. Created lazily on the first share and advanced once per edge.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from vendorflow.domain.exceptions import ValidationException


@dataclass
class DocumentProvenance:
    """Provenance summary. Invariant: chain_depth == len(access_path) - 1."""

    id: str
    document_id: str
    original_owner_id: str
    current_holder_id: str
    chain_depth: int
    access_path: list[str] = field(default_factory=list)
    total_shares: int = 0
    last_shared_at: datetime | None = None
    is_original: bool = True

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.access_path or self.access_path[0] != self.original_owner_id:
            raise ValidationException("Access path must start at the original owner", field="access_path")
        if self.chain_depth != len(self.access_path) - 1:
            raise ValidationException("Chain depth does not match access path", field="chain_depth")
        if self.total_shares < 0:
            raise ValidationException("Total shares cannot be negative", field="total_shares")

    @classmethod
    def start(cls, provenance_id: str, document_id: str, owner_id: str) -> DocumentProvenance:
        """Fresh record for a document that has never been shared."""
        return cls(
            id=provenance_id,
            document_id=document_id,
            original_owner_id=owner_id,
            current_holder_id=owner_id,
            chain_depth=0,
            access_path=[owner_id],
            total_shares=0,
            last_shared_at=None,
            is_original=True,
        )

    def advance(self, recipient_id: str, at: datetime) -> None:
        """Record one successful edge to recipient_id. No depth limits here."""
        self.access_path = [*self.access_path, recipient_id]
        self.current_holder_id = recipient_id
        self.chain_depth += 1
        self.total_shares += 1
        self.last_shared_at = at

    def fall_back_to(self, holder_id: str, revoked_holders: set[str]) -> bool:
        """Move the current holder back to holder_id after a revocation.

        Only acts when the current holder lost access. The access path is cut
        after the last occurrence of holder_id (or reset to the owner when it
        never appears), keeping the depth invariant. total_shares is untouched.
        """
        if self.current_holder_id not in revoked_holders:
            return False
        if holder_id in self.access_path:
            cut = len(self.access_path) - 1 - self.access_path[::-1].index(holder_id)
            self.access_path = self.access_path[: cut + 1]
        else:
            self.access_path = [self.original_owner_id]
        self.current_holder_id = self.access_path[-1]
        self.chain_depth = len(self.access_path) - 1
        return True
