"""Provenance tracker: one summary row per shared document."""

from __future__ import annotations

from datetime import datetime

from vendorflow.application.interfaces.repositories import IProvenanceRepository
from vendorflow.domain.entities import DocumentProvenance
from vendorflow.domain.exceptions import ResourceNotFoundException
from vendorflow.shared.utils.generators import generate_cuid


class ProvenanceTracker:
    """Create and advance document provenance. Enforces no depth limits itself."""

    def __init__(self, provenance_repo: IProvenanceRepository) -> None:
        self._repo = provenance_repo

    async def get(self, document_id: str) -> DocumentProvenance | None:
        return await self._repo.get_by_document(document_id)

    async def on_root_share(
        self, document_id: str, owner_id: str, recipient_id: str, at: datetime
    ) -> DocumentProvenance:
        """Create provenance on the document's first share, then advance to recipient."""
        provenance = await self._repo.get_by_document(document_id)
        if provenance is None:
            provenance = await self._repo.create(
                DocumentProvenance.start(generate_cuid(), document_id, owner_id)
            )
        provenance.advance(recipient_id, at)
        return await self._repo.save(provenance)

    async def advance(
        self, document_id: str, recipient_id: str, at: datetime
    ) -> DocumentProvenance:
        """Append recipient_id to the access path for a relay."""
        provenance = await self._repo.get_by_document(document_id)
        if provenance is None:
            raise ResourceNotFoundException("document_provenance", document_id)
        provenance.advance(recipient_id, at)
        return await self._repo.save(provenance)

    async def on_revoke(
        self, document_id: str, retained_holder_id: str, revoked_holder_ids: set[str]
    ) -> DocumentProvenance | None:
        """Move the current holder back to retained_holder_id if it lost access."""
        provenance = await self._repo.get_by_document(document_id)
        if provenance is None:
            return None
        if provenance.fall_back_to(retained_holder_id, revoked_holder_ids):
            provenance = await self._repo.save(provenance)
        return provenance
