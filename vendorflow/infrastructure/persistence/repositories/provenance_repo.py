"""Document provenance repository."""

from __future__ import annotations

from typing import Any

from vendorflow.domain.entities import DocumentProvenance
from vendorflow.domain.exceptions import ResourceNotFoundException
from vendorflow.infrastructure.persistence.repositories.base import BaseRepository
from vendorflow.infrastructure.persistence.tables import DOCUMENT_PROVENANCE
from vendorflow.shared.utils.datetime import parse_datetime


class ProvenanceRepository(BaseRepository[DocumentProvenance]):
    """IProvenanceRepository on a record store."""

    table = DOCUMENT_PROVENANCE

    def _to_row(self, entity: DocumentProvenance) -> dict[str, Any]:
        return {
            "id": entity.id,
            "document_id": entity.document_id,
            "original_owner_id": entity.original_owner_id,
            "current_holder_id": entity.current_holder_id,
            "chain_depth": entity.chain_depth,
            "access_path": list(entity.access_path),
            "total_shares": entity.total_shares,
            "last_shared_at": entity.last_shared_at,
            "is_original": entity.is_original,
        }

    def _from_row(self, row: dict[str, Any]) -> DocumentProvenance:
        return DocumentProvenance(
            id=row["id"],
            document_id=row["document_id"],
            original_owner_id=row["original_owner_id"],
            current_holder_id=row["current_holder_id"],
            chain_depth=int(row["chain_depth"]),
            access_path=list(row["access_path"]),
            total_shares=int(row["total_shares"]),
            last_shared_at=parse_datetime(row.get("last_shared_at")),
            is_original=bool(row.get("is_original", True)),
        )

    async def get_by_document(self, document_id: str) -> DocumentProvenance | None:
        found = await self._find({"document_id": document_id}, limit=1)
        return found[0] if found else None

    async def save(self, provenance: DocumentProvenance) -> DocumentProvenance:
        provenance.validate()
        changes = {
            k: v
            for k, v in self._to_row(provenance).items()
            if k not in ("id", "document_id", "original_owner_id", "is_original")
        }
        updated = await self._update(provenance.id, changes)
        if updated is None:
            raise ResourceNotFoundException("document_provenance", provenance.document_id)
        return updated
