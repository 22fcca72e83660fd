"""Read-only view of the host application's documents table."""

from __future__ import annotations

from vendorflow.application.dtos.sharing import DocumentRef
from vendorflow.application.interfaces.record_store import IRecordStore
from vendorflow.infrastructure.persistence.tables import DOCUMENTS
from vendorflow.shared.utils.datetime import utc_now


class DocumentDirectory:
    """IDocumentDirectory on a record store."""

    def __init__(self, store: IRecordStore) -> None:
        self.store = store

    async def get(self, document_id: str) -> DocumentRef | None:
        row = await self.store.get(DOCUMENTS, document_id)
        if row is None:
            return None
        return DocumentRef(
            id=row["id"],
            owner_user_id=row["owner_user_id"],
            document_type=row["document_type"],
            file_name=row.get("file_name"),
        )

    async def register(
        self,
        document_id: str,
        owner_user_id: str,
        document_type: str,
        file_name: str | None = None,
    ) -> DocumentRef:
        """Add a document record (seeding the memory backend, fixtures)."""
        await self.store.insert(
            DOCUMENTS,
            {
                "id": document_id,
                "owner_user_id": owner_user_id,
                "document_type": document_type,
                "file_name": file_name,
                "created_at": utc_now(),
            },
        )
        return DocumentRef(document_id, owner_user_id, document_type, file_name)
