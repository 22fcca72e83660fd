"""Repositories over the record store (one per table)."""

from vendorflow.infrastructure.persistence.repositories.base import BaseRepository
from vendorflow.infrastructure.persistence.repositories.document_directory import (
    DocumentDirectory,
)
from vendorflow.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from vendorflow.infrastructure.persistence.repositories.provenance_repo import (
    ProvenanceRepository,
)
from vendorflow.infrastructure.persistence.repositories.sharing_chain_repo import (
    SharingChainRepository,
)
from vendorflow.infrastructure.persistence.repositories.sharing_permission_repo import (
    SharingPermissionRepository,
)

__all__ = [
    "BaseRepository",
    "DocumentDirectory",
    "NotificationRepository",
    "ProvenanceRepository",
    "SharingChainRepository",
    "SharingPermissionRepository",
]
