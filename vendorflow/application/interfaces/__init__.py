"""Application interfaces (ports) for dependency inversion."""

from vendorflow.application.interfaces.record_store import IRecordStore
from vendorflow.application.interfaces.repositories import (
    IDocumentDirectory,
    INotificationRepository,
    IProvenanceRepository,
    ISharingChainRepository,
    ISharingPermissionRepository,
)

__all__ = [
    "IDocumentDirectory",
    "INotificationRepository",
    "IProvenanceRepository",
    "IRecordStore",
    "ISharingChainRepository",
    "ISharingPermissionRepository",
]
