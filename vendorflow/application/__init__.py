"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (record stores, repositories).
"""

from vendorflow.application.interfaces import (
    IDocumentDirectory,
    INotificationRepository,
    IProvenanceRepository,
    IRecordStore,
    ISharingChainRepository,
    ISharingPermissionRepository,
)
from vendorflow.application.services import (
    ChainLedger,
    KeyedLockRegistry,
    NotificationEmitter,
    PermissionRegistry,
    ProvenanceTracker,
)
from vendorflow.application.use_cases import SharingChainService

__all__ = [
    "ChainLedger",
    "IDocumentDirectory",
    "INotificationRepository",
    "IProvenanceRepository",
    "IRecordStore",
    "ISharingChainRepository",
    "ISharingPermissionRepository",
    "KeyedLockRegistry",
    "NotificationEmitter",
    "PermissionRegistry",
    "ProvenanceTracker",
    "SharingChainService",
]
