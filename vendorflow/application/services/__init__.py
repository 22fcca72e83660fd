"""Application services for the sharing-chain core."""

from vendorflow.application.services.chain_ledger import ChainLedger
from vendorflow.application.services.keyed_locks import KeyedLockRegistry
from vendorflow.application.services.notification_emitter import NotificationEmitter
from vendorflow.application.services.permission_registry import PermissionRegistry
from vendorflow.application.services.provenance_tracker import ProvenanceTracker

__all__ = [
    "ChainLedger",
    "KeyedLockRegistry",
    "NotificationEmitter",
    "PermissionRegistry",
    "ProvenanceTracker",
]
