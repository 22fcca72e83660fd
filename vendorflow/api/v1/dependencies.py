"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the record store, caller identity and
application services. Services are built per request from the app-wide
record store and lock registry (set up in lifespan); routes depend only on
these dependencies, not on infrastructure directly.

Caller identity comes from the X-User-ID header (configurable); session
management belongs to the host application.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from vendorflow.application.interfaces.record_store import IRecordStore
from vendorflow.application.services import (
    ChainLedger,
    KeyedLockRegistry,
    NotificationEmitter,
    PermissionRegistry,
    ProvenanceTracker,
)
from vendorflow.application.use_cases.sharing import SharingChainService
from vendorflow.core.config import get_settings
from vendorflow.domain.exceptions import AuthorizationException
from vendorflow.infrastructure.persistence.repositories import (
    DocumentDirectory,
    NotificationRepository,
    ProvenanceRepository,
    SharingChainRepository,
    SharingPermissionRepository,
)
from vendorflow.shared.utils.generators import generate_share_token


def get_record_store(request: Request) -> IRecordStore:
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Record store is not initialized")
    return store


def get_lock_registry(request: Request) -> KeyedLockRegistry:
    locks = getattr(request.app.state, "locks", None)
    if locks is None:
        locks = KeyedLockRegistry()
        request.app.state.locks = locks
    return locks


def get_current_user_id(request: Request) -> str:
    """Caller id from the identity header; 401 when absent."""
    header = get_settings().user_id_header
    user_id = (request.headers.get(header) or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail=f"Missing {header} header")
    return user_id


def get_optional_user_id(request: Request) -> str | None:
    user_id = (request.headers.get(get_settings().user_id_header) or "").strip()
    return user_id or None


def require_path_user(
    user_id: str,
    current_user_id: Annotated[str, Depends(get_current_user_id)],
) -> str:
    """User-scoped routes (/users/{user_id}/...) only serve the caller's own data."""
    if user_id != current_user_id:
        raise AuthorizationException("user", "access")
    return user_id


StoreDep = Annotated[IRecordStore, Depends(get_record_store)]
LocksDep = Annotated[KeyedLockRegistry, Depends(get_lock_registry)]


def get_permission_registry(store: StoreDep, locks: LocksDep) -> PermissionRegistry:
    settings = get_settings()
    return PermissionRegistry(
        SharingPermissionRepository(store),
        store,
        locks,
        max_chain_depth_limit=settings.max_chain_depth_limit,
    )


def get_notification_emitter(store: StoreDep) -> NotificationEmitter:
    return NotificationEmitter(NotificationRepository(store))


def get_sharing_service(
    store: StoreDep,
    locks: LocksDep,
    permissions: Annotated[PermissionRegistry, Depends(get_permission_registry)],
    notifications: Annotated[NotificationEmitter, Depends(get_notification_emitter)],
) -> SharingChainService:
    settings = get_settings()
    ledger = ChainLedger(
        SharingChainRepository(store),
        token_factory=lambda: generate_share_token(settings.share_token_bytes),
        max_token_attempts=settings.share_token_max_attempts,
    )
    return SharingChainService(
        store=store,
        documents=DocumentDirectory(store),
        permissions=permissions,
        ledger=ledger,
        provenance=ProvenanceTracker(ProvenanceRepository(store)),
        notifications=notifications,
        locks=locks,
        share_link_base_url=settings.share_link_base_url,
        require_sharing_grant=settings.require_sharing_grant,
        default_max_chain_depth=settings.default_max_chain_depth,
    )


CurrentUserDep = Annotated[str, Depends(get_current_user_id)]
OptionalUserDep = Annotated[str | None, Depends(get_optional_user_id)]
PathUserDep = Annotated[str, Depends(require_path_user)]
PermissionRegistryDep = Annotated[PermissionRegistry, Depends(get_permission_registry)]
NotificationEmitterDep = Annotated[NotificationEmitter, Depends(get_notification_emitter)]
SharingServiceDep = Annotated[SharingChainService, Depends(get_sharing_service)]
