"""Sharing permission registry: directed grants between users.

Grants decide who may start a sharing chain with whom, for which document
types, whether recipients may relay, and how deep the chain may go.
"""

from __future__ import annotations

from collections.abc import Iterable

from vendorflow.application.interfaces.record_store import IRecordStore
from vendorflow.application.interfaces.repositories import ISharingPermissionRepository
from vendorflow.application.services.keyed_locks import KeyedLockRegistry
from vendorflow.domain.entities import SharingPermission
from vendorflow.domain.enums import PermissionStatus
from vendorflow.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from vendorflow.domain.value_objects import UNLIMITED_DEPTH, ChainDepthLimit, DocumentTypeScope
from vendorflow.shared.telemetry.logging import get_logger
from vendorflow.shared.utils.datetime import utc_now
from vendorflow.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


def _scope(document_types: Iterable[str]) -> DocumentTypeScope:
    try:
        return DocumentTypeScope.of(document_types)
    except ValueError as e:
        raise ValidationException(str(e), field="document_types") from e


class PermissionRegistry:
    """Grant, update, revoke and look up sharing permissions."""

    def __init__(
        self,
        permission_repo: ISharingPermissionRepository,
        store: IRecordStore,
        locks: KeyedLockRegistry,
        max_chain_depth_limit: int = 10,
    ) -> None:
        self._repo = permission_repo
        self._store = store
        self._locks = locks
        self._max_depth_limit = max_chain_depth_limit

    def _depth(self, value: int) -> ChainDepthLimit:
        if value != UNLIMITED_DEPTH and not 1 <= value <= self._max_depth_limit:
            raise ValidationException(
                f"max_chain_depth must be -1 or between 1 and {self._max_depth_limit}",
                field="max_chain_depth",
            )
        return ChainDepthLimit(value)

    async def grant(
        self,
        granter_user_id: str,
        grantee_user_id: str,
        document_types: Iterable[str],
        can_relay: bool = True,
        can_view_history: bool = False,
        max_chain_depth: int = 3,
    ) -> SharingPermission:
        """Create an active grant. An existing active grant for the same pair is revoked first."""
        now = utc_now()
        permission = SharingPermission(
            id=generate_cuid(),
            granter_user_id=granter_user_id,
            grantee_user_id=grantee_user_id,
            document_types=_scope(document_types),
            can_relay=can_relay,
            can_view_history=can_view_history,
            max_chain_depth=self._depth(max_chain_depth),
            status=PermissionStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        async with self._locks.grant_pair(granter_user_id, grantee_user_id):
            async with self._store.transaction():
                superseded = await self._repo.list_active_for_pair(
                    granter_user_id, grantee_user_id
                )
                for existing in superseded:
                    existing.revoke(now)
                    await self._repo.save(existing)
                created = await self._repo.create(permission)
        logger.info(
            "Sharing permission %s granted by %s to %s (superseded %d)",
            created.id,
            granter_user_id,
            grantee_user_id,
            len(superseded),
        )
        return created

    async def get(self, permission_id: str) -> SharingPermission:
        permission = await self._repo.get_by_id(permission_id)
        if permission is None:
            raise ResourceNotFoundException("sharing_permission", permission_id)
        return permission

    async def update(
        self,
        permission_id: str,
        acting_user_id: str,
        *,
        document_types: Iterable[str] | None = None,
        can_relay: bool | None = None,
        can_view_history: bool | None = None,
        max_chain_depth: int | None = None,
    ) -> SharingPermission:
        """Change an active grant's terms. Only the granter may update.

        Edges already created keep their rights snapshot; only future shares
        see the new terms.
        """
        permission = await self.get(permission_id)
        if permission.granter_user_id != acting_user_id:
            raise AuthorizationException("sharing_permission", "update")
        if not permission.is_active:
            raise ValidationException("Revoked permissions cannot be updated", field="status")
        if document_types is not None:
            permission.document_types = _scope(document_types)
        if can_relay is not None:
            permission.can_relay = can_relay
        if can_view_history is not None:
            permission.can_view_history = can_view_history
        if max_chain_depth is not None:
            permission.max_chain_depth = self._depth(max_chain_depth)
        permission.updated_at = utc_now()
        permission = await self._repo.save(permission)
        logger.info("Sharing permission %s updated by %s", permission_id, acting_user_id)
        return permission

    async def revoke(
        self, permission_id: str, acting_user_id: str | None = None
    ) -> SharingPermission:
        """Set status to revoked. Idempotent. When acting_user_id is given it must be the granter."""
        permission = await self.get(permission_id)
        if acting_user_id is not None and permission.granter_user_id != acting_user_id:
            raise AuthorizationException("sharing_permission", "revoke")
        if permission.revoke(utc_now()):
            permission = await self._repo.save(permission)
            logger.info("Sharing permission %s revoked", permission_id)
        return permission

    async def find(self, user_id: str) -> list[SharingPermission]:
        """All grants (any status) where user is granter or grantee."""
        return await self._repo.list_for_user(user_id)

    async def get_active_grant(
        self, granter_user_id: str, grantee_user_id: str
    ) -> SharingPermission | None:
        """Newest active grant from granter to grantee, if any."""
        grants = await self._repo.list_active_for_pair(granter_user_id, grantee_user_id)
        if not grants:
            return None
        return max(grants, key=lambda g: g.created_at)

    async def is_authorized(
        self, granter_user_id: str, grantee_user_id: str, document_type: str
    ) -> bool:
        """True when an active grant from granter to grantee covers document_type."""
        grant = await self.get_active_grant(granter_user_id, grantee_user_id)
        return grant is not None and grant.covers(document_type)
