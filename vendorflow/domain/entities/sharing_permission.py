"""Sharing permission domain entity.

A directed grant from one user to another, scoped to document types.
Grants are revoked, never deleted, so the table doubles as an audit trail.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from vendorflow.domain.enums import PermissionStatus
from vendorflow.domain.exceptions import ValidationException
from vendorflow.domain.value_objects.core import (
    ChainDepthLimit,
    DocumentTypeScope,
    ShareRights,
)


@dataclass
class SharingPermission:
    """Grant from granter to grantee. Validation runs on construction."""

    id: str
    granter_user_id: str
    grantee_user_id: str
    document_types: DocumentTypeScope
    can_relay: bool
    can_view_history: bool
    max_chain_depth: ChainDepthLimit
    status: PermissionStatus
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate grant rules. Raises ValidationException if invalid."""
        if not self.granter_user_id or not self.grantee_user_id:
            raise ValidationException("Granter and grantee are required", field="grantee_user_id")
        if self.granter_user_id == self.grantee_user_id:
            raise ValidationException("A user cannot grant sharing rights to themselves", field="grantee_user_id")

    @property
    def is_active(self) -> bool:
        return self.status == PermissionStatus.ACTIVE

    def covers(self, document_type: str) -> bool:
        """Return True when this grant is active and includes document_type (or ``all``)."""
        return self.is_active and self.document_types.covers(document_type)

    def share_ceiling(self) -> ShareRights:
        """Widest rights a share under this grant may carry."""
        return ShareRights(can_relay=self.can_relay, can_view=True, can_download=True)

    def revoke(self, at: datetime) -> bool:
        """Set status to revoked. Returns False (no-op) when already revoked."""
        if not self.is_active:
            return False
        self.status = PermissionStatus.REVOKED
        self.updated_at = at
        return True
