"""Domain enumerations for the sharing-chain core.

Enums represent fixed sets of domain values (document types, lifecycle
statuses, notification kinds). All are str-valued so they serialize as
plain strings in every storage backend.
"""

from enum import Enum


class DocumentType(str, Enum):
    """Vendor document categories a grant can be scoped to."""

    W9 = "w9"
    INSURANCE = "insurance"
    BANKING = "banking"
    LICENSE = "license"
    CERTIFICATE = "certificate"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid document type values as strings."""
        return [t.value for t in cls]


# Sentinel accepted in a grant's document_types meaning "every type".
ALL_DOCUMENT_TYPES = "all"


class PermissionStatus(str, Enum):
    """Sharing permission lifecycle. Grants are revoked, never deleted."""

    ACTIVE = "active"
    REVOKED = "revoked"


class ChainStatus(str, Enum):
    """Sharing-chain edge lifecycle.

    ACTIVE is the only state an edge is created in; REVOKED and EXPIRED
    are terminal.
    """

    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self is not ChainStatus.ACTIVE


class NotificationType(str, Enum):
    """Kinds of inbox entries produced by chain-mutating actions."""

    SHARE_REQUEST = "share_request"
    SHARE_ACCEPTED = "share_accepted"
    SHARE_REJECTED = "share_rejected"
    CHAIN_COMPLETE = "chain_complete"
    SHARE_REVOKED = "share_revoked"
