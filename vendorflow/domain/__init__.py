"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from vendorflow.domain.entities import (
    DocumentProvenance,
    SharingChainEdge,
    SharingNotification,
    SharingPermission,
)
from vendorflow.domain.enums import (
    ALL_DOCUMENT_TYPES,
    ChainStatus,
    DocumentType,
    NotificationType,
    PermissionStatus,
)
from vendorflow.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    DepthExceededException,
    ResourceNotFoundException,
    ShareExpiredException,
    StorageBackendException,
    ValidationException,
    VendorFlowException,
)
from vendorflow.domain.value_objects import (
    UNLIMITED_DEPTH,
    ChainDepthLimit,
    DocumentTypeScope,
    ShareRights,
)

__all__ = [
    # Entities
    "DocumentProvenance",
    "SharingChainEdge",
    "SharingNotification",
    "SharingPermission",
    # Enums
    "ALL_DOCUMENT_TYPES",
    "ChainStatus",
    "DocumentType",
    "NotificationType",
    "PermissionStatus",
    # Exceptions
    "AuthorizationException",
    "ConflictException",
    "DepthExceededException",
    "ResourceNotFoundException",
    "ShareExpiredException",
    "StorageBackendException",
    "ValidationException",
    "VendorFlowException",
    # Value objects
    "UNLIMITED_DEPTH",
    "ChainDepthLimit",
    "DocumentTypeScope",
    "ShareRights",
]
