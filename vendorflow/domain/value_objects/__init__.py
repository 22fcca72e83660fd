"""Domain value objects and shared value types."""

from vendorflow.domain.value_objects.core import (
    UNLIMITED_DEPTH,
    ChainDepthLimit,
    DocumentTypeScope,
    ShareRights,
)

__all__ = [
    "UNLIMITED_DEPTH",
    "ChainDepthLimit",
    "DocumentTypeScope",
    "ShareRights",
]
