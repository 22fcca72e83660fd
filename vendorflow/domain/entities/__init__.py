"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from vendorflow.domain.entities.notification import SharingNotification
from vendorflow.domain.entities.provenance import DocumentProvenance
from vendorflow.domain.entities.sharing_chain import SharingChainEdge
from vendorflow.domain.entities.sharing_permission import SharingPermission

__all__ = [
    "DocumentProvenance",
    "SharingChainEdge",
    "SharingNotification",
    "SharingPermission",
]
