"""SQLAlchemy ORM models, keyed by table name for the SQL record store."""

from vendorflow.infrastructure.persistence.models.sharing import (
    Document,
    DocumentProvenance,
    SharingChain,
    SharingNotification,
    SharingPermission,
)

MODELS_BY_TABLE = {
    model.__tablename__: model
    for model in (
        Document,
        DocumentProvenance,
        SharingChain,
        SharingNotification,
        SharingPermission,
    )
}

__all__ = [
    "MODELS_BY_TABLE",
    "Document",
    "DocumentProvenance",
    "SharingChain",
    "SharingNotification",
    "SharingPermission",
]
