"""ORM models for the sharing-chain tables.

Column names match the record keys used by the repositories, so a row
maps 1:1 to a record dict.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vendorflow.infrastructure.persistence.database import Base
from vendorflow.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)
from vendorflow.infrastructure.persistence.tables import (
    DOCUMENT_PROVENANCE,
    DOCUMENTS,
    SHARING_CHAINS,
    SHARING_NOTIFICATIONS,
    SHARING_PERMISSIONS,
)


class Document(Base, CuidMixin, CreatedAtMixin):
    """Documents owned by the host application (read-only here)."""

    __tablename__ = DOCUMENTS

    owner_user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    document_type: Mapped[str] = mapped_column(String(32), nullable=False)
    file_name: Mapped[str | None] = mapped_column(String, nullable=True)


class SharingPermission(Base, CuidMixin, TimestampMixin):
    """Directed grant from granter to grantee."""

    __tablename__ = SHARING_PERMISSIONS

    granter_user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    grantee_user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    document_types: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    can_relay: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_view_history: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_chain_depth: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active", index=True)


class SharingChain(Base, CuidMixin):
    """One edge of a document's sharing tree."""

    __tablename__ = SHARING_CHAINS

    document_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    from_user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    to_user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    parent_chain_id: Mapped[str | None] = mapped_column(
        String, ForeignKey(f"{SHARING_CHAINS}.id"), nullable=True, index=True
    )
    share_token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    permissions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    share_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active", index=True)
    shared_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    depth: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_chain_depth: Mapped[int] = mapped_column(Integer, nullable=False, default=3)


class DocumentProvenance(Base, CuidMixin):
    """Denormalized provenance summary; one row per shared document."""

    __tablename__ = DOCUMENT_PROVENANCE

    document_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    original_owner_id: Mapped[str] = mapped_column(String, nullable=False)
    current_holder_id: Mapped[str] = mapped_column(String, nullable=False)
    chain_depth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    access_path: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    total_shares: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_shared_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_original: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class SharingNotification(Base, CuidMixin, CreatedAtMixin):
    """Inbox entry."""

    __tablename__ = SHARING_NOTIFICATIONS

    from_user_id: Mapped[str] = mapped_column(String, nullable=False)
    to_user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    document_id: Mapped[str | None] = mapped_column(String, nullable=True)
    chain_id: Mapped[str | None] = mapped_column(String, nullable=True)
    notification_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
