"""Sharing notification domain entity (inbox entry)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from vendorflow.domain.enums import NotificationType


@dataclass
class SharingNotification:
    """Inbox entry for a share, relay, response, or revocation. Only is_read changes."""

    id: str
    from_user_id: str
    to_user_id: str
    notification_type: NotificationType
    message: str
    document_id: str | None = None
    chain_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    is_read: bool = False
    created_at: datetime | None = None

    def mark_read(self) -> bool:
        """Flip is_read. Returns False when it was already read."""
        if self.is_read:
            return False
        self.is_read = True
        return True
