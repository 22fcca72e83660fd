"""Domain value objects for the sharing-chain core.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar

from vendorflow.domain.enums import ALL_DOCUMENT_TYPES, DocumentType

UNLIMITED_DEPTH = -1


@dataclass(frozen=True)
class ShareRights:
    """Fixed three-flag rights snapshot carried by every chain edge.

    Copied onto an edge at share time, so later grant changes never alter
    access that was already handed out. A relay may only narrow rights.
    """

    can_relay: bool = True
    can_view: bool = True
    can_download: bool = True

    def clamp_to(self, ceiling: ShareRights) -> ShareRights:
        """Return these rights with every flag limited by ceiling (logical AND)."""
        return ShareRights(
            can_relay=self.can_relay and ceiling.can_relay,
            can_view=self.can_view and ceiling.can_view,
            can_download=self.can_download and ceiling.can_download,
        )

    def is_within(self, ceiling: ShareRights) -> bool:
        """Return True when no flag is wider than the matching flag of ceiling."""
        return self.clamp_to(ceiling) == self

    def to_dict(self) -> dict[str, bool]:
        return {
            "canRelay": self.can_relay,
            "canView": self.can_view,
            "canDownload": self.can_download,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ShareRights:
        """Build from the stored camelCase JSON shape; missing flags default to True."""
        data = data or {}
        return cls(
            can_relay=bool(data.get("canRelay", True)),
            can_view=bool(data.get("canView", True)),
            can_download=bool(data.get("canDownload", True)),
        )


@dataclass(frozen=True)
class DocumentTypeScope:
    """Non-empty set of document types a grant covers, or the ``all`` sentinel."""

    values: frozenset[str]

    VALID: ClassVar[frozenset[str]] = frozenset(
        [*DocumentType.values(), ALL_DOCUMENT_TYPES]
    )

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("At least one document type is required")
        unknown = self.values - self.VALID
        if unknown:
            raise ValueError(
                f"Unknown document type(s): {', '.join(sorted(unknown))}"
            )

    @classmethod
    def of(cls, types: Iterable[str]) -> DocumentTypeScope:
        return cls(frozenset(t.strip().lower() for t in types))

    def covers(self, document_type: str) -> bool:
        return ALL_DOCUMENT_TYPES in self.values or document_type in self.values

    def as_list(self) -> list[str]:
        return sorted(self.values)


@dataclass(frozen=True)
class ChainDepthLimit:
    """Maximum number of hops allowed from a document's root share.

    ``-1`` means unlimited. Limits combine by taking the tighter one, which
    is how the effective limit of a whole permission chain is computed.
    """

    value: int

    def __post_init__(self) -> None:
        if self.value != UNLIMITED_DEPTH and self.value < 1:
            raise ValueError("max chain depth must be -1 (unlimited) or at least 1")

    @property
    def is_unlimited(self) -> bool:
        return self.value == UNLIMITED_DEPTH

    def allows(self, depth: int) -> bool:
        return self.is_unlimited or depth <= self.value

    def tighten(self, other: ChainDepthLimit | None) -> ChainDepthLimit:
        """Return the stricter of self and other (None leaves self unchanged)."""
        if other is None or other.is_unlimited:
            return self
        if self.is_unlimited:
            return other
        return ChainDepthLimit(min(self.value, other.value))
