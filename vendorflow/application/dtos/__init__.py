"""Application DTOs (data transfer objects)."""

from vendorflow.application.dtos.sharing import (
    AccessResult,
    ChainHistory,
    ChainVisualization,
    DocumentRef,
    NotificationInbox,
    RelayRequest,
    RevokeOutcome,
    ShareOutcome,
    ShareRequest,
    SharingStats,
    VisualizationEdge,
    VisualizationNode,
)

__all__ = [
    "AccessResult",
    "ChainHistory",
    "ChainVisualization",
    "DocumentRef",
    "NotificationInbox",
    "RelayRequest",
    "RevokeOutcome",
    "ShareOutcome",
    "ShareRequest",
    "SharingStats",
    "VisualizationEdge",
    "VisualizationNode",
]
