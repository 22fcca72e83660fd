"""Build the node/edge graph of a document's sharing tree."""

from __future__ import annotations

from vendorflow.application.dtos.sharing import (
    ChainVisualization,
    VisualizationEdge,
    VisualizationNode,
)
from vendorflow.domain.entities import DocumentProvenance, SharingChainEdge


def build_chain_visualization(
    edges: list[SharingChainEdge], provenance: DocumentProvenance | None
) -> ChainVisualization:
    """One node per distinct user (first-seen order), one edge per chain edge."""
    owner = provenance.original_owner_id if provenance else None
    holder = provenance.current_holder_id if provenance else None
    user_ids: list[str] = []
    if owner:
        user_ids.append(owner)
    for edge in edges:
        for user_id in (edge.from_user_id, edge.to_user_id):
            if user_id not in user_ids:
                user_ids.append(user_id)
    nodes = [
        VisualizationNode(
            id=user_id,
            is_original_owner=user_id == owner,
            is_current_holder=user_id == holder,
        )
        for user_id in user_ids
    ]
    graph_edges = [
        VisualizationEdge(
            id=edge.id,
            source=edge.from_user_id,
            target=edge.to_user_id,
            status=edge.status.value,
            depth=edge.depth,
            shared_at=edge.shared_at,
        )
        for edge in edges
    ]
    return ChainVisualization(nodes=nodes, edges=graph_edges)
