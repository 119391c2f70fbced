"""Case graph: model, builder, queries and persistence."""

from .models import (
    CaseGraph,
    DemandNode,
    EdgeKind,
    EventNode,
    EvidenceNode,
    GraphEdge,
    GraphSummary,
    Node,
    NodeKind,
)

__all__ = [
    "CaseGraph",
    "DemandNode",
    "EdgeKind",
    "EventNode",
    "EvidenceNode",
    "GraphEdge",
    "GraphSummary",
    "Node",
    "NodeKind",
]
