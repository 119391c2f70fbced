"""Read-only projections over a case graph.

Results keep node insertion order; nothing here sorts by date or amount
except ``get_events_sorted``, which callers opt into explicitly.
"""

from __future__ import annotations

from typing import Optional

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


def get_node(graph: CaseGraph, node_id: str) -> Optional[Node]:
    return graph.nodes.get(node_id)


def get_nodes_by_kind(graph: CaseGraph, kind: NodeKind) -> list[Node]:
    return [n for n in graph.nodes.values() if n.kind == kind]


def get_events(graph: CaseGraph) -> list[EventNode]:
    return get_nodes_by_kind(graph, NodeKind.EVENT)


def get_demands(graph: CaseGraph) -> list[DemandNode]:
    return get_nodes_by_kind(graph, NodeKind.DEMAND)


def get_evidence(graph: CaseGraph) -> list[EvidenceNode]:
    return get_nodes_by_kind(graph, NodeKind.EVIDENCE)


def get_events_sorted(graph: CaseGraph) -> list[EventNode]:
    """Events by date string, undated events last (stable otherwise)."""
    events = get_events(graph)
    return sorted(events, key=lambda e: (not e.data.date, e.data.date or ""))


# ------------------------------------------------------------------
# Edges
# ------------------------------------------------------------------


def get_out_edges(graph: CaseGraph, node_id: str) -> list[GraphEdge]:
    return [e for e in graph.edges if e.source == node_id]


def get_in_edges(graph: CaseGraph, node_id: str) -> list[GraphEdge]:
    return [e for e in graph.edges if e.target == node_id]


def _supported_targets(graph: CaseGraph, target_kind: NodeKind) -> set[str]:
    """Ids of ``target_kind`` nodes with a supports edge coming from evidence."""
    supported = set()
    for edge in graph.edges:
        if edge.kind != EdgeKind.SUPPORTS:
            continue
        source = graph.nodes.get(edge.source)
        target = graph.nodes.get(edge.target)
        if source is None or target is None:
            continue
        if source.kind == NodeKind.EVIDENCE and target.kind == target_kind:
            supported.add(edge.target)
    return supported


# ------------------------------------------------------------------
# Evidence coverage
# ------------------------------------------------------------------


def get_covered_events(graph: CaseGraph) -> list[EventNode]:
    covered = _supported_targets(graph, NodeKind.EVENT)
    return [e for e in get_events(graph) if e.id in covered]


def get_uncovered_events(graph: CaseGraph) -> list[EventNode]:
    covered = _supported_targets(graph, NodeKind.EVENT)
    return [e for e in get_events(graph) if e.id not in covered]


def get_covered_demands(graph: CaseGraph) -> list[DemandNode]:
    covered = _supported_targets(graph, NodeKind.DEMAND)
    return [d for d in get_demands(graph) if d.id in covered]


def get_unlinked_evidence(graph: CaseGraph) -> list[EvidenceNode]:
    """Evidence with no outgoing edge of any kind."""
    linked = {e.source for e in graph.edges}
    return [ev for ev in get_evidence(graph) if ev.id not in linked]


def get_evidence_for(graph: CaseGraph, node_id: str) -> list[EvidenceNode]:
    """Evidence nodes supporting ``node_id``, in insertion order."""
    source_ids = {
        e.source for e in graph.edges if e.target == node_id and e.kind == EdgeKind.SUPPORTS
    }
    return [ev for ev in get_evidence(graph) if ev.id in source_ids]


def get_total_amount(graph: CaseGraph) -> float:
    return sum(d.data.amount_nis or 0 for d in get_demands(graph))


def summarize_graph(graph: CaseGraph) -> GraphSummary:
    demands = get_demands(graph)
    evidence = get_evidence(graph)
    return GraphSummary(
        total_nodes=len(graph.nodes),
        event_count=len(get_events(graph)),
        demand_count=len(demands),
        evidence_count=len(evidence),
        total_edges=len(graph.edges),
        linked_evidence_count=len(evidence) - len(get_unlinked_evidence(graph)),
        covered_event_count=len(get_covered_events(graph)),
        substantiated_demand_count=sum(1 for d in demands if (d.data.legal_basis or "").strip()),
        total_amount_nis=get_total_amount(graph),
    )
