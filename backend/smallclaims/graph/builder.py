"""Graph construction and mutation helpers.

Every function takes a graph and returns a graph; the input is never modified.
Calls that have nothing to do (unknown ids, duplicate edges) return the input
unchanged instead of raising, so UI toggles stay idempotent.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Union

from pydantic import BaseModel

from ..schemas import Claim
from .models import (
    CaseGraph,
    DemandData,
    DemandNode,
    EdgeKind,
    EventData,
    EventNode,
    EvidenceData,
    EvidenceNode,
    GraphEdge,
    Node,
)

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def create_empty_graph(claim_id: str) -> CaseGraph:
    return CaseGraph(claim_id=claim_id)


# ------------------------------------------------------------------
# Nodes
# ------------------------------------------------------------------


def add_node(graph: CaseGraph, node: Node) -> CaseGraph:
    if node.id in graph.nodes:
        return graph
    nodes = dict(graph.nodes)
    nodes[node.id] = node
    return graph.model_copy(update={"nodes": nodes})


def add_event(
    graph: CaseGraph,
    description: str,
    date: Optional[str] = None,
    category: Optional[str] = None,
) -> CaseGraph:
    node = EventNode(
        id=new_id("event"),
        data=EventData(date=date, description=description, category=category),
    )
    return add_node(graph, node)


def add_demand(
    graph: CaseGraph,
    description: str,
    amount_nis: Optional[float] = None,
    legal_basis: Optional[str] = None,
) -> CaseGraph:
    node = DemandNode(
        id=new_id("demand"),
        data=DemandData(description=description, amount_nis=amount_nis, legal_basis=legal_basis),
    )
    return add_node(graph, node)


def add_evidence(
    graph: CaseGraph,
    description: Optional[str] = None,
    file_type: Optional[str] = None,
    uri: Optional[str] = None,
    tag: Optional[str] = None,
) -> CaseGraph:
    node = EvidenceNode(
        id=new_id("evidence"),
        data=EvidenceData(description=description, file_type=file_type, uri=uri, tag=tag),
    )
    return add_node(graph, node)


def update_node_data(
    graph: CaseGraph, node_id: str, data: Union[dict, BaseModel]
) -> CaseGraph:
    """Replace a node's data. The node kind never changes.

    A dict is merged over the current data; a data model replaces it and must
    be of the node's own data type.
    """
    node = graph.nodes.get(node_id)
    if node is None:
        return graph
    if isinstance(data, BaseModel):
        if not isinstance(data, type(node.data)):
            logger.debug("Skipping update of %s: data kind mismatch", node_id)
            return graph
        new_data = data
    else:
        new_data = type(node.data).model_validate({**node.data.model_dump(), **data})
    nodes = dict(graph.nodes)
    nodes[node_id] = node.model_copy(update={"data": new_data})
    return graph.model_copy(update={"nodes": nodes})


def remove_node(graph: CaseGraph, node_id: str) -> CaseGraph:
    """Delete a node together with every edge that touches it."""
    if node_id not in graph.nodes:
        return graph
    nodes = {nid: n for nid, n in graph.nodes.items() if nid != node_id}
    edges = [e for e in graph.edges if e.source != node_id and e.target != node_id]
    return graph.model_copy(update={"nodes": nodes, "edges": edges})


# ------------------------------------------------------------------
# Edges
# ------------------------------------------------------------------


def add_edge(graph: CaseGraph, edge: GraphEdge) -> CaseGraph:
    if edge.source not in graph.nodes or edge.target not in graph.nodes:
        logger.debug("Skipping edge %s: dangling endpoint", edge.id)
        return graph
    if edge.source == edge.target:
        return graph
    for existing in graph.edges:
        if existing.id == edge.id:
            return graph
        if (
            existing.source == edge.source
            and existing.target == edge.target
            and existing.kind == edge.kind
        ):
            return graph
    return graph.model_copy(update={"edges": [*graph.edges, edge]})


def remove_edge(graph: CaseGraph, edge_id: str) -> CaseGraph:
    if not any(e.id == edge_id for e in graph.edges):
        return graph
    return graph.model_copy(update={"edges": [e for e in graph.edges if e.id != edge_id]})


def link_evidence(
    graph: CaseGraph,
    evidence_id: str,
    target_id: str,
    kind: EdgeKind = EdgeKind.SUPPORTS,
) -> CaseGraph:
    edge = GraphEdge(id=new_id("edge"), source=evidence_id, target=target_id, kind=kind)
    return add_edge(graph, edge)


def unlink_evidence(
    graph: CaseGraph,
    evidence_id: str,
    target_id: str,
    kind: EdgeKind = EdgeKind.SUPPORTS,
) -> CaseGraph:
    for edge in graph.edges:
        if edge.source == evidence_id and edge.target == target_id and edge.kind == kind:
            graph = remove_edge(graph, edge.id)
    return graph


# ------------------------------------------------------------------
# Seeding from an existing claim
# ------------------------------------------------------------------


def build_graph_from_claim(claim: Claim) -> CaseGraph:
    """Migrate the facts already present on a claim into a fresh graph.

    Ids are derived from the claim so that seeding the same claim twice
    produces the same graph.
    """
    graph = create_empty_graph(claim.id)

    for i, entry in enumerate(claim.timeline):
        graph = add_node(
            graph,
            EventNode(
                id=f"event_seed_{i}",
                data=EventData(date=entry.date or None, description=entry.text or None),
            ),
        )

    amount = claim.amount_claimed_nis or claim.amount
    if claim.demands:
        for i, description in enumerate(claim.demands):
            graph = add_node(
                graph,
                DemandNode(
                    id=f"demand_seed_{i}",
                    data=DemandData(
                        description=description,
                        # the whole amount goes on the first demand
                        amount_nis=amount if i == 0 and amount else None,
                        legal_basis=claim.legal_basis,
                    ),
                ),
            )
    elif amount and amount > 0:
        graph = add_node(
            graph,
            DemandNode(
                id="demand_seed_0",
                data=DemandData(
                    description=claim.facts_summary or claim.summary or "Monetary compensation",
                    amount_nis=amount,
                    legal_basis=claim.legal_basis,
                ),
            ),
        )

    for i, item in enumerate(claim.evidence):
        node_id = f"evidence_{item.id}"
        if node_id in graph.nodes:
            logger.debug("Duplicate evidence id %s on claim %s", item.id, claim.id)
            node_id = f"{node_id}_{i}"
        graph = add_node(
            graph,
            EvidenceNode(
                id=node_id,
                data=EvidenceData(
                    description=item.name or None,
                    file_type=item.type,
                    uri=item.uri or None,
                    tag=item.tag,
                    evidence_id=item.id,
                ),
            ),
        )

    logger.debug(
        "Seeded graph for claim %s with %d nodes", claim.id, len(graph.nodes)
    )
    return graph
