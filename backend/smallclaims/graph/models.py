"""Case graph data model: typed nodes connected by directed evidentiary edges."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

GRAPH_VERSION = 1


class NodeKind(str, Enum):
    """Node variants. New kinds are added here and to the ``Node`` union."""

    EVENT = "event"
    DEMAND = "demand"
    EVIDENCE = "evidence"


class EdgeKind(str, Enum):
    SUPPORTS = "supports"
    UNDERMINES = "undermines"


class EventData(BaseModel):
    date: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None


class DemandData(BaseModel):
    description: str
    amount_nis: Optional[float] = None
    legal_basis: Optional[str] = None


class EvidenceData(BaseModel):
    description: Optional[str] = None
    file_type: Optional[str] = None  # image / pdf / document / anything else
    uri: Optional[str] = None
    tag: Optional[str] = None  # receipt, contract, correspondence...
    evidence_id: Optional[str] = None  # id of the uploaded item on the claim


class EventNode(BaseModel):
    id: str
    kind: Literal["event"] = "event"
    data: EventData = Field(default_factory=EventData)


class DemandNode(BaseModel):
    id: str
    kind: Literal["demand"] = "demand"
    data: DemandData


class EvidenceNode(BaseModel):
    id: str
    kind: Literal["evidence"] = "evidence"
    data: EvidenceData = Field(default_factory=EvidenceData)


Node = Annotated[Union[EventNode, DemandNode, EvidenceNode], Field(discriminator="kind")]


class GraphEdge(BaseModel):
    id: str
    source: str
    target: str
    kind: EdgeKind = EdgeKind.SUPPORTS


class CaseGraph(BaseModel):
    """All structured facts of one claim.

    ``nodes`` keeps insertion order (dicts are ordered), ``edges`` is an
    ordered list. Builder functions return new graphs and never mutate the
    one they were given.
    """

    claim_id: str
    version: int = GRAPH_VERSION
    nodes: dict[str, Node] = Field(default_factory=dict)
    edges: list[GraphEdge] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_structure(self) -> "CaseGraph":
        for key, node in self.nodes.items():
            if key != node.id:
                raise ValueError(f"node key '{key}' does not match node id '{node.id}'")
        edge_ids = set()
        for edge in self.edges:
            if edge.id in edge_ids:
                raise ValueError(f"duplicate edge id '{edge.id}'")
            edge_ids.add(edge.id)
            if edge.source not in self.nodes or edge.target not in self.nodes:
                raise ValueError(f"edge '{edge.id}' references a missing node")
            if edge.source == edge.target:
                raise ValueError(f"edge '{edge.id}' is a self loop")
        return self


class GraphSummary(BaseModel):
    total_nodes: int
    event_count: int
    demand_count: int
    evidence_count: int
    total_edges: int
    linked_evidence_count: int
    covered_event_count: int
    substantiated_demand_count: int
    total_amount_nis: float
