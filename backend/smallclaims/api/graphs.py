from fastapi import APIRouter, HTTPException

from ..engine.graph_scoring import GraphScoreResult, score_graph
from ..graph import CaseGraph, EdgeKind
from ..graph import builder
from ..graph.storage import create_store
from ..schemas import Claim, DemandCreateRequest, EdgeCreateRequest

router = APIRouter(prefix="/api/graphs", tags=["graphs"])

store = create_store()


async def _require_graph(claim_id: str) -> CaseGraph:
    graph = await store.load_graph(claim_id)
    if graph is None:
        raise HTTPException(status_code=404, detail="Graph not found")
    return graph


@router.post("/open", response_model=CaseGraph)
async def open_graph(claim: Claim):
    return await store.get_or_create_graph(claim)


@router.put("/{claim_id}", response_model=CaseGraph)
async def save_graph(claim_id: str, graph: CaseGraph):
    if graph.claim_id != claim_id:
        raise HTTPException(status_code=400, detail="claim_id does not match the graph")
    await store.save_graph(graph)
    return graph


@router.get("/{claim_id}/score", response_model=GraphScoreResult)
async def get_graph_score(claim_id: str):
    graph = await _require_graph(claim_id)
    return score_graph(graph)


@router.post("/{claim_id}/edges", response_model=CaseGraph)
async def create_edge(claim_id: str, req: EdgeCreateRequest):
    graph = await _require_graph(claim_id)
    updated = builder.link_evidence(graph, req.source, req.target, EdgeKind(req.kind))
    if updated is not graph:
        await store.save_graph(updated)
    return updated


@router.delete("/{claim_id}/edges/{edge_id}", response_model=CaseGraph)
async def delete_edge(claim_id: str, edge_id: str):
    graph = await _require_graph(claim_id)
    updated = builder.remove_edge(graph, edge_id)
    if updated is not graph:
        await store.save_graph(updated)
    return updated


@router.post("/{claim_id}/demands", response_model=CaseGraph)
async def create_demand(claim_id: str, req: DemandCreateRequest):
    graph = await _require_graph(claim_id)
    updated = builder.add_demand(graph, req.description, req.amount_nis, req.legal_basis)
    await store.save_graph(updated)
    return updated


@router.delete("/{claim_id}/nodes/{node_id}", response_model=CaseGraph)
async def delete_node(claim_id: str, node_id: str):
    graph = await _require_graph(claim_id)
    updated = builder.remove_node(graph, node_id)
    if updated is not graph:
        await store.save_graph(updated)
    return updated
