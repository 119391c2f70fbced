"""Graph-aware scoring: rewards evidence that is actually tied to facts."""

from __future__ import annotations

from pydantic import BaseModel

from ..config import Settings, settings as default_settings
from ..graph import queries
from ..graph.models import CaseGraph
from ..schemas import StrengthScore

EVIDENCE_POINTS_MAX = 15


class GraphScoreBreakdown(BaseModel):
    claim_substance: int  # max 25
    narrative: int  # max 25
    evidence: int  # max 35
    legal_basis: int  # max 15


class GraphScoreResult(BaseModel):
    breakdown: GraphScoreBreakdown
    graph_score: int  # 0-100, sum of the breakdown
    event_coverage: float  # 0-1, events with supporting evidence
    evidence_link_ratio: float  # 0-1, evidence linked to something
    evidence_coverage: int  # 0-100, events + demands with supporting evidence
    timeline_consistency: int  # 0-100
    evidence_points: int  # 0-15, feeds the evidence category of the confidence score
    strength_score: StrengthScore


def score_graph(graph: CaseGraph, config: Settings | None = None) -> GraphScoreResult:
    config = config or default_settings
    breakdown = _breakdown(graph, config)
    graph_score = min(
        100,
        breakdown.claim_substance + breakdown.narrative + breakdown.evidence + breakdown.legal_basis,
    )

    events = queries.get_events(graph)
    evidence = queries.get_evidence(graph)
    event_coverage = (
        len(queries.get_covered_events(graph)) / len(events) if events else 0.0
    )
    link_ratio = (
        (len(evidence) - len(queries.get_unlinked_evidence(graph))) / len(evidence)
        if evidence
        else 0.0
    )
    evidence_coverage = _evidence_coverage(graph)
    timeline_consistency = _timeline_consistency(graph)

    average = (graph_score + evidence_coverage + timeline_consistency) / 3
    if average >= config.strong_graph_average:
        strength: StrengthScore = "strong"
    elif average >= config.medium_graph_average:
        strength = "medium"
    else:
        strength = "weak"

    return GraphScoreResult(
        breakdown=breakdown,
        graph_score=graph_score,
        event_coverage=round(event_coverage, 4),
        evidence_link_ratio=round(link_ratio, 4),
        evidence_coverage=evidence_coverage,
        timeline_consistency=timeline_consistency,
        evidence_points=graph_evidence_points(graph),
        strength_score=strength,
    )


def graph_evidence_points(graph: CaseGraph, evidence_count: int = 0) -> int:
    """Evidence points (0-15) counting at least ``evidence_count`` items.

    Uploaded items that have no evidence node in the graph yet add volume but
    count as unlinked.
    """
    evidence = queries.get_evidence(graph)
    total = max(len(evidence), evidence_count)
    events = queries.get_events(graph)
    event_coverage = len(queries.get_covered_events(graph)) / len(events) if events else 0.0
    linked = len(evidence) - len(queries.get_unlinked_evidence(graph))
    link_ratio = linked / total if total else 0.0
    return _evidence_points(total, event_coverage, link_ratio, bool(events))


# ------------------------------------------------------------------
# Internal
# ------------------------------------------------------------------


def _breakdown(graph: CaseGraph, config: Settings) -> GraphScoreBreakdown:
    amount = queries.get_total_amount(graph)
    demands = queries.get_demands(graph)
    claim_substance = 0
    if amount > 0:
        claim_substance += 8
        if amount <= config.small_claims_max_amount_nis:
            claim_substance += 5
    if len(demands) >= 1:
        claim_substance += 7
    if len(demands) >= 2:
        claim_substance += 5

    events = queries.get_events(graph)
    narrative = 0
    if len(events) >= 1:
        narrative += 7
    if len(events) >= 3:
        narrative += 7
    if len(events) >= 5:
        narrative += 4
    descriptive = [e for e in events if len(e.data.description or "") > 20]
    if len(descriptive) >= 2:
        narrative += 7

    evidence = queries.get_evidence(graph)
    linked = len(evidence) - len(queries.get_unlinked_evidence(graph))
    evidence_score = 0
    if len(evidence) >= 1:
        evidence_score += 8
    if len(evidence) >= 3:
        evidence_score += 8
    if len(evidence) >= 5:
        evidence_score += 5
    if linked >= 1:
        evidence_score += 6
    if linked >= 3:
        evidence_score += 8

    substantiated = [d for d in demands if (d.data.legal_basis or "").strip()]
    legal_basis = 0
    if substantiated:
        legal_basis += 8
        if len(substantiated) == len(demands):
            legal_basis += 7

    return GraphScoreBreakdown(
        claim_substance=claim_substance,
        narrative=narrative,
        evidence=evidence_score,
        legal_basis=legal_basis,
    )


def _evidence_coverage(graph: CaseGraph) -> int:
    events = queries.get_events(graph)
    demands = queries.get_demands(graph)
    if not queries.get_evidence(graph):
        return 0
    total = len(events) + len(demands)
    if total == 0:
        # evidence exists but there is nothing to attach it to yet
        return 50
    covered = len(queries.get_covered_events(graph)) + len(queries.get_covered_demands(graph))
    return round(covered / total * 100)


def _timeline_consistency(graph: CaseGraph) -> int:
    events = queries.get_events_sorted(graph)
    if not events:
        return 0
    if len(events) == 1:
        return 40

    score = 30
    with_dates = [e for e in queries.get_events(graph) if (e.data.date or "").strip()]
    score += min(30, round(len(with_dates) / len(events) * 30))
    with_desc = [e for e in events if len(e.data.description or "") > 10]
    score += min(20, round(len(with_desc) / len(events) * 20))

    # dates entered in chronological order (insertion order, not sorted)
    dates = [e.data.date for e in with_dates]
    if len(dates) >= 2 and all(a <= b for a, b in zip(dates, dates[1:])):
        score += 20
    return min(100, score)


def _evidence_points(
    evidence_count: int, event_coverage: float, link_ratio: float, has_events: bool
) -> int:
    if evidence_count == 0:
        return 0
    volume = min(1.0, evidence_count / 3)
    linkage = (event_coverage + link_ratio) / 2 if has_events else link_ratio
    return min(EVIDENCE_POINTS_MAX, round(EVIDENCE_POINTS_MAX * (volume + linkage) / 2))
