"""Tests for the readiness/confidence engine."""

import pytest

from smallclaims.config import Settings
from smallclaims.engine.confidence import (
    CATEGORY_CAPS,
    apply_confidence,
    calculate_confidence,
    get_readiness_color,
    get_readiness_label,
    get_score_tier,
    get_strength_color,
    get_strength_label,
    recalculate_confidence,
)
from smallclaims.engine.eligibility import EligibilityInput, check_eligibility
from smallclaims.graph import builder
from smallclaims.schemas import Claim, ClaimForScoring, Plaintiff, TimelineEntry


def _breakdown_dict(result):
    return result.breakdown.model_dump()


def test_empty_claim_scores_zero(empty_snapshot):
    """Test a claim with nothing filled in scores zero everywhere."""
    result = calculate_confidence(empty_snapshot)
    assert _breakdown_dict(result) == {name: 0 for name in CATEGORY_CAPS}
    assert result.readiness_score == 0
    assert result.strength_score == "weak"

    required = {m.field for m in result.missing_fields if m.importance == "required"}
    assert {"plaintiff_name", "defendant", "summary", "amount", "signature"} <= required
    recommended = {m.field for m in result.missing_fields if m.importance == "recommended"}
    assert recommended == {"evidence", "timeline", "demands"}


def test_full_claim_scores_hundred(full_snapshot):
    """Test a fully populated claim is ready to file and strong."""
    result = calculate_confidence(full_snapshot)
    assert _breakdown_dict(result) == CATEGORY_CAPS
    assert result.readiness_score == 100
    assert result.strength_score == "strong"
    assert not [m for m in result.missing_fields if m.importance == "required"]
    assert result.risk_flags == []


def test_breakdown_sums_to_score_and_respects_caps(full_snapshot, empty_snapshot):
    partial = full_snapshot.model_copy(update={"evidence_count": 1, "timeline": [], "demands": []})
    for snapshot in (full_snapshot, empty_snapshot, partial):
        result = calculate_confidence(snapshot)
        parts = _breakdown_dict(result)
        assert sum(parts.values()) == result.readiness_score
        for name, value in parts.items():
            assert 0 <= value <= CATEGORY_CAPS[name]


def test_calculate_confidence_is_pure(full_snapshot):
    """Test identical input gives identical output."""
    assert calculate_confidence(full_snapshot) == calculate_confidence(full_snapshot)


def test_amount_above_cap(full_snapshot):
    """Test an amount above the ceiling earns nothing and raises a high risk."""
    snapshot = full_snapshot.model_copy(update={"amount": 200_000})
    result = calculate_confidence(snapshot)
    assert result.breakdown.valid_amount == 0
    flag = next(f for f in result.risk_flags if f.id == "amount_exceeds_limit")
    assert flag.severity == "high"
    assert "₪39,900" in flag.description
    assert "fix_amount" in [s.id for s in result.suggestions]

    eligibility = check_eligibility(EligibilityInput(estimated_amount_nis=200_000))
    assert eligibility.verdict == "ineligible"
    assert any(b.id == "amount_too_high" for b in eligibility.blockers)


def test_cap_comes_from_config(full_snapshot):
    """Test the ceiling is read from the injected settings."""
    snapshot = full_snapshot.model_copy(update={"amount": 50_000})
    assert calculate_confidence(snapshot).breakdown.valid_amount == 0
    raised = Settings(small_claims_max_amount_nis=87_600)
    assert calculate_confidence(snapshot, config=raised).breakdown.valid_amount == 10


@pytest.mark.parametrize(
    "count,expected",
    [(0, 0), (1, 5), (2, 10), (3, 15), (7, 15)],
)
def test_evidence_points_from_count(full_snapshot, count, expected):
    snapshot = full_snapshot.model_copy(update={"evidence_count": count})
    assert calculate_confidence(snapshot).breakdown.evidence == expected


def test_demand_credit(full_snapshot):
    no_amount = full_snapshot.model_copy(update={"amount": None})
    assert calculate_confidence(no_amount).breakdown.demands == 7
    two = no_amount.model_copy(update={"demands": ["Refund", "Distress"]})
    assert calculate_confidence(two).breakdown.demands == 10
    amount_only = full_snapshot.model_copy(update={"demands": []})
    assert calculate_confidence(amount_only).breakdown.demands == 5


def test_timeline_credit(full_snapshot):
    one = full_snapshot.model_copy(update={"timeline": [TimelineEntry(description="x")]})
    assert calculate_confidence(one).breakdown.timeline == 5
    date_only = full_snapshot.model_copy(update={"timeline": []})
    assert calculate_confidence(date_only).breakdown.timeline == 4


def test_graph_evidence_rewards_linking(full_claim, full_snapshot, seeded_graph):
    """Test evidence only reaches full credit once it is linked to the facts."""
    unlinked = calculate_confidence(full_snapshot, seeded_graph)
    assert unlinked.breakdown.evidence < CATEGORY_CAPS["evidence"]
    assert "link_evidence" in [s.id for s in unlinked.suggestions]

    g = builder.link_evidence(seeded_graph, "evidence_ev1", "event_seed_0")
    g = builder.link_evidence(g, "evidence_ev2", "event_seed_1")
    g = builder.link_evidence(g, "evidence_ev3", "demand_seed_0")
    linked = calculate_confidence(full_snapshot, g)
    assert linked.breakdown.evidence == CATEGORY_CAPS["evidence"]
    assert linked.readiness_score == 100
    assert "link_evidence" not in [s.id for s in linked.suggestions]


def test_category_risk_flags():
    """Test category expectations drive the agreement/notice/payment flags."""
    snapshot = ClaimForScoring(claim_type="landlord", amount=3_000)
    ids = {f.id: f.severity for f in calculate_confidence(snapshot).risk_flags}
    assert ids["no_written_agreement"] == "medium"
    assert ids["no_prior_notice"] == "medium"
    assert ids["no_proof_of_payment"] == "low"

    neighbor = ClaimForScoring(claim_type="neighbor", amount=3_000)
    ids = {f.id for f in calculate_confidence(neighbor).risk_flags}
    assert "no_written_agreement" not in ids
    assert "no_proof_of_payment" not in ids


def test_eligibility_blockers_become_risk_flags():
    snapshot = ClaimForScoring(plaintiff_type="company", claim_type="consumer")
    flag = next(
        f for f in calculate_confidence(snapshot).risk_flags if f.id == "eligibility_blocked_plaintiff_type"
    )
    assert flag.severity == "high"


def test_suggestions_sorted_by_priority(empty_snapshot):
    """Test suggestions are ordered high, medium, low with stable ids."""
    result = calculate_confidence(empty_snapshot)
    order = {"high": 0, "medium": 1, "low": 2}
    ranks = [order[s.priority] for s in result.suggestions]
    assert ranks == sorted(ranks)
    ids = [s.id for s in result.suggestions]
    assert ids[:3] == ["complete_required_fields", "fix_amount", "add_evidence"]
    assert "add_signature" in ids
    assert "mock_trial" not in ids


def test_full_claim_suggests_mock_trial(full_snapshot):
    assert [s.id for s in calculate_confidence(full_snapshot).suggestions] == ["mock_trial"]


def test_apply_confidence_writes_back(full_claim):
    """Test the recalculate projection persists results onto a copy."""
    updated = recalculate_confidence(full_claim)
    assert updated.readiness_score == 100
    assert updated.strength_score == "strong"
    assert full_claim.readiness_score is None

    result = calculate_confidence(ClaimForScoring.from_claim(full_claim))
    assert apply_confidence(full_claim, result) == updated


def test_from_claim_reads_nested_and_legacy_fields():
    claim = Claim(
        id="c",
        amount=700,
        summary="Legacy summary",
        plaintiff=Plaintiff(full_name="Avi", id_number="1", type="individual"),
        signature_url="https://sig",
    )
    snapshot = ClaimForScoring.from_claim(claim)
    assert snapshot.plaintiff_name == "Avi"
    assert snapshot.plaintiff_type == "individual"
    assert snapshot.amount == 700
    assert snapshot.summary_text == "Legacy summary"
    assert snapshot.has_signature


@pytest.mark.parametrize(
    "score,tier,label",
    [
        (100, "success", "Ready to file"),
        (80, "success", "Ready to file"),
        (79, "warning", "Almost ready"),
        (50, "warning", "Almost ready"),
        (49, "intermediate", "In progress"),
        (0.5, "intermediate", "In progress"),
        (0, "none", "Not started"),
    ],
)
def test_readiness_tiers(score, tier, label):
    assert get_score_tier(score) == tier
    assert get_readiness_label(score) == label
    assert get_readiness_color(score).startswith("#")


def test_strength_labels():
    assert get_strength_label("strong") == "Strong"
    assert get_strength_label("weak") == "Weak"
    assert get_strength_color("medium") == "#f59e0b"


def test_uploads_missing_from_stored_graph_still_count(full_claim, full_snapshot):
    """Test evidence uploaded after the graph was saved keeps its volume credit."""
    stale = builder.build_graph_from_claim(full_claim.model_copy(update={"evidence": []}))
    result = calculate_confidence(full_snapshot, stale)
    # three items, none linked: volume credit only
    assert result.breakdown.evidence == 8
    assert result.readiness_score == 93
    assert "evidence" not in {m.field for m in result.missing_fields}
    assert "link_evidence" not in [s.id for s in result.suggestions]


def test_partially_synced_graph_counts_uploads_as_unlinked(full_claim, full_snapshot):
    stale = builder.build_graph_from_claim(
        full_claim.model_copy(update={"evidence": full_claim.evidence[:1]})
    )
    g = builder.link_evidence(stale, "evidence_ev1", "event_seed_0")
    assert calculate_confidence(full_snapshot, g).breakdown.evidence == 11


def test_claim_type_case_does_not_raise_eligibility_flag(full_snapshot):
    """Test a capitalised category is treated like its lowercase id."""
    snapshot = full_snapshot.model_copy(update={"claim_type": " Consumer "})
    result = calculate_confidence(snapshot)
    assert result.risk_flags == []
    assert result.readiness_score == 100
