"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from smallclaims.graph.builder import build_graph_from_claim
from smallclaims.graph.storage import GraphStore, InMemoryGraphRepository
from smallclaims.schemas import Claim, ClaimForScoring, EvidenceItem, TimelineEntry

TODAY = date(2026, 10, 19)


@pytest.fixture
def today() -> date:
    """Fixed evaluation date for date-sensitive rules."""
    return TODAY


@pytest.fixture
def full_claim() -> Claim:
    """A claim with every field the readiness score looks at."""
    return Claim(
        id="claim-full",
        user_id="user-1",
        claim_type="consumer",
        amount_claimed_nis=5_000,
        plaintiff_name="Dana Levi",
        plaintiff_id="123456782",
        plaintiff_phone="050-1234567",
        plaintiff_address="12 Herzl St, Haifa",
        defendant="Cool Air Ltd",
        defendant_address="4 HaMelacha St, Tel Aviv",
        facts_summary=(
            "I bought an air conditioner from the defendant in March. It stopped working "
            "after two weeks, the technician never arrived and the store refused to refund "
            "me despite repeated calls and a written warning letter."
        ),
        timeline=[
            TimelineEntry(date="2026-03-01", description="Bought an air conditioner for 5,000 NIS"),
            TimelineEntry(date="2026-03-15", description="Unit stopped working, called the store"),
        ],
        demands=["Full refund of the purchase price"],
        incident_date="2026-03-01",
        legal_basis="Consumer Protection Law",
        evidence=[
            EvidenceItem(id="ev1", uri="file://receipt.jpg", type="image", name="Receipt", tag="receipt"),
            EvidenceItem(id="ev2", uri="file://chat.png", type="image", name="WhatsApp chat"),
            EvidenceItem(id="ev3", uri="file://letter.pdf", type="pdf", name="Warning letter"),
        ],
        has_prior_notice=True,
        has_proof_of_payment=True,
        signature_uri="file://signature.png",
    )


@pytest.fixture
def empty_claim() -> Claim:
    return Claim(id="claim-empty", amount_claimed_nis=0)


@pytest.fixture
def full_snapshot(full_claim: Claim) -> ClaimForScoring:
    return ClaimForScoring.from_claim(full_claim)


@pytest.fixture
def empty_snapshot(empty_claim: Claim) -> ClaimForScoring:
    return ClaimForScoring.from_claim(empty_claim)


@pytest.fixture
def seeded_graph(full_claim: Claim):
    """Graph seeded from the full claim: 2 events, 1 demand, 3 evidence, no edges."""
    return build_graph_from_claim(full_claim)


@pytest.fixture
def memory_store() -> GraphStore:
    return GraphStore(InMemoryGraphRepository())
