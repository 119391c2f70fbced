"""Deterministic filing rules and next-step guidance.

Each rule inspects the claim snapshot (and the case graph when there is one)
and either returns a ``RuleResult`` or ``None`` when it does not apply. Rules
run in the order of ``RULES``; they never raise on incomplete claims.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field

from ..config import Settings, settings as default_settings
from ..graph import queries
from ..graph.models import CaseGraph
from ..knowledge import CLAIM_CATEGORIES, category_for
from ..schemas import ClaimForScoring
from .eligibility import format_nis

logger = logging.getLogger(__name__)


class RuleSeverity(str, Enum):
    BLOCKER = "blocker"
    WARNING = "warning"
    INFO = "info"


class RuleStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"


class RuleResult(BaseModel):
    rule_id: str
    status: RuleStatus
    severity: RuleSeverity
    title: str
    description: str = ""
    icon: str = ""
    related_node_ids: list[str] = Field(default_factory=list)


class NextAction(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    priority: int  # lower = more urgent


class RulesOutput(BaseModel):
    results: list[RuleResult]
    next_actions: list[NextAction]
    can_file: bool

    @property
    def blockers(self) -> list[RuleResult]:
        return [r for r in self.results if r.status == RuleStatus.FAIL]

    @property
    def warnings(self) -> list[RuleResult]:
        return [r for r in self.results if r.status == RuleStatus.WARN]

    @property
    def infos(self) -> list[RuleResult]:
        return [r for r in self.results if r.severity == RuleSeverity.INFO]


@dataclass
class RuleContext:
    claim: ClaimForScoring
    graph: Optional[CaseGraph]
    config: Settings
    today: date


Rule = Callable[[RuleContext], Optional[RuleResult]]


def evaluate_rules(
    claim: ClaimForScoring,
    graph: Optional[CaseGraph] = None,
    config: Settings | None = None,
    today: Optional[date] = None,
) -> RulesOutput:
    ctx = RuleContext(
        claim=claim,
        graph=graph,
        config=config or default_settings,
        today=today or date.today(),
    )
    results = [r for r in (rule(ctx) for rule in RULES) if r is not None]
    failed = {r.rule_id for r in results if r.status == RuleStatus.FAIL}
    warned = {r.rule_id for r in results if r.status == RuleStatus.WARN}

    logger.debug("Rules evaluated: %d failed, %d warnings", len(failed), len(warned))
    return RulesOutput(
        results=results,
        next_actions=_next_actions(failed, warned),
        can_file=not failed,
    )


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _check(
    rule_id: str,
    ok: bool,
    severity: RuleSeverity,
    title: str,
    description: str,
    icon: str,
    related: Optional[list[str]] = None,
) -> RuleResult:
    if ok:
        status = RuleStatus.PASS
    elif severity == RuleSeverity.BLOCKER:
        status = RuleStatus.FAIL
    else:
        status = RuleStatus.WARN
    return RuleResult(
        rule_id=rule_id,
        status=status,
        severity=severity,
        title=title,
        description="" if ok else description,
        icon=icon,
        related_node_ids=[] if ok else (related or []),
    )


def _filled(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _incident_date(claim: ClaimForScoring) -> Optional[date]:
    """Explicit incident date, else the earliest parseable timeline date."""
    explicit = _parse_date(claim.incident_date)
    if explicit:
        return explicit
    dates = [d for d in (_parse_date(t.date) for t in claim.timeline) if d]
    return min(dates) if dates else None


def _limitation_deadline(incident: date, years: int) -> date:
    try:
        return incident.replace(year=incident.year + years)
    except ValueError:  # 29 February
        return incident.replace(year=incident.year + years, day=28)


# ------------------------------------------------------------------
# Blocker rules
# ------------------------------------------------------------------


def rule_no_plaintiff(ctx: RuleContext) -> RuleResult:
    return _check(
        "no_plaintiff",
        _filled(ctx.claim.plaintiff_name),
        RuleSeverity.BLOCKER,
        "Plaintiff details",
        "Fill in the plaintiff's full name, ID number, phone and address.",
        "🚫",
    )


def rule_plaintiff_missing_id(ctx: RuleContext) -> Optional[RuleResult]:
    if not _filled(ctx.claim.plaintiff_name):
        return None
    return _check(
        "plaintiff_missing_id",
        _filled(ctx.claim.plaintiff_id),
        RuleSeverity.BLOCKER,
        "Plaintiff ID number",
        "The ID number is a mandatory field of the statement of claim.",
        "🪪",
    )


def rule_plaintiff_missing_address(ctx: RuleContext) -> Optional[RuleResult]:
    if not _filled(ctx.claim.plaintiff_name):
        return None
    return _check(
        "plaintiff_missing_address",
        _filled(ctx.claim.plaintiff_address),
        RuleSeverity.BLOCKER,
        "Plaintiff address",
        "A home address is required on the statement of claim.",
        "📍",
    )


def rule_no_defendant(ctx: RuleContext) -> RuleResult:
    return _check(
        "no_defendant",
        _filled(ctx.claim.defendant),
        RuleSeverity.BLOCKER,
        "Defendant",
        "Enter the name of at least one defendant.",
        "🚫",
    )


def _amount(ctx: RuleContext) -> float:
    if ctx.claim.amount and ctx.claim.amount > 0:
        return ctx.claim.amount
    if ctx.graph is not None:
        return queries.get_total_amount(ctx.graph)
    return 0


def rule_no_amount(ctx: RuleContext) -> RuleResult:
    return _check(
        "no_amount",
        _amount(ctx) > 0,
        RuleSeverity.BLOCKER,
        "Claim amount",
        "State the amount you are claiming in NIS.",
        "💰",
    )


def rule_amount_exceeds_limit(ctx: RuleContext) -> Optional[RuleResult]:
    amount = _amount(ctx)
    if amount <= 0:
        return None
    cap = ctx.config.small_claims_max_amount_nis
    return _check(
        "amount_exceeds_limit",
        amount <= cap,
        RuleSeverity.BLOCKER,
        "Amount within the small claims ceiling",
        (
            f"The amount ({format_nis(amount)}) exceeds the ceiling ({format_nis(cap)}). "
            "Reduce it or file in the magistrates' court."
        ),
        "⚠️",
    )


def rule_no_facts_summary(ctx: RuleContext) -> RuleResult:
    ok = _filled(ctx.claim.summary_text)
    if not ok and ctx.graph is not None:
        events = queries.get_events(ctx.graph)
        demands = queries.get_demands(ctx.graph)
        ok = len(events) >= 2 or (len(events) >= 1 and len(demands) >= 1)
    return _check(
        "no_facts_summary",
        ok,
        RuleSeverity.BLOCKER,
        "Description of events",
        "Describe what happened. Finishing the interview will produce the description.",
        "📝",
    )


def rule_statute_expired(ctx: RuleContext) -> Optional[RuleResult]:
    incident = _incident_date(ctx.claim)
    if incident is None:
        return None
    years = ctx.config.statute_of_limitations_years
    deadline = _limitation_deadline(incident, years)
    return _check(
        "statute_expired",
        ctx.today <= deadline,
        RuleSeverity.BLOCKER,
        "Limitation period",
        f"More than {years} years have passed since {incident.isoformat()}; the claim is likely time-barred.",
        "⏰",
    )


# ------------------------------------------------------------------
# Warning rules
# ------------------------------------------------------------------


def rule_statute_approaching(ctx: RuleContext) -> Optional[RuleResult]:
    incident = _incident_date(ctx.claim)
    if incident is None:
        return None
    deadline = _limitation_deadline(incident, ctx.config.statute_of_limitations_years)
    if ctx.today > deadline:
        return None  # reported by rule_statute_expired
    window = timedelta(days=ctx.config.statute_warning_days)
    return _check(
        "statute_approaching",
        deadline - ctx.today > window,
        RuleSeverity.WARNING,
        "Limitation deadline",
        f"The limitation period ends on {deadline.isoformat()}. File before then.",
        "⏳",
    )


def rule_no_prior_notice(ctx: RuleContext) -> Optional[RuleResult]:
    if not category_for(ctx.claim.claim_type).expects_prior_notice:
        return None
    return _check(
        "no_prior_notice",
        ctx.claim.has_prior_notice,
        RuleSeverity.WARNING,
        "Prior notice",
        "The court expects you to have tried to settle first. Send a warning letter.",
        "✉️",
    )


def rule_no_evidence(ctx: RuleContext) -> RuleResult:
    count = ctx.claim.evidence_count
    if ctx.graph is not None:
        count = max(count, len(queries.get_evidence(ctx.graph)))
    return _check(
        "no_evidence",
        count > 0,
        RuleSeverity.WARNING,
        "Evidence",
        "A claim without evidence may be dismissed. Attach receipts, contracts, messages or photos.",
        "📎",
    )


def rule_uncovered_events(ctx: RuleContext) -> Optional[RuleResult]:
    if ctx.graph is None:
        return None
    uncovered = queries.get_uncovered_events(ctx.graph)
    return _check(
        "uncovered_events",
        not uncovered,
        RuleSeverity.WARNING,
        "Events backed by evidence",
        f"{len(uncovered)} events have no supporting evidence. Link evidence to them.",
        "🔗",
        [e.id for e in uncovered],
    )


def rule_unlinked_evidence(ctx: RuleContext) -> Optional[RuleResult]:
    if ctx.graph is None:
        return None
    unlinked = queries.get_unlinked_evidence(ctx.graph)
    return _check(
        "unlinked_evidence",
        not unlinked,
        RuleSeverity.WARNING,
        "Evidence linked to the case",
        f"{len(unlinked)} pieces of evidence are not linked to any event or demand.",
        "📌",
        [e.id for e in unlinked],
    )


def rule_no_timeline(ctx: RuleContext) -> RuleResult:
    ok = bool(ctx.claim.timeline)
    if not ok and ctx.graph is not None:
        ok = bool(queries.get_events(ctx.graph))
    return _check(
        "no_timeline",
        ok,
        RuleSeverity.WARNING,
        "Timeline",
        "A clear timeline of events helps the judge understand the case.",
        "📅",
    )


def rule_vague_summary(ctx: RuleContext) -> Optional[RuleResult]:
    text = ctx.claim.summary_text
    length = len(text) + sum(len(t.text) for t in ctx.claim.timeline)
    if ctx.graph is not None:
        length = max(
            length,
            sum(len(e.data.description or "") for e in queries.get_events(ctx.graph)),
        )
    if length == 0:
        return None  # covered by rule_no_facts_summary
    return _check(
        "vague_summary",
        length >= 100,
        RuleSeverity.WARNING,
        "Level of detail",
        "A more detailed account of the events will improve the claim.",
        "📋",
    )


def rule_no_written_agreement(ctx: RuleContext) -> Optional[RuleResult]:
    category = category_for(ctx.claim.claim_type)
    narrative = " ".join(
        [ctx.claim.summary_text, *(t.text for t in ctx.claim.timeline)]
    ).lower()
    mentions_contract = any(k in narrative for k in CLAIM_CATEGORIES["contract"].keywords)
    if not (category.expects_written_agreement or mentions_contract):
        return None
    ok = ctx.claim.has_written_agreement
    if not ok and ctx.graph is not None:
        ok = any(
            (e.data.tag or "").lower() in ("contract", "agreement")
            for e in queries.get_evidence(ctx.graph)
        )
    return _check(
        "no_written_agreement",
        ok,
        RuleSeverity.WARNING,
        "Written agreement",
        "A claim based on an agreement is stronger with the written agreement attached.",
        "📝",
    )


def rule_no_proof_of_payment(ctx: RuleContext) -> Optional[RuleResult]:
    if not category_for(ctx.claim.claim_type).expects_proof_of_payment or _amount(ctx) <= 0:
        return None
    return _check(
        "no_proof_of_payment",
        ctx.claim.has_proof_of_payment,
        RuleSeverity.WARNING,
        "Proof of payment",
        "Attach a receipt, bank transfer or account statement showing the payment.",
        "💳",
    )


def rule_no_legal_basis(ctx: RuleContext) -> Optional[RuleResult]:
    if ctx.graph is None:
        return None
    demands = queries.get_demands(ctx.graph)
    if not demands:
        return None
    unsubstantiated = [d for d in demands if not (d.data.legal_basis or "").strip()]
    return _check(
        "no_legal_basis",
        not unsubstantiated,
        RuleSeverity.WARNING,
        "Legal basis for demands",
        "Citing the relevant statute for each demand improves the chances of success.",
        "⚖️",
        [d.id for d in unsubstantiated],
    )


# ------------------------------------------------------------------
# Info rules
# ------------------------------------------------------------------


def rule_strong_case(ctx: RuleContext) -> Optional[RuleResult]:
    if ctx.graph is None or not ctx.claim.has_prior_notice:
        return None
    demands = queries.get_demands(ctx.graph)
    if (
        len(queries.get_evidence(ctx.graph)) >= 3
        and len(queries.get_events(ctx.graph)) >= 3
        and demands
        and len(queries.get_covered_demands(ctx.graph)) == len(demands)
    ):
        return RuleResult(
            rule_id="strong_case",
            status=RuleStatus.PASS,
            severity=RuleSeverity.INFO,
            title="The case is strong and well supported",
            description=(
                "There is evidence, a timeline, prior notice and every demand is backed. "
                "Consider moving on to filing."
            ),
            icon="💪",
        )
    return None


RULES: tuple[Rule, ...] = (
    # blockers
    rule_no_plaintiff,
    rule_plaintiff_missing_id,
    rule_plaintiff_missing_address,
    rule_no_defendant,
    rule_no_amount,
    rule_amount_exceeds_limit,
    rule_no_facts_summary,
    rule_statute_expired,
    # warnings
    rule_statute_approaching,
    rule_no_prior_notice,
    rule_no_evidence,
    rule_uncovered_events,
    rule_unlinked_evidence,
    rule_no_timeline,
    rule_vague_summary,
    rule_no_written_agreement,
    rule_no_proof_of_payment,
    rule_no_legal_basis,
    # info
    rule_strong_case,
)


# ------------------------------------------------------------------
# Next actions
# ------------------------------------------------------------------


def _next_actions(failed: set[str], warned: set[str]) -> list[NextAction]:
    actions: list[NextAction] = []

    if failed & {"no_plaintiff", "plaintiff_missing_id", "plaintiff_missing_address"}:
        actions.append(
            NextAction(
                id="complete_plaintiff",
                title="Complete plaintiff details",
                description="Fill in full name, ID number, phone and address.",
                icon="👤",
                priority=1,
            )
        )
    if "no_defendant" in failed:
        actions.append(
            NextAction(
                id="add_defendant",
                title="Add a defendant",
                description="Enter the defendant's name and address.",
                icon="🏢",
                priority=2,
            )
        )
    if failed & {"no_amount", "amount_exceeds_limit"}:
        actions.append(
            NextAction(
                id="set_amount",
                title="Set the claim amount",
                description="State an amount within the small claims ceiling.",
                icon="💰",
                priority=3,
            )
        )
    if "no_facts_summary" in failed:
        actions.append(
            NextAction(
                id="complete_interview",
                title="Finish the interview",
                description="Answer the assistant's questions to build the description of events.",
                icon="🤖",
                priority=4,
            )
        )
    if "statute_expired" in failed:
        actions.append(
            NextAction(
                id="consult_lawyer",
                title="Check the limitation period",
                description="The claim may be time-barred. Confirm the dates with a lawyer.",
                icon="⏰",
                priority=4,
            )
        )
    if "statute_approaching" in warned:
        actions.append(
            NextAction(
                id="file_soon",
                title="File soon",
                description="The limitation deadline is close.",
                icon="⏳",
                priority=5,
            )
        )
    if "no_evidence" in warned:
        actions.append(
            NextAction(
                id="add_evidence",
                title="Add evidence",
                description="Photograph or upload supporting documents.",
                icon="📷",
                priority=5,
            )
        )
    if "no_prior_notice" in warned:
        actions.append(
            NextAction(
                id="send_notice",
                title="Send a warning letter",
                description="Create and send a warning letter to the defendant.",
                icon="✉️",
                priority=6,
            )
        )
    if warned & {"uncovered_events", "unlinked_evidence"}:
        actions.append(
            NextAction(
                id="link_evidence",
                title="Link evidence to events",
                description="Strengthen the case by connecting evidence to the events it proves.",
                icon="🔗",
                priority=7,
            )
        )
    if not failed:
        actions.append(
            NextAction(
                id="generate_pdf",
                title="Generate the statement of claim",
                description="Produce a PDF ready for filing.",
                icon="📄",
                priority=10,
            )
        )
        actions.append(
            NextAction(
                id="mock_trial",
                title="Rehearse with a mock trial",
                description="Practice with an AI judge before the hearing.",
                icon="⚖️",
                priority=11,
            )
        )

    return sorted(actions, key=lambda a: a.priority)
