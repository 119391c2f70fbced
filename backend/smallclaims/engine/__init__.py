from .confidence import ConfidenceResult, ScoreBreakdown, calculate_confidence, recalculate_confidence
from .eligibility import EligibilityInput, EligibilityResult, check_eligibility, is_quick_eligible
from .graph_scoring import GraphScoreResult, score_graph
from .rules import RulesOutput, evaluate_rules

__all__ = [
    "ConfidenceResult",
    "EligibilityInput",
    "EligibilityResult",
    "GraphScoreResult",
    "RulesOutput",
    "ScoreBreakdown",
    "calculate_confidence",
    "check_eligibility",
    "evaluate_rules",
    "is_quick_eligible",
    "recalculate_confidence",
    "score_graph",
]
