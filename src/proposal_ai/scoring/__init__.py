"""Rule-based confidence scoring and compliance warnings."""

from __future__ import annotations

from proposal_ai.scoring.engine import ScoreResult, ScoringEngine
from proposal_ai.scoring.rules import ScoringRule, evaluate_rules, round_half_up

__all__ = [
    "ScoreResult",
    "ScoringEngine",
    "ScoringRule",
    "evaluate_rules",
    "round_half_up",
]
