"""Data-driven scoring rules and the interpreter that evaluates them.

A rule is ``(name, weight, predicate)``: the predicate returns how many
times the rule fires on a piece of content and the weight is added once per
firing. Penalties carry negative weights, bonuses positive ones.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Callable

MIN_SCORE = 0
MAX_SCORE = 100

# Rule names as they appear under ``scoring.penalties`` / ``scoring.bonuses``
CONTAINS_RISKY_TERM = "contains_risky_term"
TOO_SHORT = "too_short"
TOO_LONG = "too_long"
MISSING_REQUIRED_KEYWORD = "missing_required_keyword"
MISSING_METRICS = "missing_metrics"
HAS_QUALIFYING_TERMS = "has_qualifying_terms"

_DIGITS_RE = re.compile(r"\d+")

Predicate = Callable[[str], int]


@dataclass(frozen=True)
class ScoringRule:
    """One entry of a slide's scoring table."""

    name: str
    weight: float
    predicate: Predicate

    def contribution(self, content: str) -> float:
        hits = self.predicate(content)
        return self.weight * hits if hits else 0.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (unlike Python's banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(value)))


def evaluate_rules(base_score: float, rules: Iterable[ScoringRule], content: str) -> int:
    """Apply every rule to ``content`` and return the clamped, rounded score."""
    score = base_score
    for rule in rules:
        score += rule.contribution(content)
    return clamp_score(score)


def fired_rules(rules: Iterable[ScoringRule], content: str) -> list[str]:
    """Names of rules that changed the score for ``content``."""
    return [rule.name for rule in rules if rule.contribution(content)]


# ── Predicates ──────────────────────────────────────────────────────


def word_count(content: str) -> int:
    return len(content.split())


def contains_term(content: str, term: str) -> bool:
    """Case-insensitive substring containment."""
    return term.lower() in content.lower()


def count_terms_present(terms: Sequence[str]) -> Predicate:
    return lambda content: sum(1 for t in terms if contains_term(content, t))


def any_term_present(terms: Sequence[str]) -> Predicate:
    return lambda content: int(any(contains_term(content, t) for t in terms))


def count_terms_absent(terms: Sequence[str]) -> Predicate:
    return lambda content: sum(1 for t in terms if not contains_term(content, t))


def word_count_below(minimum: int) -> Predicate:
    return lambda content: int(word_count(content) < minimum)


def word_count_above(maximum: int) -> Predicate:
    return lambda content: int(word_count(content) > maximum)


def has_digits(content: str) -> bool:
    return _DIGITS_RE.search(content) is not None


def lacks_digits(content: str) -> int:
    return int(not has_digits(content))
