"""Scoring engine: confidence scores and warning strings for generated slides.

Scoring is pure computation, no LLM calls. The compliance pass is
informational; it never feeds back into the score beyond the penalties the
rule table already applies.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from proposal_ai.scoring.rules import (
    CONTAINS_RISKY_TERM,
    HAS_QUALIFYING_TERMS,
    MISSING_METRICS,
    MISSING_REQUIRED_KEYWORD,
    TOO_LONG,
    TOO_SHORT,
    ScoringRule,
    any_term_present,
    contains_term,
    count_terms_absent,
    count_terms_present,
    evaluate_rules,
    fired_rules,
    has_digits,
    lacks_digits,
    word_count,
    word_count_above,
    word_count_below,
)
from proposal_ai.slides.models import ComplianceTerms, SlideDefinition

log = logging.getLogger(__name__)

DEFAULT_BASE_SCORE = 85.0
DEFAULT_BULLET_CHAR = "•"

# Penalties applied even when a slide's scoring block leaves them unset
_DEFAULT_PENALTIES: dict[str, float] = {
    TOO_SHORT: 20.0,
    TOO_LONG: 10.0,
    MISSING_METRICS: 10.0,
}


@dataclass(frozen=True)
class ScoreResult:
    """Confidence score plus every warning raised for one slide."""

    confidence: int
    warnings: list[str] = field(default_factory=list)


class ScoringEngine:
    """Builds a rule table per slide and evaluates it with one interpreter."""

    def __init__(self, base_score: float = DEFAULT_BASE_SCORE) -> None:
        self._base_score = base_score

    def build_rules(self, slide: SlideDefinition, compliance: ComplianceTerms) -> list[ScoringRule]:
        """Translate a slide's ``scoring``/``validation`` blocks into rules."""
        penalties = dict(slide.scoring.penalties) if slide.scoring else {}
        bonuses = dict(slide.scoring.bonuses) if slide.scoring else {}

        def penalty(name: str) -> float:
            return -penalties.get(name, _DEFAULT_PENALTIES.get(name, 0.0))

        rules: list[ScoringRule] = []
        if compliance.risky_terms:
            rules.append(
                ScoringRule(CONTAINS_RISKY_TERM, penalty(CONTAINS_RISKY_TERM),
                            count_terms_present(compliance.risky_terms))
            )
        if compliance.qualifying_terms:
            rules.append(
                ScoringRule(HAS_QUALIFYING_TERMS, bonuses.get(HAS_QUALIFYING_TERMS, 0.0),
                            any_term_present(compliance.qualifying_terms))
            )

        validation = slide.validation
        if validation is not None:
            if validation.min_word_count:
                rules.append(
                    ScoringRule(TOO_SHORT, penalty(TOO_SHORT), word_count_below(validation.min_word_count))
                )
            if validation.max_word_count:
                rules.append(
                    ScoringRule(TOO_LONG, penalty(TOO_LONG), word_count_above(validation.max_word_count))
                )
            if validation.required_keywords:
                rules.append(
                    ScoringRule(MISSING_REQUIRED_KEYWORD, penalty(MISSING_REQUIRED_KEYWORD),
                                count_terms_absent(validation.required_keywords))
                )
            if validation.should_contain_numbers:
                rules.append(ScoringRule(MISSING_METRICS, penalty(MISSING_METRICS), lacks_digits))
        return rules

    def base_score(self, slide: SlideDefinition) -> float:
        if slide.scoring is not None and slide.scoring.base_score is not None:
            return slide.scoring.base_score
        return self._base_score

    def score(self, content: str, slide: SlideDefinition, compliance: ComplianceTerms) -> int:
        """Return the confidence score in [0, 100] for ``content``."""
        rules = self.build_rules(slide, compliance)
        confidence = evaluate_rules(self.base_score(slide), rules, content)
        log.debug(
            "Scored slide %s: %d (fired: %s)", slide.id, confidence, fired_rules(rules, content)
        )
        return confidence

    # ── Warnings ────────────────────────────────────────────────────

    @staticmethod
    def compliance_warnings(content: str, compliance: ComplianceTerms) -> list[str]:
        """One warning per risky term (substring) and per absolute term (whole word)."""
        warnings = [
            f"Contains risky term: {term} - consider revision"
            for term in compliance.risky_terms
            if contains_term(content, term)
        ]
        for term in compliance.absolute_terms:
            if re.search(rf"\b{re.escape(term)}\b", content, re.IGNORECASE):
                warnings.append(f"Absolute statement detected: {term} - consider qualifying")
        return warnings

    @staticmethod
    def validation_warnings(
        content: str,
        slide: SlideDefinition,
        bullet_char: str | None = None,
    ) -> list[str]:
        """Warnings for word-count bounds, missing keywords, bullet count and metrics."""
        validation = slide.validation
        if validation is None:
            return []

        warnings: list[str] = []
        words = word_count(content)
        if validation.min_word_count and words < validation.min_word_count:
            warnings.append(
                f"Content too short: {words} words (minimum: {validation.min_word_count})"
            )
        if validation.max_word_count and words > validation.max_word_count:
            warnings.append(
                f"Content too long: {words} words (maximum: {validation.max_word_count})"
            )
        for keyword in validation.required_keywords:
            if not contains_term(content, keyword):
                warnings.append(f"Missing required keyword: {keyword}")

        bullet = bullet_char or DEFAULT_BULLET_CHAR
        bullets = sum(1 for line in content.split("\n") if line.strip().startswith(bullet))
        if validation.max_bullets and bullets > validation.max_bullets:
            warnings.append(
                f"Too many bullet points: {bullets} (maximum: {validation.max_bullets})"
            )
        if validation.should_contain_numbers and not has_digits(content):
            warnings.append("Missing quantifiable metrics")
        return warnings

    def evaluate(
        self,
        content: str,
        slide: SlideDefinition,
        compliance: ComplianceTerms,
        *,
        bullet_char: str | None = None,
    ) -> ScoreResult:
        """Score ``content`` and collect compliance then validation warnings."""
        warnings = self.compliance_warnings(content, compliance)
        warnings.extend(self.validation_warnings(content, slide, bullet_char))
        return ScoreResult(confidence=self.score(content, slide, compliance), warnings=warnings)
