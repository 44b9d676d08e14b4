"""Score-based template selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from proposal_ai.exceptions import TemplateSelectionError
from proposal_ai.templates.registry import WILDCARD, TemplateDescriptor, TemplateRegistry

log = logging.getLogger(__name__)

EXACT_MATCH_SCORE = 3.0
WILDCARD_MATCH_SCORE = 1.0
DEFAULT_TIEBREAK_SCORE = 0.5


@dataclass(frozen=True)
class SelectionCriteria:
    """What the caller knows about the proposal when picking a template."""

    template_id: str | None = None
    industry: str | None = None
    project_type: str | None = None


def _dimension_score(values: frozenset[str], requested: str | None) -> float:
    if not requested:
        return 0.0
    if requested in values:
        return EXACT_MATCH_SCORE
    if WILDCARD in values:
        return WILDCARD_MATCH_SCORE
    return 0.0


class TemplateSelector:
    """Picks the best template from a registry.

    An explicit, known ``template_id`` always wins. Otherwise every template
    is scored on industry and project type; the highest score wins and ties
    go to the lexicographically smallest id.
    """

    def __init__(self, registry: TemplateRegistry) -> None:
        self._registry = registry

    def score(self, descriptor: TemplateDescriptor, criteria: SelectionCriteria) -> float:
        """Score a single template against the criteria."""
        score = _dimension_score(descriptor.industries, criteria.industry)
        score += _dimension_score(descriptor.project_types, criteria.project_type)
        if score == 0 and descriptor.id == self._registry.default_template_id:
            score = DEFAULT_TIEBREAK_SCORE
        return score

    def select(self, criteria: SelectionCriteria) -> TemplateDescriptor:
        """Return the best template for ``criteria``.

        Raises:
            TemplateSelectionError: If the registry is empty.
        """
        templates = self._registry.list()
        if not templates:
            raise TemplateSelectionError("No templates available")

        if criteria.template_id:
            if self._registry.has(criteria.template_id):
                selected = self._registry.get(criteria.template_id)
                log.info("Selected template by id: %s", selected.id)
                return selected
            log.warning("Template %s not found, selecting by score", criteria.template_id)

        # list() is sorted by id, so max() keeps the first (smallest id) on ties
        best = max(templates, key=lambda t: self.score(t, criteria))
        log.info(
            "Selected template %s (score %.1f) for industry=%s project_type=%s",
            best.id,
            self.score(best, criteria),
            criteria.industry,
            criteria.project_type,
        )
        return best
