"""Builds the flat placeholder map substituted into the output document.

Keys are bare placeholder names (``COMPANY_NAME``); the document token for a
name is always ``{NAME}``. Configuration may spell names either way.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from proposal_ai.assembly.static_sections import CONTENT_NOT_AVAILABLE, StaticSection
from proposal_ai.exceptions import PromptRenderError
from proposal_ai.generation.models import ProposalResult
from proposal_ai.models import IntakeData
from proposal_ai.prompts.renderer import PromptRenderer
from proposal_ai.slides.models import GlobalConfig

log = logging.getLogger(__name__)

REVIEW_NOTES_PREFIX = "⚠️ Review Notes: "


def placeholder_name(name: str) -> str:
    """``"{OVERVIEW_CONTENT}"`` or ``"OVERVIEW_CONTENT"`` → ``"OVERVIEW_CONTENT"``."""
    name = name.strip()
    if name.startswith("{") and name.endswith("}"):
        name = name[1:-1].strip()
    return name


def as_token(name: str) -> str:
    return "{" + placeholder_name(name) + "}"


def format_confidence(confidence: int) -> str:
    return f"{confidence}%"


def format_warnings(warnings: list[str]) -> str:
    if not warnings:
        return ""
    return REVIEW_NOTES_PREFIX + "; ".join(warnings)


def format_date(value: datetime) -> str:
    """Long US date, e.g. ``October 18, 2026``."""
    return f"{value:%B} {value.day}, {value.year}"


def intake_placeholders(intake: IntakeData, proposal: ProposalResult) -> dict[str, str]:
    resolved = intake.resolved()
    return {
        "COMPANY_NAME": intake.company_name,
        "PROJECT_TYPE": f"{intake.project_type} Initiative",
        "DATE": format_date(proposal.metadata.generated_at),
        "INDUSTRY": intake.industry,
        "BUSINESS_CHALLENGE": intake.business_challenge,
        "TECH_STACK": resolved["tech_stack"],
        "BUDGET_RANGE": resolved["budget_range"],
        "DURATION": resolved["duration"],
        "SUCCESS_CRITERIA": resolved["success_criteria"],
        "CONFIDENCE_SCORE": format_confidence(proposal.overall_confidence),
    }


def build_placeholders(
    proposal: ProposalResult,
    intake: IntakeData,
    config: GlobalConfig,
    static_sections: list[StaticSection],
    *,
    global_mappings: Optional[dict[str, str]] = None,
    renderer: Optional[PromptRenderer] = None,
) -> dict[str, str]:
    """Merge intake, static sections, slide results and template mappings (later wins)."""
    placeholders = intake_placeholders(intake, proposal)

    for section in static_sections:
        mapping = section.placeholder_mapping
        if "title" in mapping:
            placeholders[placeholder_name(mapping["title"])] = section.title
        if "content" in mapping:
            placeholders[placeholder_name(mapping["content"])] = section.content

    for slide in config.enabled_slides():
        result = proposal.get(slide.id)
        mapping = slide.placeholder_mapping
        placeholders[placeholder_name(mapping.content)] = (
            result.content if result is not None else CONTENT_NOT_AVAILABLE
        )
        if mapping.title:
            placeholders[placeholder_name(mapping.title)] = slide.title
        if mapping.confidence:
            confidence = result.confidence if result is not None else 0
            placeholders[placeholder_name(mapping.confidence)] = format_confidence(confidence)
        if mapping.warnings:
            warnings = result.warnings if result is not None else []
            placeholders[placeholder_name(mapping.warnings)] = format_warnings(warnings)

    if global_mappings:
        renderer = renderer or PromptRenderer()
        context = renderer.build_context(intake)
        for name, template in global_mappings.items():
            try:
                placeholders[placeholder_name(name)] = renderer.render(template, context)
            except PromptRenderError as exc:
                log.warning("Skipping global mapping %s: %s", name, exc)

    log.debug("Built %d placeholder(s)", len(placeholders))
    return placeholders
