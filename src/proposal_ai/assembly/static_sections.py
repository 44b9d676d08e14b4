"""Sections assembled directly from intake data, never generated.

The built-in problem statement, assumptions and client responsibilities
blocks come from fixed heuristics. A configuration's ``static_slides`` may
override any of them by id or add new ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from proposal_ai.models import IntakeData
from proposal_ai.slides.models import StaticSlideDefinition

BULLET = "•"
CONTENT_NOT_AVAILABLE = "Content not available"

PROBLEM_STATEMENT = "problem_statement"
ASSUMPTIONS = "assumptions"
CLIENT_RESPONSIBILITIES = "client_responsibilities"

_MAX_PROBLEM_POINTS = 5
_MIN_THEMED_POINTS = 4

# (keywords in the business challenge, bullet text); "{industry}" is filled in
_CHALLENGE_THEMES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("compet", "market share", "losing customers"),
     "{industry} competition pressures require immediate modernization"),
    (("legacy", "outdated", "system", "technology"),
     "Legacy technology infrastructure limits operational efficiency and growth"),
    (("customer", "experience", "service"),
     "Current systems cannot deliver modern customer expectations"),
    (("digital", "online", "e-commerce", "omnichannel"),
     "Digital capabilities gap threatens competitive positioning"),
    (("manual", "process", "efficiency", "productivity"),
     "Manual processes create bottlenecks and limit scalability"),
)

_GENERIC_PROBLEM_POINTS = (
    "Legacy systems hindering competitive advantage and growth",
    "Operational inefficiencies impacting customer satisfaction",
    "Technology gaps limiting business agility and innovation",
    "Digital transformation required for market leadership",
)

_CLIENT_RESPONSIBILITIES = (
    "Designate primary project sponsor and decision-maker",
    "Provide subject matter experts for requirements gathering",
    "Provide system access, databases, and documentation",
    "Configure network connectivity and security permissions",
    "Allocate internal resources for testing and validation",
    "Participate in status meetings and deliverable reviews",
)


def as_bullets(points: list[str] | tuple[str, ...]) -> str:
    return "\n".join(f"{BULLET} {point}" for point in points)


def problem_statement(intake: IntakeData) -> str:
    """Executive problem summary from themes detected in the business challenge."""
    challenge = intake.business_challenge.lower()
    points = [
        text.format(industry=intake.industry or "Market")
        for keywords, text in _CHALLENGE_THEMES
        if any(k in challenge for k in keywords)
    ]
    if len(points) < _MIN_THEMED_POINTS:
        points.append(f"{intake.industry} industry demands require strategic technology investment")
    if intake.duration and len(points) < _MIN_THEMED_POINTS:
        points.append(f"{intake.duration} implementation timeline requires focused execution")
    if not points:
        points = list(_GENERIC_PROBLEM_POINTS)
    return as_bullets(points[:_MAX_PROBLEM_POINTS])


def discovery_summary(intake: IntakeData) -> str:
    """The intake itself restated as bullets."""
    return as_bullets(
        [
            f"{intake.company_name} is facing {intake.business_challenge}",
            f"Current technology stack: {intake.tech_stack or 'Legacy systems'}",
            f"Project scope: {intake.project_type} over {intake.duration or 'TBD'}",
            f"Budget allocation: {intake.budget_range or 'To be determined'}",
            f"Success measured by: {intake.success_criteria or 'Business objectives'}",
        ]
    )


def assumptions(intake: IntakeData) -> str:
    points = ["Current systems remain operational during implementation"]
    if intake.duration:
        points.append(f"{intake.duration} timeline assumes full client availability")
    else:
        points.append("Timeline assumes full client availability and decisions")
    if intake.budget_range:
        points.append(f"{intake.budget_range} budget includes all specified requirements")
    else:
        points.append("Budget includes all currently specified requirements")
    points.append("Key stakeholders available for validation and testing")
    points.append("Client provides system access and documentation")
    return as_bullets(points)


def client_responsibilities(intake: IntakeData) -> str:
    return as_bullets(_CLIENT_RESPONSIBILITIES)


# ── Section table ───────────────────────────────────────────────────


@dataclass(frozen=True)
class StaticSection:
    """A resolved static section ready for placeholder substitution."""

    id: str
    order: int
    title: str
    content: str
    placeholder_mapping: dict[str, str]


@dataclass(frozen=True)
class _BuiltinSection:
    id: str
    order: int
    title: str
    title_token: str
    content_token: str
    builder: Callable[[IntakeData], str]


_BUILTIN_SECTIONS: tuple[_BuiltinSection, ...] = (
    _BuiltinSection(PROBLEM_STATEMENT, 0, "Problem Statement",
                    "PROBLEM_TITLE", "PROBLEM_CONTENT", problem_statement),
    _BuiltinSection(ASSUMPTIONS, 90, "Assumptions",
                    "ASSUMPTIONS_TITLE", "ASSUMPTIONS_CONTENT", assumptions),
    _BuiltinSection(CLIENT_RESPONSIBILITIES, 91, "Client Responsibilities",
                    "CLIENT_RESPONSIBILITIES_TITLE", "CLIENT_RESPONSIBILITIES_CONTENT",
                    client_responsibilities),
)

_BUILDERS: dict[str, Callable[[IntakeData], str]] = {b.id: b.builder for b in _BUILTIN_SECTIONS}


def _configured_content(definition: StaticSlideDefinition, intake: IntakeData) -> str:
    if definition.source == "discovery_data":
        return discovery_summary(intake)
    if definition.source == "template":
        builder = _BUILDERS.get(definition.id)
        return builder(intake) if builder else CONTENT_NOT_AVAILABLE
    return definition.content or CONTENT_NOT_AVAILABLE


def resolve_static_sections(
    intake: IntakeData,
    configured: list[StaticSlideDefinition] | tuple[StaticSlideDefinition, ...] = (),
) -> list[StaticSection]:
    """Built-in sections overlaid with configured ones, sorted by order."""
    sections: dict[str, StaticSection] = {
        b.id: StaticSection(
            id=b.id,
            order=b.order,
            title=b.title,
            content=b.builder(intake),
            placeholder_mapping={"title": b.title_token, "content": b.content_token},
        )
        for b in _BUILTIN_SECTIONS
    }
    for definition in configured:
        sections[definition.id] = StaticSection(
            id=definition.id,
            order=definition.order,
            title=definition.title,
            content=_configured_content(definition, intake),
            placeholder_mapping=dict(definition.placeholder_mapping),
        )
    return sorted(sections.values(), key=lambda s: s.order)
