"""Document assembler: turns a ProposalResult into a downloadable artifact.

Always yields a file. When the template deck is missing or substitution
fails, a plain-text summary with the same basename is written instead.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from proposal_ai.assembly.placeholders import build_placeholders
from proposal_ai.assembly.static_sections import StaticSection, resolve_static_sections
from proposal_ai.exceptions import DocumentAssemblyError
from proposal_ai.formatters.pptx_formatter import PptxFormatter
from proposal_ai.formatters.protocols import DeckSection
from proposal_ai.formatters.text_formatter import TextFormatter
from proposal_ai.generation.models import ProposalResult
from proposal_ai.models import IntakeData
from proposal_ai.prompts.renderer import PromptRenderer
from proposal_ai.slides.models import GlobalConfig
from proposal_ai.templates.registry import TemplateDescriptor

log = logging.getLogger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9_-]+")


@dataclass(frozen=True)
class AssembledDocument:
    """Where the artifact was written and what went into it."""

    path: Path
    is_fallback: bool
    placeholders: dict[str, str] = field(default_factory=dict)
    unreplaced: tuple[str, ...] = ()


def sanitize_company_name(company_name: str) -> str:
    cleaned = _UNSAFE_FILENAME_RE.sub("-", company_name.strip()).strip("-")
    return cleaned or "client"


def output_basename(company_name: str, timestamp_ms: int) -> str:
    """``proposal-<sanitized-company>-<epoch-ms>`` (no extension)."""
    return f"proposal-{sanitize_company_name(company_name)}-{timestamp_ms}"


class DocumentAssembler:
    """Builds the placeholder map and writes the deck (or its text fallback)."""

    def __init__(
        self,
        renderer: Optional[PromptRenderer] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._renderer = renderer or PromptRenderer()
        self._clock = clock
        self._text = TextFormatter()

    def static_sections(self, intake: IntakeData, config: GlobalConfig) -> list[StaticSection]:
        return resolve_static_sections(intake, config.sorted_static_slides())

    def build_placeholders(
        self,
        proposal: ProposalResult,
        intake: IntakeData,
        config: GlobalConfig,
        template: Optional[TemplateDescriptor] = None,
    ) -> dict[str, str]:
        return build_placeholders(
            proposal,
            intake,
            config,
            self.static_sections(intake, config),
            global_mappings=template.global_mappings if template is not None else None,
            renderer=self._renderer,
        )

    def linear_sections(
        self,
        proposal: ProposalResult,
        intake: IntakeData,
        config: GlobalConfig,
    ) -> list[DeckSection]:
        """Static and generated sections interleaved by ``order``."""
        sections = [
            DeckSection(title=s.title, content=s.content, order=s.order)
            for s in self.static_sections(intake, config)
        ]
        orders = {slide.id: slide.order for slide in config.slides}
        for slide in proposal.slides:
            sections.append(
                DeckSection(
                    title=slide.title,
                    content=slide.content,
                    order=orders.get(slide.slide_id, 0),
                    confidence=slide.confidence,
                )
            )
        return sorted(sections, key=lambda s: s.order)

    def assemble(
        self,
        proposal: ProposalResult,
        intake: IntakeData,
        template: Optional[TemplateDescriptor],
        config: GlobalConfig,
        output_dir: Path,
    ) -> AssembledDocument:
        """Write the proposal deck into ``output_dir`` and describe the result."""
        output_dir.mkdir(parents=True, exist_ok=True)
        basename = output_basename(intake.company_name, int(self._clock() * 1000))
        placeholders = self.build_placeholders(proposal, intake, config, template)

        try:
            if template is None:
                raise DocumentAssemblyError("No template selected")
            formatter = PptxFormatter(template.template_path)
            path = formatter.format_to_file(
                proposal, output_dir / f"{basename}{formatter.extension}", placeholders=placeholders
            )
            log.info("Presentation written to %s", path)
            return AssembledDocument(
                path=path,
                is_fallback=False,
                placeholders=placeholders,
                unreplaced=tuple(formatter.unreplaced),
            )
        except DocumentAssemblyError as exc:
            log.warning("Document assembly failed, writing text fallback: %s", exc)
        except Exception:
            log.exception("Document assembly failed, writing text fallback")

        path = self._text.format_to_file(
            proposal,
            output_dir / f"{basename}{self._text.extension}",
            sections=self.linear_sections(proposal, intake, config),
        )
        log.info("Fallback summary written to %s", path)
        return AssembledDocument(path=path, is_fallback=True, placeholders=placeholders)
