"""Proposal service: orchestrates selection, generation and assembly end to end."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from proposal_ai.assembly.assembler import AssembledDocument, DocumentAssembler
from proposal_ai.core.config import AppSettings
from proposal_ai.exceptions import ConfigurationError
from proposal_ai.extraction.extractors import CompositeExtractor, build_document_context
from proposal_ai.extraction.protocols import IDocumentExtractor
from proposal_ai.generation.coordinator import GenerationCoordinator, ProgressCallback
from proposal_ai.generation.models import ProposalResult, SlideResult
from proposal_ai.models import IntakeData
from proposal_ai.prompts.renderer import PromptRenderer
from proposal_ai.providers.protocols import ITextProvider
from proposal_ai.slides.models import SlideDefinition
from proposal_ai.slides.store import ConfigStore
from proposal_ai.templates.registry import TemplateDescriptor, TemplateRegistry
from proposal_ai.templates.selector import SelectionCriteria, TemplateSelector

log = logging.getLogger(__name__)

# Every intake field filled, so unresolved names point at the template itself
SAMPLE_INTAKE = IntakeData(
    company_name="Sample Co",
    industry="Technology",
    business_challenge="Business optimization",
    project_type="Modernization",
    tech_stack="Not specified",
    duration="TBD",
    budget_range="TBD",
    success_criteria="Not specified",
)


@dataclass(frozen=True)
class DeckResult:
    """A generated proposal together with the artifact written for it."""

    proposal: ProposalResult
    document: AssembledDocument
    template: TemplateDescriptor


class ProposalService:
    """High-level entry point used by the CLI and embedding applications."""

    def __init__(
        self,
        settings: AppSettings,
        provider: ITextProvider,
        *,
        registry: Optional[TemplateRegistry] = None,
        extractor: Optional[IDocumentExtractor] = None,
    ) -> None:
        self._settings = settings
        if registry is None:
            templates = settings.templates
            registry = TemplateRegistry(
                templates.templates_dir,
                legacy_config_path=templates.legacy_config_path,
                legacy_template_path=templates.legacy_template_path,
                default_template_id=templates.default_template_id,
                watch_interval=templates.watch_interval_seconds,
            )
            registry.discover()
        self._registry = registry
        self._selector = TemplateSelector(registry)
        self._renderer = PromptRenderer(settings.generation.document_context_chars)
        self._coordinator = GenerationCoordinator(
            provider,
            self._renderer,
            default_max_tokens=settings.generation.default_max_tokens,
            default_temperature=settings.generation.default_temperature,
        )
        self._assembler = DocumentAssembler(self._renderer)
        self._extractor = extractor or CompositeExtractor()

    @property
    def registry(self) -> TemplateRegistry:
        return self._registry

    # ── Templates & configuration ───────────────────────────────────

    def select_template(
        self, intake: Optional[IntakeData] = None, template_id: Optional[str] = None
    ) -> TemplateDescriptor:
        criteria = SelectionCriteria(
            template_id=template_id,
            industry=intake.industry if intake else None,
            project_type=intake.project_type if intake else None,
        )
        return self._selector.select(criteria)

    def config_store(self, template: TemplateDescriptor) -> ConfigStore:
        store = self._registry.config_store(template.id)
        if self._settings.templates.hot_reload:
            store.start_watching()
        return store

    def list_templates(self) -> list[TemplateDescriptor]:
        return self._registry.list()

    def list_slides(self, template_id: Optional[str] = None) -> list[SlideDefinition]:
        template = self.select_template(template_id=template_id)
        return self.config_store(template).enabled_slides()

    def configuration_status(self, template_id: Optional[str] = None) -> dict[str, Any]:
        template = self.select_template(template_id=template_id)
        status = self.config_store(template).status()
        status["template_id"] = template.id
        status["template_name"] = template.name
        return status

    def reload(self, template_id: Optional[str] = None) -> bool:
        template = self.select_template(template_id=template_id)
        return self.config_store(template).reload()

    def check_prompts(
        self,
        template_id: Optional[str] = None,
        intake: Optional[IntakeData] = None,
    ) -> dict[str, list[str]]:
        """Unresolved prompt variables per enabled slide (slides with none are omitted)."""
        template = self.select_template(template_id=template_id)
        report: dict[str, list[str]] = {}
        for slide in self.config_store(template).enabled_slides():
            context = self._renderer.build_context(intake or SAMPLE_INTAKE, "", slide.prompt.variables)
            missing = self._renderer.find_unresolved(slide.prompt.template, context)
            if missing:
                report[slide.id] = missing
        return report

    # ── Generation ──────────────────────────────────────────────────

    def document_context(self, attachments: list[Path]) -> str:
        if not attachments:
            return ""
        return build_document_context(
            attachments, self._extractor, self._settings.generation.document_context_chars
        )

    async def generate_proposal(
        self,
        intake: IntakeData,
        *,
        attachments: Optional[list[Path]] = None,
        template_id: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ProposalResult:
        """Select a template and generate every enabled slide.

        Raises:
            TemplateSelectionError: If no templates are registered.
        """
        template = self.select_template(intake, template_id)
        config = self.config_store(template).snapshot()
        return await self._coordinator.generate_all(
            config,
            intake,
            self.document_context(attachments or []),
            progress,
            template_id=template.id,
        )

    async def generate_deck(
        self,
        intake: IntakeData,
        *,
        attachments: Optional[list[Path]] = None,
        template_id: Optional[str] = None,
        output_dir: Optional[Path] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> DeckResult:
        """Generate a proposal and write its deck (or text fallback).

        Raises:
            TemplateSelectionError: If no templates are registered.
        """
        template = self.select_template(intake, template_id)
        # one snapshot for the whole request
        config = self.config_store(template).snapshot()
        proposal = await self._coordinator.generate_all(
            config,
            intake,
            self.document_context(attachments or []),
            progress,
            template_id=template.id,
        )
        document = self._assembler.assemble(
            proposal,
            intake,
            template,
            config,
            output_dir or self._settings.output.output_dir,
        )
        return DeckResult(proposal=proposal, document=document, template=template)

    async def preview_slide(
        self,
        slide_id: str,
        intake: IntakeData,
        *,
        template_id: Optional[str] = None,
        document_context: str = "",
    ) -> SlideResult:
        """Generate one slide without assembling a document.

        Raises:
            ConfigurationError: If the slide is unknown or disabled.
            SlideGenerationError: If generation fails.
        """
        template = self.select_template(intake, template_id)
        config = self.config_store(template).snapshot()
        slide = config.get_slide(slide_id)
        if slide is None:
            raise ConfigurationError(f"Slide {slide_id!r} not found or disabled in {template.id}")
        return await self._coordinator.generate_slide(slide, config, intake, document_context)

    def close(self) -> None:
        self._registry.close()

