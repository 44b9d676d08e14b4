"""Generation coordinator: renders, generates, normalizes and scores each slide.

Slides run strictly one after another so progress events arrive in slide
order and provider load stays predictable. A failure on one slide is
recorded on that slide's result and the batch carries on.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable
from typing import Any, Callable, Optional, Union

from proposal_ai.exceptions import SlideGenerationError
from proposal_ai.generation.models import ProposalMetadata, ProposalResult, SlideResult
from proposal_ai.generation.normalizer import ContentNormalizer
from proposal_ai.models import IntakeData
from proposal_ai.prompts.renderer import PromptRenderer
from proposal_ai.providers.protocols import ITextProvider
from proposal_ai.scoring.engine import ScoringEngine
from proposal_ai.slides.models import GlobalConfig, SlideDefinition

log = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7
NO_CONTENT = "No content generated"

ProgressCallback = Callable[[str, int, int], Union[None, Awaitable[None]]]


class GenerationCoordinator:
    """Turns a configuration snapshot and intake data into slide results."""

    def __init__(
        self,
        provider: ITextProvider,
        renderer: PromptRenderer | None = None,
        scoring: ScoringEngine | None = None,
        *,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
        default_temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self._provider = provider
        self._renderer = renderer or PromptRenderer()
        self._scoring = scoring or ScoringEngine()
        self._default_max_tokens = default_max_tokens
        self._default_temperature = default_temperature

    async def generate_all(
        self,
        config: GlobalConfig,
        intake: IntakeData,
        document_context: str = "",
        progress: Optional[ProgressCallback] = None,
        *,
        template_id: str = "",
    ) -> ProposalResult:
        """Generate every enabled slide in ``order``; never raises for a single slide."""
        slides = config.enabled_slides()
        total = len(slides)
        normalizer = ContentNormalizer(config.global_formatting)
        result = ProposalResult(
            metadata=ProposalMetadata(
                client=intake.company_name,
                industry=intake.industry,
                project_type=intake.project_type,
                template_id=template_id,
            )
        )
        log.info("Generating %d slide(s) for %s", total, intake.company_name)

        for index, slide in enumerate(slides, start=1):
            try:
                slide_result = await self._generate(slide, config, intake, document_context, normalizer)
            except Exception as exc:
                log.exception("Error generating slide %s", slide.id)
                slide_result = SlideResult.failure(
                    slide.id, slide.title, exc, slide.placeholder_mapping.model_dump(exclude_none=True)
                )
            result.slides.append(slide_result)
            await self._emit(progress, slide.title, index, total)

        log.info(
            "Generated %d slide(s), %d failed, overall confidence %d",
            total,
            len(result.failed_slides),
            result.overall_confidence,
        )
        return result

    async def generate_slide(
        self,
        slide: SlideDefinition,
        config: GlobalConfig,
        intake: IntakeData,
        document_context: str = "",
    ) -> SlideResult:
        """Generate a single slide.

        Raises:
            SlideGenerationError: If rendering or the provider call fails.
        """
        normalizer = ContentNormalizer(config.global_formatting)
        try:
            return await self._generate(slide, config, intake, document_context, normalizer)
        except Exception as exc:
            raise SlideGenerationError(slide.id, f"Error generating {slide.title}: {exc}") from exc

    # ── Internals ───────────────────────────────────────────────────

    async def _generate(
        self,
        slide: SlideDefinition,
        config: GlobalConfig,
        intake: IntakeData,
        document_context: str,
        normalizer: ContentNormalizer,
    ) -> SlideResult:
        context = self._renderer.build_context(intake, document_context, slide.prompt.variables)
        prompt = self._renderer.render(slide.prompt.template, context)

        defaults = config.defaults
        max_tokens = defaults.max_tokens if defaults.max_tokens is not None else self._default_max_tokens
        temperature = (
            defaults.temperature if defaults.temperature is not None else self._default_temperature
        )

        messages: list[dict[str, Any]] = [{"role": "user", "content": prompt}]
        log.debug("Generating slide %s (%d prompt chars)", slide.id, len(prompt))
        items = await self._provider.invoke(
            messages,
            max_tokens=max_tokens,
            temperature=temperature,
            model=defaults.model,
        )
        raw = items[0].text if items and items[0].text else NO_CONTENT

        content = normalizer.normalize(raw, slide.title)
        score = self._scoring.evaluate(
            content,
            slide,
            config.compliance,
            bullet_char=normalizer.bullet_char,
        )
        return SlideResult(
            slide_id=slide.id,
            title=slide.title,
            content=content,
            confidence=score.confidence,
            warnings=list(score.warnings),
            placeholders=slide.placeholder_mapping.model_dump(exclude_none=True),
        )

    @staticmethod
    async def _emit(progress: Optional[ProgressCallback], title: str, index: int, total: int) -> None:
        if progress is None:
            return
        try:
            outcome = progress(title, index, total)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            log.exception("Progress callback failed for %s", title)
