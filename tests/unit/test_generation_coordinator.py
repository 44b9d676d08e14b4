"""Tests for GenerationCoordinator orchestration and result models."""

from __future__ import annotations

from typing import Any

import pytest

from proposal_ai.exceptions import RetryableError, SlideGenerationError
from proposal_ai.generation import GenerationCoordinator, ProposalMetadata, ProposalResult, SlideResult
from proposal_ai.generation.coordinator import NO_CONTENT
from proposal_ai.generation.models import GENERATION_FAILED
from proposal_ai.models import IntakeData
from proposal_ai.slides.models import GlobalConfig
from tests.fakes.fake_provider import FakeTextProvider


@pytest.mark.asyncio
class TestGenerateAll:
    async def test_generates_enabled_slides_in_order(
        self, global_config: GlobalConfig, intake: IntakeData
    ) -> None:
        provider = FakeTextProvider(default_content="- Proposed plan with 3 phases")
        result = await GenerationCoordinator(provider).generate_all(global_config, intake, template_id="default")

        assert [s.slide_id for s in result.slides] == [
            "overview", "solution_approach", "outcomes", "next_steps",
        ]
        assert all(s.content == "• Proposed plan with 3 phases" for s in result.slides)
        assert result.metadata.client == "Acme Health"
        assert result.metadata.template_id == "default"
        assert result.failed_slides == []

    async def test_prompts_rendered_with_intake(self, global_config: GlobalConfig, intake: IntakeData) -> None:
        provider = FakeTextProvider()
        await GenerationCoordinator(provider).generate_all(global_config, intake)

        assert provider.calls[0]["prompt"] == "SLIDE=overview for Acme Health in Healthcare"
        assert provider.calls[0]["max_tokens"] == 500
        assert provider.calls[0]["temperature"] == 0.2
        assert provider.calls[0]["model"] == "test-model"

    async def test_coordinator_defaults_when_config_unset(
        self, config_data: dict[str, Any], intake: IntakeData
    ) -> None:
        config_data["defaults"] = {"model": None}
        provider = FakeTextProvider()
        coordinator = GenerationCoordinator(provider, default_max_tokens=123, default_temperature=0.9)
        await coordinator.generate_all(GlobalConfig.model_validate(config_data), intake)
        assert provider.calls[0]["max_tokens"] == 123
        assert provider.calls[0]["temperature"] == 0.9

    async def test_failed_slide_does_not_abort_batch(
        self, global_config: GlobalConfig, intake: IntakeData
    ) -> None:
        provider = FakeTextProvider(
            default_content="• Anticipated 20% faster claims",
            responses={"SLIDE=outcomes": RetryableError("throttled")},
        )
        result = await GenerationCoordinator(provider).generate_all(global_config, intake)

        assert len(result.slides) == 4
        outcomes = result.get("outcomes")
        assert outcomes is not None
        assert outcomes.failed
        assert outcomes.confidence == 0
        assert outcomes.warnings == [GENERATION_FAILED]
        assert outcomes.content == "Error generating Expected Outcomes: throttled"
        assert result.get("next_steps").confidence > 0
        assert [s.slide_id for s in result.failed_slides] == ["outcomes"]

    async def test_empty_reply(self, global_config: GlobalConfig, intake: IntakeData) -> None:
        provider = FakeTextProvider(default_content="")
        result = await GenerationCoordinator(provider).generate_all(global_config, intake)
        assert result.slides[0].content == NO_CONTENT

    async def test_progress_events_in_order(self, global_config: GlobalConfig, intake: IntakeData) -> None:
        events: list[tuple[str, int, int]] = []
        provider = FakeTextProvider(responses={"SLIDE=overview": RuntimeError("boom")})

        await GenerationCoordinator(provider).generate_all(
            global_config, intake, progress=lambda *event: events.append(event)
        )
        assert events == [
            ("Overview", 1, 4),
            ("Solution & Approach", 2, 4),
            ("Expected Outcomes", 3, 4),
            ("Next Steps", 4, 4),
        ]

    async def test_async_progress_and_failing_callback(
        self, global_config: GlobalConfig, intake: IntakeData
    ) -> None:
        seen: list[int] = []

        async def progress(title: str, index: int, total: int) -> None:
            seen.append(index)
            if index == 2:
                raise RuntimeError("listener went away")

        result = await GenerationCoordinator(FakeTextProvider()).generate_all(
            global_config, intake, progress=progress
        )
        assert seen == [1, 2, 3, 4]
        assert len(result.slides) == 4

    async def test_no_enabled_slides(self, intake: IntakeData) -> None:
        result = await GenerationCoordinator(FakeTextProvider()).generate_all(GlobalConfig.fallback(), intake)
        assert result.slides == []
        assert result.overall_confidence == 0

    async def test_slides_run_sequentially(self, global_config: GlobalConfig, intake: IntakeData) -> None:
        order: list[str] = []
        provider = FakeTextProvider(on_invoke=lambda prompt: order.append(prompt.split()[0]))
        await GenerationCoordinator(provider).generate_all(global_config, intake)
        assert order == [
            "SLIDE=overview", "SLIDE=solution_approach", "SLIDE=outcomes", "SLIDE=next_steps",
        ]


@pytest.mark.asyncio
class TestGenerateSlide:
    async def test_single_slide(self, global_config: GlobalConfig, intake: IntakeData) -> None:
        slide = global_config.get_slide("outcomes")
        provider = FakeTextProvider(default_content="• Anticipated 40% faster processing")
        result = await GenerationCoordinator(provider).generate_slide(slide, global_config, intake)

        assert result.slide_id == "outcomes"
        assert result.warnings == []
        assert result.placeholders == {"content": "{OUTCOMES_CONTENT}"}

    async def test_single_slide_failure_raises(self, global_config: GlobalConfig, intake: IntakeData) -> None:
        slide = global_config.get_slide("overview")
        provider = FakeTextProvider(default_content="x", responses={"SLIDE": RuntimeError("down")})
        with pytest.raises(SlideGenerationError) as exc_info:
            await GenerationCoordinator(provider).generate_slide(slide, global_config, intake)
        assert exc_info.value.slide_id == "overview"


class TestProposalResult:
    def _result(self, *confidences: int) -> ProposalResult:
        return ProposalResult(
            metadata=ProposalMetadata(client="Acme", industry="Retail", project_type="Automation"),
            slides=[
                SlideResult(slide_id=f"s{i}", title=f"S{i}", content="c", confidence=c)
                for i, c in enumerate(confidences)
            ],
        )

    def test_overall_confidence_rounds_half_up(self) -> None:
        assert self._result(85, 70, 0, 90).overall_confidence == 61
        assert self._result(84, 85).overall_confidence == 85

    def test_overall_confidence_serialized(self) -> None:
        assert self._result(80).model_dump()["overall_confidence"] == 80

    def test_failure_factory(self) -> None:
        failed = SlideResult.failure("overview", "Overview", "timeout")
        assert failed.failed
        assert failed.content == "Error generating Overview: timeout"
        assert failed.warnings == ["Generation failed"]
