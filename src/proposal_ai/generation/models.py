"""Pydantic models for generated slides and proposals."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field, computed_field

from proposal_ai.scoring.rules import round_half_up

GENERATION_FAILED = "Generation failed"


class SlideResult(BaseModel):
    """Outcome of generating one slide."""

    slide_id: str
    title: str
    content: str
    confidence: int = Field(ge=0, le=100)
    warnings: list[str] = Field(default_factory=list)
    placeholders: dict[str, str] = Field(default_factory=dict)
    failed: bool = False

    @classmethod
    def failure(
        cls,
        slide_id: str,
        title: str,
        error: BaseException | str,
        placeholders: dict[str, str] | None = None,
    ) -> SlideResult:
        """Result recorded when the provider call for a slide fails."""
        return cls(
            slide_id=slide_id,
            title=title,
            content=f"Error generating {title}: {error}",
            confidence=0,
            warnings=[GENERATION_FAILED],
            placeholders=placeholders or {},
            failed=True,
        )


class ProposalMetadata(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    client: str
    industry: str
    project_type: str
    template_id: str = ""


class ProposalResult(BaseModel):
    """Per-request generation result; slides are kept in generation order."""

    metadata: ProposalMetadata
    slides: list[SlideResult] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_confidence(self) -> int:
        """Mean slide confidence rounded half-up; 0 when there are no slides."""
        if not self.slides:
            return 0
        return round_half_up(sum(s.confidence for s in self.slides) / len(self.slides))

    def get(self, slide_id: str) -> SlideResult | None:
        for slide in self.slides:
            if slide.slide_id == slide_id:
                return slide
        return None

    @property
    def failed_slides(self) -> list[SlideResult]:
        return [s for s in self.slides if s.failed]
