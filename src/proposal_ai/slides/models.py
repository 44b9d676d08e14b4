"""Slide configuration schema: global config, slide and static slide definitions.

Every model is frozen; a loaded ``GlobalConfig`` is an immutable snapshot
that can be shared between concurrent requests.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_MODEL = "bedrock/anthropic.claude-3-5-sonnet-20241022-v2:0"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ConfigMetadata(_Frozen):
    author: str
    description: str
    created: Optional[str] = None


class ModelDefaults(_Frozen):
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class GlobalFormatting(_Frozen):
    """Normalization toggles applied to every generated slide.

    ``bullet_char`` enables bullet standardization and ``max_line_length``
    enables long-line splitting; both are off when unset.
    """

    remove_markdown: bool = False
    remove_section_headers: bool = False
    bullet_char: Optional[str] = None
    max_line_length: Optional[int] = Field(default=None, gt=0)
    max_bullets: Optional[int] = Field(default=6, gt=0)
    split_tolerance: int = Field(default=10, ge=0)


class ComplianceTerms(_Frozen):
    risky_terms: tuple[str, ...] = ()
    absolute_terms: tuple[str, ...] = ()
    qualifying_terms: tuple[str, ...] = ()


class PlaceholderMapping(_Frozen):
    content: str
    title: Optional[str] = None
    confidence: Optional[str] = None
    warnings: Optional[str] = None


class PromptDefinition(_Frozen):
    template: str
    variables: dict[str, Any] = Field(default_factory=dict)


class ValidationRules(_Frozen):
    required_keywords: tuple[str, ...] = ()
    min_word_count: Optional[int] = None
    max_word_count: Optional[int] = None
    max_bullets: Optional[int] = None
    should_contain_numbers: bool = False


class ScoringRules(_Frozen):
    base_score: Optional[float] = None
    penalties: dict[str, float] = Field(default_factory=dict)
    bonuses: dict[str, float] = Field(default_factory=dict)


class SlideDefinition(_Frozen):
    """A single generated slide."""

    id: str = Field(min_length=1)
    enabled: bool
    order: int
    title: str
    placeholder_mapping: PlaceholderMapping
    prompt: PromptDefinition
    validation: Optional[ValidationRules] = None
    scoring: Optional[ScoringRules] = None


class StaticSlideDefinition(_Frozen):
    """A slide assembled from intake data by fixed heuristics, never generated."""

    id: str = Field(min_length=1)
    order: int
    title: str
    placeholder_mapping: dict[str, str]
    source: Literal["discovery_data", "template", "static"]
    content: Optional[str] = None


class GlobalConfig(_Frozen):
    """Root of a slide configuration document."""

    version: str
    metadata: ConfigMetadata
    template: Optional[dict[str, Any]] = None
    defaults: ModelDefaults = ModelDefaults()
    global_formatting: GlobalFormatting = GlobalFormatting()
    compliance: ComplianceTerms = ComplianceTerms()
    slides: tuple[SlideDefinition, ...]
    static_slides: tuple[StaticSlideDefinition, ...] = ()

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        # YAML reads ``version: 1.0`` as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _unique_slide_ids(self) -> GlobalConfig:
        seen: set[str] = set()
        for slide in self.slides:
            if slide.id in seen:
                raise ValueError(f"Duplicate slide id: {slide.id!r}")
            seen.add(slide.id)
        return self

    def enabled_slides(self) -> list[SlideDefinition]:
        """Enabled slides ascending by ``order`` (stable for equal orders)."""
        return sorted((s for s in self.slides if s.enabled), key=lambda s: s.order)

    def get_slide(self, slide_id: str) -> SlideDefinition | None:
        """Return the enabled slide with ``slide_id``, or None."""
        for slide in self.slides:
            if slide.id == slide_id and slide.enabled:
                return slide
        return None

    def sorted_static_slides(self) -> list[StaticSlideDefinition]:
        return sorted(self.static_slides, key=lambda s: s.order)

    @classmethod
    def fallback(cls) -> GlobalConfig:
        """Minimal configuration with zero slides, used when loading fails."""
        return cls(
            version="1.0",
            metadata=ConfigMetadata(author="System", description="Fallback configuration"),
            defaults=ModelDefaults(model=DEFAULT_MODEL, max_tokens=2000, temperature=0.7),
            slides=(),
        )
