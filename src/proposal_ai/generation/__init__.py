"""Slide generation: coordinator, normalization and result models."""

from __future__ import annotations

from proposal_ai.generation.coordinator import GenerationCoordinator, ProgressCallback
from proposal_ai.generation.line_splitter import LineSplitter
from proposal_ai.generation.models import ProposalMetadata, ProposalResult, SlideResult
from proposal_ai.generation.normalizer import ContentNormalizer

__all__ = [
    "ContentNormalizer",
    "GenerationCoordinator",
    "LineSplitter",
    "ProgressCallback",
    "ProposalMetadata",
    "ProposalResult",
    "SlideResult",
]
