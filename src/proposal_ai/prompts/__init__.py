"""Prompt rendering for slide generation."""

from __future__ import annotations

from proposal_ai.prompts.renderer import PromptRenderer

__all__ = ["PromptRenderer"]
