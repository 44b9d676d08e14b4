"""Text-completion providers."""

from __future__ import annotations

from proposal_ai.providers.litellm_provider import LiteLLMTextProvider
from proposal_ai.providers.protocols import ContentItem, ITextProvider

__all__ = ["ContentItem", "ITextProvider", "LiteLLMTextProvider"]
