"""Text-completion provider protocol — the contract generation depends on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ContentItem:
    """One content block returned by a provider."""

    text: str
    type: str = "text"


@runtime_checkable
class ITextProvider(Protocol):
    """Protocol for pluggable text-completion providers.

    Retries, backoff and model fallback are the provider's responsibility;
    callers treat any raised exception as a failure of that one call.
    """

    async def invoke(
        self,
        messages: list[dict[str, Any]],
        *,
        max_tokens: int,
        temperature: float,
        model: str | None = None,
    ) -> list[ContentItem]:
        """Run a single completion.

        Args:
            messages: Chat messages in OpenAI format.
            max_tokens: Output token limit.
            temperature: Sampling temperature.
            model: Override model ID (supports LiteLLM prefixes).

        Returns:
            Content items in provider order; may be empty.
        """
        ...
