"""Async text provider routed through LiteLLM for multi-provider support.

Supports ``bedrock/``, ``anthropic/``, ``openai/`` and ``ollama/`` model
prefixes transparently.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

from proposal_ai.core.config import LLMConfig
from proposal_ai.exceptions import NonRetryableError, RetryableError
from proposal_ai.providers.protocols import ContentItem

log = logging.getLogger(__name__)


class LiteLLMTextProvider:
    """Implements ``ITextProvider`` using ``litellm.acompletion()`` with retry/backoff."""

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether an LLM API error should be retried.

        Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
        Retryable (default): everything else including rate limits, timeouts, 5xx.
        """
        from litellm.exceptions import AuthenticationError, BadRequestError, NotFoundError

        return not isinstance(exc, (AuthenticationError, BadRequestError, NotFoundError))

    def _completion_kwargs(
        self,
        messages: list[dict[str, Any]],
        max_tokens: int,
        temperature: float,
        model: str | None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": model or self._config.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "timeout": self._config.timeout,
        }
        if self._config.base_url:
            kwargs["api_base"] = self._config.base_url
        if self._config.provider == "bedrock":
            kwargs["aws_region_name"] = self._config.aws_region
        elif self._config.api_key and self._config.api_key != "no-key":
            kwargs["api_key"] = self._config.api_key
        return kwargs

    async def invoke(
        self,
        messages: list[dict[str, Any]],
        *,
        max_tokens: int,
        temperature: float,
        model: str | None = None,
    ) -> list[ContentItem]:
        from litellm import acompletion

        kwargs = self._completion_kwargs(messages, max_tokens, temperature, model)
        max_retries = max(1, self._config.max_retries)
        jitter_factor = self._config.retry_jitter_factor
        max_delay = self._config.retry_max_delay

        last_error: Exception | None = None
        for attempt in range(max_retries):
            try:
                response = await acompletion(**kwargs)
                content = response.choices[0].message.content if response.choices else None
                if not content:
                    return []
                return [ContentItem(text=content)]

            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(f"Non-retryable LLM error: {e}") from e

                base_wait = min(2**attempt, max_delay)
                jitter = random.uniform(0, base_wait * jitter_factor)
                wait = base_wait + jitter

                log.warning(
                    "LLM retry %d/%d: %s (wait=%.1fs)",
                    attempt + 1, max_retries, e, wait,
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(wait)

        raise RetryableError(
            f"LLM API failed after {max_retries} retries: {last_error}"
        ) from last_error
