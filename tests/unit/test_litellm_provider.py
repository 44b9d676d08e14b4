"""Tests for LiteLLMTextProvider request building and retry classification."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import litellm
import pytest

from proposal_ai.core.config import LLMConfig
from proposal_ai.exceptions import NonRetryableError, RetryableError
from proposal_ai.providers import ContentItem, ITextProvider, LiteLLMTextProvider

_MESSAGES: list[dict[str, Any]] = [{"role": "user", "content": "Write the overview"}]


def _litellm_response(content: str | None) -> MagicMock:
    """Build a mock LiteLLM response object."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _provider(**overrides: Any) -> LiteLLMTextProvider:
    config = LLMConfig(model="bedrock/test-model", max_retries=3, retry_max_delay=0.0, **overrides)
    return LiteLLMTextProvider(config)


class TestRequestBuilding:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(_provider(), ITextProvider)

    def test_bedrock_kwargs(self) -> None:
        kwargs = _provider(aws_region="eu-west-1")._completion_kwargs(_MESSAGES, 100, 0.3, None)
        assert kwargs["model"] == "bedrock/test-model"
        assert kwargs["aws_region_name"] == "eu-west-1"
        assert "api_key" not in kwargs

    def test_openai_kwargs(self) -> None:
        provider = _provider(provider="openai", api_key="sk-test", base_url="http://proxy:4000")
        kwargs = provider._completion_kwargs(_MESSAGES, 100, 0.3, "openai/gpt-4o")
        assert kwargs["model"] == "openai/gpt-4o"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["api_base"] == "http://proxy:4000"


@pytest.mark.asyncio
class TestInvoke:
    async def test_returns_content_item(self) -> None:
        mock = AsyncMock(return_value=_litellm_response("• Proposed roadmap"))
        with patch("litellm.acompletion", mock):
            items = await _provider().invoke(_MESSAGES, max_tokens=200, temperature=0.5)

        assert items == [ContentItem(text="• Proposed roadmap")]
        assert mock.call_args.kwargs["max_tokens"] == 200
        assert mock.call_args.kwargs["temperature"] == 0.5

    async def test_empty_content(self) -> None:
        with patch("litellm.acompletion", AsyncMock(return_value=_litellm_response(None))):
            assert await _provider().invoke(_MESSAGES, max_tokens=10, temperature=0.0) == []

    async def test_retries_then_succeeds(self) -> None:
        mock = AsyncMock(side_effect=[RuntimeError("503"), _litellm_response("ok")])
        with patch("litellm.acompletion", mock), patch("asyncio.sleep", AsyncMock()):
            items = await _provider(retry_jitter_factor=0.0).invoke(_MESSAGES, max_tokens=10, temperature=0.0)
        assert items[0].text == "ok"
        assert mock.await_count == 2

    async def test_exhausted_retries(self) -> None:
        mock = AsyncMock(side_effect=RuntimeError("timeout"))
        with patch("litellm.acompletion", mock), patch("asyncio.sleep", AsyncMock()):
            with pytest.raises(RetryableError, match="after 3 retries"):
                await _provider().invoke(_MESSAGES, max_tokens=10, temperature=0.0)
        assert mock.await_count == 3

    async def test_non_retryable_fails_fast(self) -> None:
        error = litellm.exceptions.AuthenticationError(
            message="bad key", llm_provider="openai", model="gpt-4o"
        )
        mock = AsyncMock(side_effect=error)
        with patch("litellm.acompletion", mock):
            with pytest.raises(NonRetryableError):
                await _provider().invoke(_MESSAGES, max_tokens=10, temperature=0.0)
        assert mock.await_count == 1
