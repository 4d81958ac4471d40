"""
Tests for the Claude client: response handling and error mapping.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from bizaudit.analyzer.client import (
    PROVIDER_UNAVAILABLE,
    ClaudeClient,
    TokenUsage,
    create_claude_client,
)
from bizaudit.errors import ProviderError, TransientProviderError

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(cls, status: int):
    return cls(f"HTTP {status}", response=httpx.Response(status, request=REQUEST), body=None)


def _message(text: str, stop_reason: str = "end_turn"):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=1000, output_tokens=500),
        stop_reason=stop_reason,
    )


@pytest.fixture
def client():
    claude = ClaudeClient(api_key="test-key", model="claude-haiku-4-5-20251001", max_tokens=2048)
    claude.async_client = MagicMock()
    claude.async_client.messages.create = AsyncMock(return_value=_message('{"gaps": []}'))
    return claude


@pytest.mark.unit
class TestComplete:

    @pytest.mark.asyncio
    async def test_returns_content_and_usage(self, client):
        response = await client.complete("user prompt", system="system prompt")

        assert response.content == '{"gaps": []}'
        assert response.usage.total_tokens == 1500
        assert response.model == "claude-haiku-4-5-20251001"
        assert not response.truncated

        kwargs = client.async_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "system prompt"
        assert kwargs["max_tokens"] == 2048
        assert kwargs["messages"] == [{"role": "user", "content": "user prompt"}]

    @pytest.mark.asyncio
    async def test_truncation_is_reported(self, client):
        client.async_client.messages.create.return_value = _message("{", stop_reason="max_tokens")
        response = await client.complete("prompt")
        assert response.truncated

    @pytest.mark.asyncio
    async def test_usage_accumulates(self, client):
        await client.complete("one")
        await client.complete("two")
        summary = client.get_usage_summary()
        assert summary["total_calls"] == 2
        assert summary["total_tokens"] == 3000
        assert client.get_total_cost() == pytest.approx(2 * (1000 / 1e6 + 500 * 5 / 1e6))


@pytest.mark.unit
class TestErrorMapping:
    """Transport trouble is retryable; rejections are not."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        anthropic.APIConnectionError(request=REQUEST),
        anthropic.APITimeoutError(request=REQUEST),
        _status_error(anthropic.RateLimitError, 429),
        _status_error(anthropic.InternalServerError, 500),
        _status_error(anthropic.APIStatusError, 529),
    ])
    async def test_transient_errors(self, client, error):
        client.async_client.messages.create.side_effect = error
        with pytest.raises(TransientProviderError) as exc_info:
            await client.complete("prompt")
        assert exc_info.value.reason == PROVIDER_UNAVAILABLE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        _status_error(anthropic.AuthenticationError, 401),
        _status_error(anthropic.BadRequestError, 400),
    ])
    async def test_rejections(self, client, error):
        client.async_client.messages.create.side_effect = error
        with pytest.raises(ProviderError):
            await client.complete("prompt")


@pytest.mark.unit
class TestConstruction:

    def test_missing_key_raises(self):
        settings = SimpleNamespace(ANTHROPIC_API_KEY=None)
        with patch("bizaudit.analyzer.client.get_settings", return_value=settings):
            with pytest.raises(ValueError):
                ClaudeClient()

    def test_factory_returns_none_without_key(self):
        settings = SimpleNamespace(ANTHROPIC_API_KEY=None)
        with patch("bizaudit.analyzer.client.get_settings", return_value=settings):
            assert create_claude_client() is None

    def test_token_cost(self):
        assert TokenUsage(1_000_000, 1_000_000).estimated_cost == pytest.approx(6.0)
