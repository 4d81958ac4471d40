"""
Claude API Client for Report Generation

Thin async wrapper around the Anthropic SDK with token and cost tracking.

Transport retries are left to the SDK (capped by CLAUDE_SDK_MAX_RETRIES);
there is no application-level retry loop. A failed call is reported to the
caller as either:
- TransientProviderError: connection, timeout, rate limit, overload or 5xx.
  The user may Retry.
- ProviderError: anything else the API rejects (auth, bad request).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import anthropic

from bizaudit.errors import ProviderError, TransientProviderError
from bizaudit.utils.config import get_settings

logger = logging.getLogger(__name__)

PROVIDER_UNAVAILABLE = "provider_unavailable"


@dataclass
class TokenUsage:
    """Track token usage for cost calculation."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def estimated_cost(self) -> float:
        """Estimate cost based on Claude Haiku 4.5 pricing."""
        # Haiku 4.5 pricing: $1/1M input, $5/1M output
        input_cost = (self.input_tokens / 1_000_000) * 1.0
        output_cost = (self.output_tokens / 1_000_000) * 5.0
        return input_cost + output_cost


@dataclass
class CompletionResponse:
    """Response from one Claude completion."""
    content: str
    usage: TokenUsage
    model: str
    stop_reason: str

    @property
    def truncated(self) -> bool:
        return self.stop_reason == "max_tokens"


class ClaudeClient:
    """
    Async client for Claude report completions.

    Features:
    - Token usage tracking
    - Cost tracking across calls
    - Provider errors mapped onto the report-flow taxonomy
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        max_retries: Optional[int] = None,
    ):
        """
        Initialize Claude client.

        Args:
            api_key: Anthropic API key (defaults to settings)
            model: Model to use (defaults to settings)
            max_tokens: Output token cap (defaults to settings)
            max_retries: SDK transport retries (defaults to settings)
        """
        settings = get_settings()
        self.api_key = api_key or settings.ANTHROPIC_API_KEY
        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY not provided")

        self.model = model or settings.CLAUDE_MODEL
        self.max_tokens = max_tokens or settings.CLAUDE_MAX_TOKENS
        retries = settings.CLAUDE_SDK_MAX_RETRIES if max_retries is None else max_retries
        self.async_client = anthropic.AsyncAnthropic(api_key=self.api_key, max_retries=retries)

        # Track cumulative usage
        self.total_usage = TokenUsage()
        self.call_count = 0

    async def complete(self, prompt: str, system: Optional[str] = None) -> CompletionResponse:
        """
        Send one prompt to Claude.

        Args:
            prompt: User prompt
            system: System prompt

        Returns:
            CompletionResponse with content, usage and stop reason

        Raises:
            TransientProviderError: the provider was unreachable or overloaded
            ProviderError: the provider rejected the request
        """
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = await self.async_client.messages.create(**kwargs)
        except (
            anthropic.APIConnectionError,
            anthropic.RateLimitError,
            anthropic.InternalServerError,
        ) as e:
            logger.warning(f"Claude unavailable: {type(e).__name__}: {e}")
            raise TransientProviderError(PROVIDER_UNAVAILABLE, type(e).__name__) from e
        except anthropic.APIError as e:
            # Overloaded (529) and other 5xx statuses without a dedicated class
            if isinstance(e, anthropic.APIStatusError) and e.status_code >= 500:
                logger.warning(f"Claude unavailable: HTTP {e.status_code}")
                raise TransientProviderError(PROVIDER_UNAVAILABLE, f"HTTP {e.status_code}") from e
            logger.error(f"Claude API error: {e}")
            raise ProviderError(f"Claude API error: {e}") from e

        # Extract content
        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text

        # Track usage
        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        self.total_usage.input_tokens += usage.input_tokens
        self.total_usage.output_tokens += usage.output_tokens
        self.call_count += 1

        logger.info(
            f"Claude call: {usage.input_tokens} in, {usage.output_tokens} out, "
            f"${usage.estimated_cost:.4f}, stop={response.stop_reason}"
        )

        return CompletionResponse(
            content=content,
            usage=usage,
            model=self.model,
            stop_reason=response.stop_reason or "",
        )

    def get_total_cost(self) -> float:
        """Get total cost for all calls in this session."""
        return self.total_usage.estimated_cost

    def get_usage_summary(self) -> Dict[str, Any]:
        """Get summary of all API usage."""
        return {
            "total_calls": self.call_count,
            "input_tokens": self.total_usage.input_tokens,
            "output_tokens": self.total_usage.output_tokens,
            "total_tokens": self.total_usage.total_tokens,
            "estimated_cost": self.total_usage.estimated_cost,
        }


def create_claude_client() -> Optional[ClaudeClient]:
    """Client from settings, or None when no API key is configured."""
    if not get_settings().ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY not set - AI augmentation disabled, template reports only")
        return None
    return ClaudeClient()
