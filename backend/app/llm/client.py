"""LLM client for conversational replies with OpenAI integration.

Security: Reads API key from settings/environment only, never hardcoded.
When no key is configured there is no client and the responder falls back to
its deterministic replies.
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI

from backend.app.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a travel planning chatbot. Respond ONLY with valid JSON."


class LLMError(Exception):
    """Raised when the provider returns no usable completion."""


class LLMClient(Protocol):
    """Protocol for LLM client implementations."""

    async def complete(self, prompt: str) -> str:
        """Return the raw completion text for a prompt.

        Raises:
            LLMError: provider returned nothing usable
            Exception: transport or timeout errors are passed through
        """
        ...


class OpenAIClient:
    """OpenAI-backed LLM client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout_seconds: float = 5.0,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use (default: gpt-4o-mini for cost efficiency)
            timeout_seconds: Per-request timeout
            temperature: Sampling temperature
            max_tokens: Completion token cap
        """
        # One attempt per turn; the responder owns the fallback
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def complete(self, prompt: str) -> str:
        """Generate a completion using the OpenAI chat API."""
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        if not response.choices:
            raise LLMError("OpenAI returned no choices")

        content = response.choices[0].message.content or ""
        if not content.strip():
            raise LLMError("OpenAI returned empty response")

        return content


def get_llm_client(settings: Settings) -> LLMClient | None:
    """Factory function to get an LLM client based on config.

    Returns:
        OpenAIClient if an API key is configured, None otherwise
    """
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info(f"Using OpenAI client ({settings.openai_model}) for chat replies")
        return OpenAIClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            timeout_seconds=settings.llm_timeout_seconds,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )

    logger.warning("No OpenAI API key configured, using deterministic fallback replies")
    return None
