"""Tests for the OpenAI LLM client adapter.

All tests are deterministic and do not make real network calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backend.app.config import Settings
from backend.app.llm.client import LLMError, OpenAIClient, get_llm_client


def completion(content: str | None) -> MagicMock:
    """Build a fake chat completion response."""
    return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])


class TestOpenAIClient:
    @patch("backend.app.llm.client.AsyncOpenAI")
    def test_client_configured_with_timeout_and_no_retries(self, mock_openai: MagicMock) -> None:
        OpenAIClient(api_key="sk-test", timeout_seconds=5.0)

        mock_openai.assert_called_once_with(api_key="sk-test", timeout=5.0, max_retries=0)

    @pytest.mark.asyncio
    @patch("backend.app.llm.client.AsyncOpenAI")
    async def test_complete_returns_content(self, mock_openai: MagicMock) -> None:
        mock_create = AsyncMock(return_value=completion('{"message": "Hi"}'))
        mock_openai.return_value.chat.completions.create = mock_create

        client = OpenAIClient(api_key="sk-test", model="gpt-4o-mini", max_tokens=256)
        result = await client.complete("plan my trip")

        assert result == '{"message": "Hi"}'
        kwargs = mock_create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 256
        assert kwargs["messages"][-1] == {"role": "user", "content": "plan my trip"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    @patch("backend.app.llm.client.AsyncOpenAI")
    async def test_empty_content_raises(self, mock_openai: MagicMock, content: str | None) -> None:
        mock_openai.return_value.chat.completions.create = AsyncMock(
            return_value=completion(content)
        )

        with pytest.raises(LLMError):
            await OpenAIClient(api_key="sk-test").complete("prompt")

    @pytest.mark.asyncio
    @patch("backend.app.llm.client.AsyncOpenAI")
    async def test_no_choices_raises(self, mock_openai: MagicMock) -> None:
        mock_openai.return_value.chat.completions.create = AsyncMock(
            return_value=MagicMock(choices=[])
        )

        with pytest.raises(LLMError):
            await OpenAIClient(api_key="sk-test").complete("prompt")

    @pytest.mark.asyncio
    @patch("backend.app.llm.client.AsyncOpenAI")
    async def test_transport_errors_propagate(self, mock_openai: MagicMock) -> None:
        mock_openai.return_value.chat.completions.create = AsyncMock(
            side_effect=ConnectionError("boom")
        )

        with pytest.raises(ConnectionError):
            await OpenAIClient(api_key="sk-test").complete("prompt")


class TestGetLLMClient:
    def test_no_key_returns_none(self) -> None:
        settings = Settings(_env_file=None, openai_api_key=None)

        assert get_llm_client(settings) is None

    def test_blank_key_returns_none(self) -> None:
        settings = Settings(_env_file=None, openai_api_key="")

        assert get_llm_client(settings) is None

    @patch("backend.app.llm.client.AsyncOpenAI")
    def test_key_returns_openai_client(self, mock_openai: MagicMock) -> None:
        settings = Settings(
            _env_file=None,
            openai_api_key="sk-test",
            openai_model="gpt-4o",
            llm_timeout_seconds=3.0,
        )

        client = get_llm_client(settings)

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o"
        mock_openai.assert_called_once_with(api_key="sk-test", timeout=3.0, max_retries=0)
