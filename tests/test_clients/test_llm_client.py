"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from career_draft.clients.llm_client import DEFAULT_MODEL, LLMClient, LLMResponse

ANTHROPIC_CLS = "career_draft.clients.llm_client.anthropic.AsyncAnthropic"


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


def _client_returning(mock_cls: MagicMock, text: str, **usage) -> MagicMock:
    mock_client = MagicMock()
    mock_client.messages.create = AsyncMock(return_value=_make_api_message(text, **usage))
    mock_cls.return_value = mock_client
    return mock_client


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        with patch(ANTHROPIC_CLS) as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with()

    def test_init_with_api_key_passes_key(self):
        with patch(ANTHROPIC_CLS) as mock_cls:
            LLMClient(api_key="test-key")
            mock_cls.assert_called_once_with(api_key="test-key")

    def test_init_with_both_params_passes_both(self):
        with patch(ANTHROPIC_CLS) as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=30.0)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        """generate() wraps API response fields into an LLMResponse dataclass."""
        with patch(ANTHROPIC_CLS) as mock_cls:
            _client_returning(mock_cls, "hello world", input_tokens=100, output_tokens=50)
            llm = LLMClient()
            result = await llm.generate("say hello")

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_system_prompt_forwarded_only_when_set(self):
        with patch(ANTHROPIC_CLS) as mock_cls:
            client = _client_returning(mock_cls, "ok")
            llm = LLMClient()
            await llm.generate("no system")
            await llm.generate("with system", system="Answer in JSON", max_tokens=512)

        first, second = client.messages.create.call_args_list
        assert "system" not in first.kwargs
        assert first.kwargs["model"] == DEFAULT_MODEL
        assert second.kwargs["system"] == "Answer in JSON"
        assert second.kwargs["max_tokens"] == 512
        assert second.kwargs["messages"] == [{"role": "user", "content": "with system"}]

    async def test_api_error_propagates(self):
        with patch(ANTHROPIC_CLS) as mock_cls:
            client = _client_returning(mock_cls, "unused")
            client.messages.create.side_effect = ValueError("bad request")
            llm = LLMClient()
            with patch.object(LLMClient._call_api.retry, "sleep", AsyncMock()):
                with pytest.raises(ValueError):
                    await llm.generate("prompt")

        assert client.messages.create.await_count == 3
