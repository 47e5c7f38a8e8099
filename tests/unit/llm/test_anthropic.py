"""Unit tests for AnthropicProvider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import anthropic
import httpx
import pytest

from hrchat.llm.anthropic import AnthropicProvider
from hrchat.llm.base import LLMAPIError, LLMConnectionError
from hrchat.llm.models import LLMMessage, LLMRequest

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _message(text_blocks: list[str], stop_reason: str = "end_turn"):
    return SimpleNamespace(
        id="msg_123",
        model="claude-3-5-haiku-20241022",
        content=[SimpleNamespace(type="text", text=text) for text in text_blocks],
        usage=SimpleNamespace(input_tokens=120, output_tokens=30),
        stop_reason=stop_reason,
    )


class TestAnthropicProvider:
    """Test suite for the Messages API adapter."""

    @pytest.fixture
    def provider(self):
        provider = AnthropicProvider(api_key="sk-ant-test-key-1234567890", max_tokens=2000)
        provider.client = Mock()
        provider.client.messages.create = AsyncMock(return_value=_message(["Hello"]))
        return provider

    def test_client_never_retries(self):
        provider = AnthropicProvider(api_key="sk-ant-test-key-1234567890", timeout=12)

        assert provider.client.max_retries == 0
        assert provider.client.timeout == 12.0

    @pytest.mark.asyncio
    async def test_system_message_is_sent_separately(self, provider):
        request = LLMRequest(
            messages=[
                LLMMessage(role="system", content="You are an HR assistant."),
                LLMMessage(role="user", content="How many employees?"),
            ]
        )

        response = await provider.generate(request)

        params = provider.client.messages.create.await_args.kwargs
        assert params["system"] == "You are an HR assistant."
        assert params["messages"] == [{"role": "user", "content": "How many employees?"}]
        assert params["model"] == "claude-3-5-haiku-20241022"
        assert params["max_tokens"] == 2000
        assert "temperature" not in params
        assert response.content == "Hello"
        assert response.usage.total_tokens == 150
        assert response.provider == "anthropic"
        assert response.metadata == {"id": "msg_123"}

    @pytest.mark.asyncio
    async def test_no_system_key_without_system_message(self, provider):
        await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="Hi")]))

        assert "system" not in provider.client.messages.create.await_args.kwargs

    @pytest.mark.asyncio
    async def test_text_blocks_are_joined(self, provider):
        provider.client.messages.create.return_value = _message(["Part one. ", "Part two."])

        response = await provider.generate(
            LLMRequest(messages=[LLMMessage(role="user", content="Hi")])
        )

        assert response.content == "Part one. Part two."

    @pytest.mark.asyncio
    async def test_max_tokens_stop_maps_to_length(self, provider):
        provider.client.messages.create.return_value = _message(["..."], stop_reason="max_tokens")

        response = await provider.generate(
            LLMRequest(messages=[LLMMessage(role="user", content="Hi")])
        )

        assert response.finish_reason == "length"

    @pytest.mark.asyncio
    async def test_status_error_carries_api_message(self, provider):
        provider.client.messages.create.side_effect = anthropic.APIStatusError(
            "overloaded",
            response=httpx.Response(529, request=_REQUEST),
            body={"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
        )

        with pytest.raises(LLMAPIError) as exc_info:
            await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="Hi")]))

        assert exc_info.value.status_code == 529
        assert str(exc_info.value) == "API Error (529): Overloaded"

    @pytest.mark.asyncio
    async def test_status_error_without_body(self, provider):
        provider.client.messages.create.side_effect = anthropic.APIStatusError(
            "bad gateway",
            response=httpx.Response(502, request=_REQUEST),
            body=None,
        )

        with pytest.raises(LLMAPIError, match=r"API Error \(502\): Unknown error"):
            await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="Hi")]))

    @pytest.mark.asyncio
    async def test_timeout_is_connection_error(self, provider):
        provider.client.messages.create.side_effect = anthropic.APITimeoutError(request=_REQUEST)

        with pytest.raises(LLMConnectionError):
            await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="Hi")]))
