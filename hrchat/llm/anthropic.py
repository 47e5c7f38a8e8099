"""
Anthropic LLM Provider

Implementation of BaseLLMProvider for Anthropic's Claude models using the
Messages API through the official async SDK.
"""

import logging
from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from hrchat.llm.base import BaseLLMProvider, LLMAPIError, LLMConnectionError
from hrchat.llm.models import LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic (Claude) LLM provider implementation.

    The SDK client is created with ``max_retries=0`` so each generate() call is
    a single request bounded by ``timeout``.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-haiku-20241022",
        temperature: float | None = None,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            model: Default model to use
            temperature: Default temperature
            max_tokens: Default max tokens
            timeout: Request timeout in seconds
        """
        super().__init__(
            provider_name="anthropic",
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

        self.model = model
        self.api_key = api_key
        self.client = AsyncAnthropic(api_key=api_key, timeout=float(timeout), max_retries=0)

        logger.info(f"Anthropic provider initialized with model: {model}", extra={"model": model})

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using the Anthropic Messages API."""
        request = self._apply_defaults(request)
        self._log_request(request)

        # Anthropic takes the system instruction separately from the turns
        system_message = None
        messages = []
        for msg in request.messages:
            if msg.role == "system":
                system_message = msg.content
            else:
                messages.append({"role": msg.role, "content": msg.content})

        params: dict[str, Any] = {
            "model": request.model or self.model,
            "max_tokens": request.max_tokens,
            "messages": messages,
        }
        if system_message:
            params["system"] = system_message
        if request.temperature is not None:
            params["temperature"] = request.temperature

        try:
            response = await self.client.messages.create(**params)
        except anthropic.APIStatusError as exc:
            message = self._extract_error_message(exc)
            logger.error(f"Anthropic API error ({exc.status_code}): {message}")
            raise LLMAPIError(exc.status_code, message) from exc
        except anthropic.APIConnectionError as exc:
            logger.error(f"Anthropic connection error: {exc}")
            raise LLMConnectionError(str(exc) or exc.__class__.__name__) from exc

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

        llm_response = LLMResponse(
            content=text,
            model=response.model,
            usage=LLMUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            ),
            finish_reason=self._map_finish_reason(response.stop_reason),
            provider="anthropic",
            metadata={"id": response.id},
        )

        self._log_response(llm_response)
        return llm_response

    def _extract_error_message(self, exc: anthropic.APIStatusError) -> str:
        body = exc.body
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return "Unknown error"

    def _map_finish_reason(self, reason: str | None) -> str:
        """Map Anthropic stop reason to standard format."""
        if reason == "max_tokens":
            return "length"
        return "stop"
