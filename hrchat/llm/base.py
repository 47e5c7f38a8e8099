"""
Base LLM Provider

Abstract base class defining the completion client interface, plus the
error types every provider raises.
"""

import logging
from abc import ABC, abstractmethod

from hrchat.llm.models import LLMRequest, LLMResponse

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Base exception for completion service failures."""

    pass


class LLMAPIError(LLMError):
    """The provider answered with an HTTP error status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API Error ({status_code}): {message}")


class LLMConnectionError(LLMError):
    """The request never got a response (network failure, timeout)."""

    pass


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    A provider performs exactly one bounded-timeout call per request and never
    retries. Failures surface as LLMError subclasses.

    Attributes:
        provider_name: Unique identifier for this provider
        temperature: Default sampling temperature (None = provider default)
        max_tokens: Default maximum tokens to generate
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        provider_name: str,
        temperature: float | None = None,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        """
        Initialize base provider.

        Args:
            provider_name: Provider identifier (e.g., "anthropic")
            temperature: Default temperature for responses
            max_tokens: Default max tokens for responses
            timeout: Request timeout in seconds
        """
        self.provider_name = provider_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

        logger.info(
            f"Initialized {provider_name} provider",
            extra={
                "provider": provider_name,
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
        )

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate a completion from the LLM.

        Args:
            request: LLM request with messages and parameters

        Returns:
            LLMResponse with generated content and metadata

        Raises:
            LLMAPIError: The provider returned an error status
            LLMConnectionError: Transport-level failure or timeout
        """
        pass  # pragma: no cover - abstract method

    def _apply_defaults(self, request: LLMRequest) -> LLMRequest:
        """Apply default values to request if not specified."""
        if request.temperature is None:
            request.temperature = self.temperature
        if request.max_tokens is None:
            request.max_tokens = self.max_tokens
        return request

    def _log_request(self, request: LLMRequest) -> None:
        """Log request details for debugging."""
        logger.debug(
            f"{self.provider_name} request",
            extra={
                "provider": self.provider_name,
                "message_count": len(request.messages),
                "temperature": request.temperature,
                "max_tokens": request.max_tokens,
            },
        )

    def _log_response(self, response: LLMResponse) -> None:
        """Log response details for debugging."""
        logger.debug(
            f"{self.provider_name} response",
            extra={
                "provider": self.provider_name,
                "model": response.model,
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
                "finish_reason": response.finish_reason,
            },
        )
