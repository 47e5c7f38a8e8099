"""
LLM Provider Module

Completion client used by the conversation pipeline.

Usage:
    from hrchat.llm import LLMProviderFactory, LLMRequest, LLMMessage
    from hrchat.config import get_settings

    config = get_settings()
    provider = LLMProviderFactory.create_default_provider(config.llm)

    request = LLMRequest(
        messages=[LLMMessage(role="user", content="Hello!")],
    )

    response = await provider.generate(request)
    print(response.content)
"""

from hrchat.llm.anthropic import AnthropicProvider
from hrchat.llm.base import BaseLLMProvider, LLMAPIError, LLMConnectionError, LLMError
from hrchat.llm.factory import LLMProviderFactory
from hrchat.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage

__all__ = [
    # Base classes
    "BaseLLMProvider",
    "LLMError",
    "LLMAPIError",
    "LLMConnectionError",
    # Models
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    # Factory
    "LLMProviderFactory",
    # Providers
    "AnthropicProvider",
]
