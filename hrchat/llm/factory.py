"""
LLM Provider Factory

Creates the completion client from configuration.
"""

import logging

from hrchat.config import LLMSettings
from hrchat.llm.anthropic import AnthropicProvider
from hrchat.llm.base import BaseLLMProvider

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """
    Factory for creating LLM provider instances.

    The registry holds the providers this service can talk to; the request
    contract (messages + system instruction → text) is the same for all.
    """

    PROVIDERS = {
        "anthropic": AnthropicProvider,
    }

    @staticmethod
    def create_provider(provider_type: str, config: LLMSettings) -> BaseLLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_type: Type of provider to create
            config: LLM configuration settings

        Returns:
            Configured provider instance

        Raises:
            ValueError: If provider type is unknown or required config is missing
        """
        if provider_type not in LLMProviderFactory.PROVIDERS:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Available providers: {list(LLMProviderFactory.PROVIDERS.keys())}"
            )

        logger.info(f"Creating {provider_type} provider", extra={"provider": provider_type})

        if provider_type == "anthropic":
            return LLMProviderFactory._create_anthropic(config)

        raise ValueError(f"Provider {provider_type} not implemented")  # pragma: no cover

    @staticmethod
    def create_default_provider(config: LLMSettings) -> BaseLLMProvider:
        """Create provider using default_provider from config."""
        return LLMProviderFactory.create_provider(config.default_provider, config)

    @staticmethod
    def _create_anthropic(config: LLMSettings) -> AnthropicProvider:
        """Create Anthropic provider instance."""
        if not config.anthropic_api_key:
            raise ValueError("Anthropic API key is required but not configured")

        return AnthropicProvider(
            api_key=config.anthropic_api_key,
            model=config.anthropic_model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )
