"""Factory for creating text-generation providers."""

import logging

from pagegen.models.ai_config import AIConfig
from pagegen.services.ai.llm_provider import LLMProvider
from pagegen.services.ai.ollama_provider import OllamaProvider
from pagegen.services.ai.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


def create_llm_provider(config: AIConfig) -> LLMProvider:
    """
    Create a provider based on configuration.

    Every call builds a new provider; callers own its lifetime and
    should ``await provider.close()`` when done.

    Args:
        config: Provider configuration with 'provider' field

    Returns:
        LLMProvider instance

    Raises:
        ValueError: If the provider type is unknown or misconfigured
    """
    if config.provider == "ollama":
        provider = OllamaProvider(config)
    elif config.provider == "openai":
        provider = OpenAIProvider(config)
    else:
        raise ValueError(f"Unknown provider type: {config.provider}")

    logger.info(f"Created {config.provider} provider with model {config.model_name}")
    return provider
