"""Text-generation providers used for artifact synthesis."""

from pagegen.services.ai.llm_provider import LLMProvider, LLMProviderError
from pagegen.services.ai.provider_factory import create_llm_provider

__all__ = [
    "LLMProvider",
    "LLMProviderError",
    "create_llm_provider"
]
