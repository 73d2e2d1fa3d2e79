"""Abstract base class for text-generation providers."""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from pagegen.models.ai_config import AIConfig

logger = logging.getLogger(__name__)


class LLMProviderError(Exception):
    """Raised when a provider cannot produce a response."""
    pass


class LLMProvider(ABC):
    """Abstract base class for text-generation providers."""

    def __init__(self, config: AIConfig):
        """
        Initialize provider.

        Args:
            config: Provider configuration
        """
        self.config = config
        self.model_name = config.model_name
        self.timeout = config.timeout

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Generate text from prompt.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            temperature: Sampling temperature, defaults to the configured value
            max_tokens: Maximum tokens to generate, defaults to the configured value

        Returns:
            Generated text

        Raises:
            LLMProviderError: If the provider call fails
        """
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """
        Check if provider is available and ready.

        Returns:
            True if provider is available
        """
        pass

    async def close(self) -> None:
        """Release any network resources held by the provider."""
        return None

    def _temperature(self, temperature: Optional[float]) -> float:
        return self.config.temperature if temperature is None else temperature

    def _max_tokens(self, max_tokens: Optional[int]) -> int:
        return self.config.max_tokens if max_tokens is None else max_tokens
