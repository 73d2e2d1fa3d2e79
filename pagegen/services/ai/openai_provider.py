"""OpenAI provider for cloud-based model inference."""

import logging
from typing import Optional

import openai

from pagegen.models.ai_config import AIConfig
from pagegen.services.ai.llm_provider import LLMProvider, LLMProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI provider for GPT models."""

    def __init__(self, config: AIConfig):
        super().__init__(config)

        if not config.api_key:
            raise ValueError("OpenAI API key is required")

        self.client = openai.AsyncOpenAI(
            api_key=config.api_key,
            timeout=self.timeout
        )

    async def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """Generate text using the chat completions API."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=self._temperature(temperature),
                max_tokens=self._max_tokens(max_tokens)
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI generation error: {e}")
            raise LLMProviderError(f"OpenAI API error: {e}") from e

        return response.choices[0].message.content or ""

    async def is_available(self) -> bool:
        """Check if OpenAI is reachable with the configured key."""
        try:
            await self.client.models.list()
            return True
        except openai.OpenAIError as e:
            logger.debug(f"OpenAI availability check failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.close()
