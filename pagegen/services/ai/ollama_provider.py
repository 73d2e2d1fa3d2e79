"""Ollama provider for local model inference."""

import logging
from typing import Optional
from urllib.parse import urljoin

import aiohttp

from pagegen.models.ai_config import AIConfig
from pagegen.services.ai.llm_provider import LLMProvider, LLMProviderError

logger = logging.getLogger(__name__)


class OllamaProvider(LLMProvider):
    """Ollama provider for local models."""

    def __init__(self, config: AIConfig):
        super().__init__(config)
        self.base_url = config.base_url or "http://localhost:11434"
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """Generate text using the Ollama generate API."""
        session = await self._get_session()
        url = urljoin(self.base_url, "/api/generate")

        payload = {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self._temperature(temperature),
                "num_predict": self._max_tokens(max_tokens)
            }
        }

        if system_prompt:
            payload["system"] = system_prompt

        try:
            async with session.post(url, json=payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(f"Ollama API error {response.status}: {error_text}")
                    raise LLMProviderError(f"Ollama API error {response.status}: {error_text}")

                result = await response.json()
                return result.get("response", "")

        except aiohttp.ClientError as e:
            logger.error(f"Ollama connection error: {e}")
            raise LLMProviderError(f"Failed to connect to Ollama: {e}") from e

    async def is_available(self) -> bool:
        """Check if Ollama is serving."""
        try:
            session = await self._get_session()
            url = urljoin(self.base_url, "/api/tags")

            async with session.get(url, timeout=aiohttp.ClientTimeout(total=5)) as response:
                return response.status == 200
        except aiohttp.ClientError as e:
            logger.debug(f"Ollama availability check failed: {e}")
            return False

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
