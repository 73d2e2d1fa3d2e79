"""Text-generation provider configuration model."""

from typing import Optional, Literal
from pydantic import BaseModel, Field


class AIConfig(BaseModel):
    """Configuration handed to the provider factory."""

    provider: Literal["ollama", "openai"] = Field(
        default="ollama",
        description="Text-generation provider (ollama=local model, openai=cloud API)"
    )
    model_name: str = Field(
        default="llama2",
        description="Model name (e.g. 'llama2' for Ollama, 'gpt-4' for OpenAI)"
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key (required for OpenAI)"
    )
    base_url: Optional[str] = Field(
        default="http://localhost:11434",
        description="Base URL for Ollama"
    )
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (0.0-2.0)"
    )
    max_tokens: int = Field(
        default=4000,
        ge=1,
        le=16000,
        description="Maximum tokens to generate"
    )
    timeout: int = Field(
        default=120,
        ge=1,
        description="Request timeout in seconds"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "provider": "ollama",
                "model_name": "llama2",
                "base_url": "http://localhost:11434",
                "temperature": 0.1,
                "max_tokens": 4000
            }
        }
    }
