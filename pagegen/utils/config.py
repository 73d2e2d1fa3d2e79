"""
Configuration settings for the page generation agent.

All settings can be overridden via environment variables. Settings are
constructed by the entry point and passed to the components that need them.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from pagegen.models.ai_config import AIConfig
from pagegen.models.artifacts import ArtifactKind


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment Configuration
    ENVIRONMENT: str = Field(default="development", description="Current environment")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_FORMAT: str = Field(default="text", description="Log format: json or text")

    # Text Generation
    AI_MODEL_TYPE: str = Field(default="llama", description="Model type: llama or openai")
    LLAMA_MODEL_URL: str = Field(default="http://localhost:11434", description="Ollama base URL")
    LLAMA_MODEL_NAME: str = Field(default="llama2", description="Ollama model name")
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-4", description="OpenAI model name")
    AI_TEMPERATURE: float = Field(default=0.1, description="Sampling temperature")
    AI_MAX_TOKENS: int = Field(default=4000, description="Maximum tokens per generation")
    AI_TIMEOUT_SECONDS: int = Field(default=120, description="Generation request timeout")

    # Browser
    BROWSER_HEADLESS: bool = Field(default=True, description="Run browser headless")
    NAVIGATION_TIMEOUT_MS: int = Field(default=60000, description="Navigation timeout")
    VIEWPORT_WIDTH: int = Field(default=1280, description="Viewport width")
    VIEWPORT_HEIGHT: int = Field(default=720, description="Viewport height")

    # Locator Resolution
    LOCATOR_STRATEGY_TIMEOUT_MS: int = Field(
        default=2000,
        description="Bounded wait per lookup strategy"
    )

    # Artifact Storage
    OUTPUT_ROOT: str = Field(default=".", description="Root directory for generated artifacts")
    PAGE_OBJECTS_DIR: str = Field(default="pageObjects", description="Page object directory")
    TESTS_DIR: str = Field(default="tests", description="Test file directory")
    FEATURES_DIR: str = Field(default="Features", description="Feature file directory")
    STEPS_DIR: str = Field(default="Features/step_definitions", description="Step bindings directory")
    REGISTRY_EXCLUDE_MARKER: str = Field(
        default="Task",
        description="Prior page objects whose file name contains this marker are not indexed"
    )

    # Batch
    BATCH_CONTINUE_ON_ERROR: bool = Field(
        default=False,
        description="Continue a batch after a surface fails"
    )

    # API Configuration
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8080, description="API port")
    ENABLE_DOCS: bool = Field(default=True, description="Enable OpenAPI docs")

    @property
    def output_root(self) -> Path:
        return Path(self.OUTPUT_ROOT)

    def artifact_directory(self, kind: ArtifactKind) -> str:
        """Directory (relative to the output root) for an artifact kind."""
        return {
            ArtifactKind.PAGE_OBJECT: self.PAGE_OBJECTS_DIR,
            ArtifactKind.TEST: self.TESTS_DIR,
            ArtifactKind.FEATURE: self.FEATURES_DIR,
            ArtifactKind.STEPS: self.STEPS_DIR,
        }[kind]

    def ai_config(self) -> AIConfig:
        """Provider configuration for the selected model type."""
        if self.AI_MODEL_TYPE == "openai":
            return AIConfig(
                provider="openai",
                model_name=self.OPENAI_MODEL,
                api_key=self.OPENAI_API_KEY,
                base_url=None,
                temperature=self.AI_TEMPERATURE,
                max_tokens=self.AI_MAX_TOKENS,
                timeout=self.AI_TIMEOUT_SECONDS,
            )
        return AIConfig(
            provider="ollama",
            model_name=self.LLAMA_MODEL_NAME,
            base_url=self.LLAMA_MODEL_URL,
            temperature=self.AI_TEMPERATURE,
            max_tokens=self.AI_MAX_TOKENS,
            timeout=self.AI_TIMEOUT_SECONDS,
        )


def validate_settings(settings: Settings) -> None:
    """Validate critical settings on startup."""
    errors = []

    if settings.AI_MODEL_TYPE not in ("llama", "openai"):
        errors.append(f"Unsupported model type: {settings.AI_MODEL_TYPE}")

    if settings.AI_MODEL_TYPE == "openai" and not settings.OPENAI_API_KEY:
        errors.append("OpenAI API key required when using OpenAI model")

    if settings.LOCATOR_STRATEGY_TIMEOUT_MS <= 0:
        errors.append("LOCATOR_STRATEGY_TIMEOUT_MS must be positive")

    if errors:
        raise ValueError("Configuration errors: " + "; ".join(errors))


# Secret patterns for redaction
SECRET_PATTERNS = [
    r"password",
    r"secret",
    r"token",
    r"api[_-]?key",
    r"auth",
    r"credential",
    r"bearer",
]
