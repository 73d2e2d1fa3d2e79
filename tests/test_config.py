"""Tests for settings and startup validation."""

import pytest

from pagegen.models.artifacts import ArtifactKind
from pagegen.utils.config import Settings, validate_settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Defaults select the local model and the conventional directories."""
        settings = make_settings(AI_MODEL_TYPE="llama")

        assert settings.LOCATOR_STRATEGY_TIMEOUT_MS == 2000
        assert settings.REGISTRY_EXCLUDE_MARKER == "Task"
        assert settings.artifact_directory(ArtifactKind.STEPS) == "Features/step_definitions"

    def test_reads_environment(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("OUTPUT_ROOT", "/tmp/generated")
        monkeypatch.setenv("BATCH_CONTINUE_ON_ERROR", "true")

        settings = make_settings()

        assert settings.OUTPUT_ROOT == "/tmp/generated"
        assert settings.BATCH_CONTINUE_ON_ERROR is True

    def test_llama_ai_config(self):
        """The llama model type maps onto the Ollama provider."""
        config = make_settings(AI_MODEL_TYPE="llama", LLAMA_MODEL_NAME="codellama").ai_config()

        assert config.provider == "ollama"
        assert config.model_name == "codellama"

    def test_openai_ai_config(self):
        """The openai model type carries the key and model."""
        config = make_settings(AI_MODEL_TYPE="openai", OPENAI_API_KEY="sk-abcdefgh1234", OPENAI_MODEL="gpt-4o").ai_config()

        assert config.provider == "openai"
        assert config.api_key == "sk-abcdefgh1234"
        assert config.model_name == "gpt-4o"


class TestValidateSettings:
    """Tests for validate_settings."""

    def test_valid_settings_pass(self):
        """Default local configuration is valid."""
        validate_settings(make_settings(AI_MODEL_TYPE="llama"))

    def test_openai_without_key(self):
        """OpenAI needs a key."""
        with pytest.raises(ValueError, match="OpenAI API key required"):
            validate_settings(make_settings(AI_MODEL_TYPE="openai", OPENAI_API_KEY=None))

    def test_unknown_model_type(self):
        """Only llama and openai are supported."""
        with pytest.raises(ValueError, match="Unsupported model type"):
            validate_settings(make_settings(AI_MODEL_TYPE="claude"))

    def test_errors_are_combined(self):
        """All problems are reported together."""
        with pytest.raises(ValueError) as exc_info:
            validate_settings(make_settings(AI_MODEL_TYPE="bogus", LOCATOR_STRATEGY_TIMEOUT_MS=0))

        assert "Unsupported model type" in str(exc_info.value)
        assert "LOCATOR_STRATEGY_TIMEOUT_MS" in str(exc_info.value)
