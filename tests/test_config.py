"""Tests for application configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from recipe_agent.config import (
    AgentSettings,
    EmbeddingSettings,
    Environment,
    LLMSettings,
    QdrantSettings,
    Settings,
    get_settings,
)
from recipe_agent.exceptions import ConfigurationError, ErrorCode


class TestLLMSettings:
    """Tests for LLM configuration."""

    def test_default_values(self) -> None:
        """Default values point to the OpenAI API."""
        settings = LLMSettings()
        assert settings.base_url == "https://api.openai.com/v1"
        assert settings.model == "gpt-4o-mini"
        assert settings.timeout == 60.0
        assert settings.max_tokens == 1024
        assert settings.temperature == 0.7

    def test_api_key_is_secret(self) -> None:
        """API key should be masked when printed."""
        settings = LLMSettings()
        assert "not-required" not in str(settings.api_key)
        assert settings.api_key.get_secret_value() == "not-required"

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"LLM_MODEL": "llama3.1:8b"}):
            settings = LLMSettings()
            assert settings.model == "llama3.1:8b"


class TestEmbeddingSettings:
    """Tests for embedding configuration."""

    def test_default_values(self) -> None:
        """Default values for embedding service."""
        settings = EmbeddingSettings()
        assert settings.base_url == "https://api.openai.com/v1"
        assert settings.model == "text-embedding-3-small"
        assert settings.batch_size == 32

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(os.environ, {"EMBEDDING_BATCH_SIZE": "64"}):
            settings = EmbeddingSettings()
            assert settings.batch_size == 64


class TestQdrantSettings:
    """Tests for Qdrant configuration."""

    def test_default_values(self) -> None:
        """Default values for Qdrant."""
        settings = QdrantSettings()
        assert settings.url == "http://localhost:6333"
        assert settings.api_key is None
        assert settings.collection_name == "recipes"

    def test_api_key_is_secret_when_set(self) -> None:
        """API key should be masked when set."""
        with patch.dict(os.environ, {"QDRANT_API_KEY": "secret-key"}):
            settings = QdrantSettings()
            assert settings.api_key is not None
            assert "secret-key" not in str(settings.api_key)
            assert settings.api_key.get_secret_value() == "secret-key"


class TestAgentSettings:
    """Tests for agent configuration."""

    def test_default_values(self) -> None:
        """Defaults match the documented loop and search behavior."""
        settings = AgentSettings()
        assert settings.max_iterations == 5
        assert settings.search_limit == 3
        assert settings.tool_min_similarity == 0.3
        assert settings.query_min_similarity == 0.6
        assert settings.parallel_tool_calls is False

    def test_iteration_cap_cannot_be_disabled(self) -> None:
        """max_iterations must be at least one."""
        with pytest.raises(ValidationError):
            AgentSettings(max_iterations=0)

    def test_env_override(self) -> None:
        """Environment variables override defaults."""
        with patch.dict(
            os.environ,
            {"AGENT_MAX_ITERATIONS": "8", "AGENT_PARALLEL_TOOL_CALLS": "true"},
        ):
            settings = AgentSettings()
            assert settings.max_iterations == 8
            assert settings.parallel_tool_calls is True


class TestSettings:
    """Tests for main application settings."""

    def test_default_environment(self) -> None:
        """Default environment is development."""
        settings = Settings()
        assert settings.environment == Environment.DEVELOPMENT

    def test_default_api_settings(self) -> None:
        """Default API host and port."""
        settings = Settings()
        assert settings.api_host == "0.0.0.0"
        assert settings.api_port == 8000

    def test_nested_settings_loaded(self) -> None:
        """Nested settings are initialized."""
        settings = Settings()
        assert isinstance(settings.llm, LLMSettings)
        assert isinstance(settings.embedding, EmbeddingSettings)
        assert isinstance(settings.qdrant, QdrantSettings)
        assert isinstance(settings.agent, AgentSettings)

    def test_environment_enum(self) -> None:
        """Environment can be set via string."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}):
            settings = Settings()
            assert settings.environment == Environment.PRODUCTION


class TestGetSettings:
    """Tests for settings singleton."""

    def test_caching(self) -> None:
        """Settings are cached."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
        assert isinstance(settings1, Settings)

    def test_invalid_environment_raises_configuration_error(self) -> None:
        """Bad environment values fail fast with a structured error."""
        get_settings.cache_clear()
        try:
            with patch.dict(os.environ, {"AGENT_MAX_ITERATIONS": "0"}):
                with pytest.raises(ConfigurationError) as exc_info:
                    get_settings()
        finally:
            get_settings.cache_clear()

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        assert "max_iterations" in exc_info.value.details["errors"][0]["loc"]
