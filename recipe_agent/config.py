"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from recipe_agent.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LLMSettings(BaseSettings):
    """Chat-completion service configuration.

    Any OpenAI-compatible endpoint that supports tool calling works.
    """

    model_config = SettingsConfigDict(env_prefix="LLM_")

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Chat completion API base URL",
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="Model name to use for generation",
    )
    api_key: SecretStr = Field(
        default=SecretStr("not-required"),
        description="API key (not required for local gateways)",
    )
    timeout: float = Field(
        default=60.0,
        description="Request timeout in seconds",
    )
    max_tokens: int = Field(
        default=1024,
        description="Maximum tokens in response",
    )
    temperature: float = Field(
        default=0.7,
        description="Sampling temperature",
    )


class EmbeddingSettings(BaseSettings):
    """Embedding service configuration."""

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_")

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Embedding service base URL",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model name",
    )
    api_key: SecretStr = Field(
        default=SecretStr("not-required"),
        description="API key (not required for local TEI servers)",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
    )
    batch_size: int = Field(
        default=32,
        description="Batch size for embedding requests",
    )


class QdrantSettings(BaseSettings):
    """Qdrant recipe store configuration."""

    model_config = SettingsConfigDict(env_prefix="QDRANT_")

    url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    collection_name: str = Field(
        default="recipes",
        description="Collection holding recipe payloads and embeddings",
    )
    scroll_batch_size: int = Field(
        default=256,
        ge=1,
        description="Points fetched per scroll page when loading the corpus",
    )


class AgentSettings(BaseSettings):
    """Conversation agent configuration.

    The two similarity thresholds are kept apart on purpose: tool-mediated
    search is more permissive than a direct user query.
    """

    model_config = SettingsConfigDict(env_prefix="AGENT_")

    max_iterations: int = Field(
        default=5,
        ge=1,
        description="Hard cap on model round trips per request",
    )
    search_limit: int = Field(
        default=3,
        ge=1,
        description="Recipes returned per search_recipes call",
    )
    tool_min_similarity: float = Field(
        default=0.3,
        ge=-1.0,
        le=1.0,
        description="Minimum cosine similarity for tool-driven search",
    )
    query_min_similarity: float = Field(
        default=0.6,
        ge=-1.0,
        le=1.0,
        description="Minimum cosine similarity for direct user-query search",
    )
    completion_timeout: float = Field(
        default=90.0,
        gt=0,
        description="Upper bound in seconds for one completion call",
    )
    tool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound in seconds for one tool execution",
    )
    parallel_tool_calls: bool = Field(
        default=False,
        description="Run the tool calls of one assistant turn concurrently",
    )
    max_message_length: int = Field(
        default=2000,
        description="Maximum characters in a chat message",
    )
    max_history_messages: int = Field(
        default=50,
        description="Maximum conversation history length",
    )
    max_exclude_ids: int = Field(
        default=100,
        description="Maximum excluded recipe ids per request",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )

    # Nested settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ConfigurationError: If an environment variable holds an invalid value.
    """
    try:
        return Settings()
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} invalid setting(s)",
            details={
                "errors": [
                    {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
                    for err in e.errors()
                ]
            },
        ) from e
