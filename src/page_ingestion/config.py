"""Configuration management using pydantic-settings."""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from page_ingestion.models.chunk import ChunkingConfig


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class TokenEstimatorKind(str, Enum):
    """Token estimator selection."""

    CHARS = "chars"
    TIKTOKEN = "tiktoken"


class ChunkingSettings(BaseSettings):
    """Page chunking configuration (all sizes in estimated tokens)."""

    model_config = SettingsConfigDict(env_prefix="CHUNK_", case_sensitive=False)

    target_size: int = Field(
        default=800, description="Target chunk size in tokens. Env var: CHUNK_TARGET_SIZE"
    )
    overlap: int = Field(
        default=200, description="Overlap between split chunks in tokens. Env var: CHUNK_OVERLAP"
    )
    max_size: int = Field(
        default=1200, description="Maximum chunk size in tokens. Env var: CHUNK_MAX_SIZE"
    )
    token_estimator: TokenEstimatorKind = Field(
        default=TokenEstimatorKind.CHARS,
        description="Token estimator: chars (len/4) or tiktoken. Env var: CHUNK_TOKEN_ESTIMATOR",
    )
    tiktoken_encoding: str = Field(
        default="cl100k_base",
        description="tiktoken encoding used when CHUNK_TOKEN_ESTIMATOR=tiktoken. Env var: CHUNK_TIKTOKEN_ENCODING",
    )

    def to_config(self) -> ChunkingConfig:
        """Build the chunker configuration from these settings."""
        return ChunkingConfig(
            target_chunk_size=self.target_size,
            overlap=self.overlap,
            max_chunk_size=self.max_size,
        )


class EmbeddingSettings(BaseSettings):
    """Embedding backend configuration (OpenAI-compatible /v1/embeddings)."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    llm_base_url: str = Field(
        default="http://127.0.0.1:1234",
        description="Embedding backend base URL, without the /v1 suffix. Env var: LLM_BASE_URL",
    )
    llm_embed_model: str = Field(
        default="gemma-3", description="Embedding model name. Env var: LLM_EMBED_MODEL"
    )
    llm_api_key: Optional[str] = Field(
        default=None,
        description="API key for the embedding backend (local servers accept any value). Env var: LLM_API_KEY",
    )
    request_timeout_ms: int = Field(
        default=15000, description="Embedding request timeout in milliseconds. Env var: REQUEST_TIMEOUT_MS"
    )
    embed_dimensions: int = Field(
        default=768, description="Expected embedding dimensionality. Env var: EMBED_DIMENSIONS"
    )
    embed_validate_dimensions: bool = Field(
        default=False,
        description="Fail a batch when a vector has an unexpected dimension. Env var: EMBED_VALIDATE_DIMENSIONS",
    )
    embed_batch_size: int = Field(
        default=16, description="Texts per embedding request. Env var: EMBED_BATCH_SIZE"
    )
    embed_delay_ms: int = Field(
        default=0, description="Pause between embedding batches in milliseconds. Env var: EMBED_DELAY_MS"
    )

    @field_validator("embed_batch_size")
    @classmethod
    def clamp_batch_size(cls, v: int) -> int:
        """Batch size is at least one."""
        return max(1, v)

    @field_validator("embed_delay_ms")
    @classmethod
    def clamp_delay(cls, v: int) -> int:
        """Delay is never negative."""
        return max(0, v)

    @property
    def timeout(self) -> float:
        """Request timeout in seconds."""
        return self.request_timeout_ms / 1000.0


class IngestionSettings(BaseSettings):
    """Ingestion worker configuration."""

    model_config = SettingsConfigDict(env_prefix="INGEST_", case_sensitive=False)

    concurrency: int = Field(
        default=4, description="Pages indexed concurrently. Env var: INGEST_CONCURRENCY"
    )
    max_retries: int = Field(
        default=3, description="Attempts per embedding batch. Env var: INGEST_MAX_RETRIES"
    )
    retry_backoff_factor: float = Field(
        default=1.0,
        description="Exponential backoff multiplier in seconds. Env var: INGEST_RETRY_BACKOFF_FACTOR",
    )
    retry_max_delay: float = Field(
        default=30.0,
        description="Maximum delay between retries in seconds. Env var: INGEST_RETRY_MAX_DELAY",
    )

    @field_validator("concurrency", "max_retries")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        """Concurrency and attempts are at least one."""
        return max(1, v)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="page-ingestion", description="Application name. Env var: APP_NAME")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment. Env var: ENVIRONMENT",
    )
    debug: bool = Field(default=False, description="Enable debug mode. Env var: DEBUG")
    log_level: str = Field(default="INFO", description="Logging level. Env var: LOG_LEVEL")

    # Sub-settings
    chunking: Optional[ChunkingSettings] = None
    embedding: Optional[EmbeddingSettings] = None
    ingestion: Optional[IngestionSettings] = None

    @model_validator(mode="after")
    def initialize_nested_settings(self) -> "Settings":
        """Initialize nested settings to ensure they read from environment."""
        if self.chunking is None:
            self.chunking = ChunkingSettings()
        if self.embedding is None:
            self.embedding = EmbeddingSettings()
        if self.ingestion is None:
            self.ingestion = IngestionSettings()
        return self

    @field_validator("environment", mode="before")
    @classmethod
    def parse_environment(cls, v):
        """Parse environment from string."""
        if isinstance(v, str):
            try:
                return Environment(v.lower())
            except ValueError:
                return Environment.DEVELOPMENT
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    def validate_production_settings(self) -> None:
        """Validate that production settings are sane."""
        if self.is_production and self.debug:
            raise ValueError("DEBUG must be False in production")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.validate_production_settings()
    return _settings
