"""
Environment settings and configuration management.

Provides centralized configuration using Pydantic models
for type safety and validation.
"""

from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_rag.utils.exceptions import APIKeyError

# Load environment variables
load_dotenv()


class DataConfig(BaseSettings):
    """Document source and chunking configuration."""

    data_folder: str = Field(default="./data")
    extensions: List[str] = Field(default_factory=lambda: [".md", ".txt"])
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)

    model_config = SettingsConfigDict(env_prefix="DATA_", extra="ignore")

    @model_validator(mode="after")
    def check_overlap(self) -> "DataConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than chunk_size ({self.chunk_size})"
            )
        return self


class EmbeddingConfig(BaseSettings):
    """Embedding model configuration."""

    model_name: str = Field(default="text-embedding-3-small")
    batch_size: int = Field(default=100, gt=0)
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_", extra="ignore")


class LLMConfig(BaseSettings):
    """Large Language Model configuration."""

    model_name: str = Field(default="gpt-4o-mini")
    temperature: float = Field(default=0.3)
    max_tokens: int = Field(default=1000)
    timeout: float = Field(default=60.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)

    model_config = SettingsConfigDict(env_prefix="LLM_", extra="ignore")


class RetrievalConfig(BaseSettings):
    """Retrieval configuration."""

    default_k: int = Field(default=4, ge=1)

    model_config = SettingsConfigDict(env_prefix="RETRIEVAL_", extra="ignore")


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=10000, validation_alias=AliasChoices("PORT", "SERVER_PORT"))
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_question_length: int = Field(default=2000, gt=0)
    # "fallback" answers from the full document text while the index builds,
    # "reject" returns 503 until initialization finishes.
    initializing_policy: Literal["fallback", "reject"] = Field(default="fallback")

    model_config = SettingsConfigDict(env_prefix="SERVER_", extra="ignore", populate_by_name=True)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file_path: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")


class RAGConfig(BaseSettings):
    """Main RAG system configuration."""

    data: DataConfig = Field(default_factory=DataConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # API Keys
    openai_api_key: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


# Global configuration instance, created on first use
_config: Optional[RAGConfig] = None


def get_config() -> RAGConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = RAGConfig()
    return _config


def validate_api_keys(config: Optional[RAGConfig] = None) -> None:
    """Validate that required API keys are present."""
    config = config or get_config()
    required_keys = ["openai_api_key"]
    missing_keys = [key for key in required_keys if not getattr(config, key)]

    if missing_keys:
        raise APIKeyError(f"Missing required API keys: {', '.join(missing_keys)}")
