"""
Embedding providers for the RAG system.

Builds the LangChain embedding client used for both passages and queries.
"""

from typing import Optional

from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings

from portfolio_rag.config.settings import RAGConfig, get_config, validate_api_keys
from portfolio_rag.utils.logging import get_logger

logger = get_logger(__name__)


def create_embeddings(
    provider_type: str = "openai",
    config: Optional[RAGConfig] = None
) -> Embeddings:
    """
    Create an embedding client.

    Args:
        provider_type: Type of provider to create
        config: Configuration to read model and credentials from

    Returns:
        LangChain embeddings instance

    Raises:
        APIKeyError: If the provider's API key is missing
        ValueError: If provider type is not supported
    """
    config = config or get_config()

    if provider_type.lower() != "openai":
        raise ValueError(f"Unsupported embedding provider type: {provider_type}")

    validate_api_keys(config)
    embeddings = OpenAIEmbeddings(
        model=config.embedding.model_name,
        openai_api_key=config.openai_api_key,
        # retries are applied per batch by the index
        max_retries=0
    )
    logger.info(f"🤖 Initialized OpenAI embedding provider: {config.embedding.model_name}")
    return embeddings
