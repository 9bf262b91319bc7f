"""
Configuration management for the RAG system.

Handles environment variables, settings, and configuration models
using Pydantic for validation and type safety.
"""

from .settings import RAGConfig, get_config, validate_api_keys
from .models import Passage, ScoredPassage, SourceDocument

__all__ = [
    "RAGConfig",
    "get_config",
    "validate_api_keys",
    "Passage",
    "ScoredPassage",
    "SourceDocument"
]
