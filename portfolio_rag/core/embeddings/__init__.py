"""
Embedding module initialization.

Exports the embedding provider factory.
"""

from .providers import create_embeddings

__all__ = [
    "create_embeddings"
]
