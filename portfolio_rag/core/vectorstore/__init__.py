"""
Vector store module initialization.

Exports the in-memory embedding index.
"""

from .memory_index import EmbeddingIndex

__all__ = [
    "EmbeddingIndex"
]
