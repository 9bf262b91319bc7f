"""
Data processing module initialization.

Exports main classes and functions for document loading and chunking.
"""

from .loaders import (
    TextDocumentLoader,
    build_fallback_context,
    load_text_documents
)

from .processors import (
    FixedWindowTextSplitter,
    PassageChunker,
    split_documents
)

__all__ = [
    # Loaders
    "TextDocumentLoader",
    "build_fallback_context",
    "load_text_documents",

    # Processors
    "FixedWindowTextSplitter",
    "PassageChunker",
    "split_documents"
]
