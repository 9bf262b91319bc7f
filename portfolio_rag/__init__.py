"""
Portfolio RAG Chat Backend

A small Retrieval-Augmented Generation service built with:
- LangChain for document loading, embeddings and chat models
- An in-memory embedding index built once at startup
- FastAPI for the HTTP surface
- A degraded fallback mode that answers from the full document text
"""

__version__ = "1.0.0"
