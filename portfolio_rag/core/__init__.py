"""
Core business logic modules for the RAG system.

This package contains the fundamental components:
- Document loading and chunking
- Embedding providers
- The in-memory embedding index
- The orchestrator that ties them to the answer synthesizer
"""
