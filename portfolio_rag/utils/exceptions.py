"""
Custom exceptions for the RAG system.

Provides specific exception types for different error scenarios.
"""


class RAGException(Exception):
    """Base exception for RAG system errors."""
    pass


class ConfigurationError(RAGException):
    """Raised when configuration is invalid or missing."""
    pass


class APIKeyError(ConfigurationError):
    """Raised when API keys are missing or invalid."""
    pass


class LoadError(RAGException):
    """Raised when the document source is missing or unreadable."""
    pass


class EmbeddingServiceError(RAGException):
    """Raised when an embedding call fails after its retry budget."""
    pass


class GenerationError(RAGException):
    """Raised when the chat completion call fails."""
    pass


class RequestValidationError(RAGException):
    """Raised when an incoming question is missing or malformed."""
    pass
