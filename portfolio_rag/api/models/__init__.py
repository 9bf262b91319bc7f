"""
API models module initialization.

Exports all Pydantic models for API communication.
"""

from .schemas import (
    FAILURE_MESSAGE,
    INITIALIZING_MESSAGE,
    INVALID_QUESTION_MESSAGE,
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ReloadResponse
)

__all__ = [
    "FAILURE_MESSAGE",
    "INITIALIZING_MESSAGE",
    "INVALID_QUESTION_MESSAGE",
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "ReloadResponse"
]
