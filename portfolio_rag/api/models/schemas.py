"""
API models for request/response schemas.

Pydantic models for type-safe API communication.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

FAILURE_MESSAGE = "Sorry, I couldn't answer that right now. Please try again later."
INITIALIZING_MESSAGE = "The assistant is still starting up. Please try again in a moment."
INVALID_QUESTION_MESSAGE = "Please send a non-empty question."


class ChatRequest(BaseModel):
    """Request model for chat questions."""
    question: str = Field(..., description="The question to ask about the portfolio")


class ChatResponse(BaseModel):
    """Response model for chat answers, also used for error bodies."""
    answer: str = Field(..., description="The generated answer or a fixed error message")


class HealthResponse(BaseModel):
    """Response model for health checks."""
    status: str = Field(..., description="healthy when the index is ready, degraded otherwise")
    state: str = Field(..., description="Knowledge base readiness state")
    documents: int = Field(..., description="Documents loaded")
    passages: int = Field(..., description="Passages indexed")
    updated_at: str = Field(..., description="Time of the last state change")
    last_error: Optional[str] = Field(default=None, description="Type of the last initialization error")
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat(), description="Health check timestamp")


class ReloadResponse(BaseModel):
    """Response model for knowledge base reloads."""
    message: str = Field(..., description="Reload status message")
    state: str = Field(..., description="Readiness state after the reload was scheduled")
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat(), description="Reload timestamp")
