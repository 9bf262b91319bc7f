"""
Health check endpoint.

Provides knowledge base readiness monitoring.
"""

from fastapi import APIRouter, Depends

from portfolio_rag.api.dependencies import get_orchestrator
from portfolio_rag.api.models import HealthResponse
from portfolio_rag.core.system import RAGOrchestrator

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(orchestrator: RAGOrchestrator = Depends(get_orchestrator)):
    """Health check endpoint."""
    return HealthResponse(**orchestrator.health_check())
