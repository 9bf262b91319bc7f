"""
System management endpoints.

Handles explicit re-initialization of the knowledge base.
"""

from fastapi import APIRouter, Depends

from portfolio_rag.api.dependencies import get_orchestrator
from portfolio_rag.api.models import ReloadResponse
from portfolio_rag.core.system import RAGOrchestrator
from portfolio_rag.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


@router.post("/reload", response_model=ReloadResponse, status_code=202)
async def reload_system(orchestrator: RAGOrchestrator = Depends(get_orchestrator)):
    """Rebuild the knowledge base in the background."""
    logger.info("🔄 Knowledge base reload requested")
    orchestrator.start_initialization()
    return ReloadResponse(
        message="Knowledge base reload started",
        state=orchestrator.state.value
    )
