"""
Chat endpoint.

Answers a question from retrieved passages or, in degraded mode, from the
full document text. Failure bodies never carry internal error details.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portfolio_rag.api.dependencies import get_orchestrator
from portfolio_rag.api.models import (
    FAILURE_MESSAGE,
    INITIALIZING_MESSAGE,
    ChatRequest,
    ChatResponse
)
from portfolio_rag.core.system import Answered, NotReady, RAGOrchestrator
from portfolio_rag.utils.exceptions import RequestValidationError
from portfolio_rag.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        422: {"model": ChatResponse},
        500: {"model": ChatResponse},
        503: {"model": ChatResponse}
    }
)
async def chat(request: ChatRequest, orchestrator: RAGOrchestrator = Depends(get_orchestrator)):
    """Answer a question about the portfolio."""
    try:
        outcome = await orchestrator.answer(request.question)
    except RequestValidationError:
        raise
    except Exception as e:
        logger.error(f"❌ Chat request failed unexpectedly: {type(e).__name__}: {str(e)}")
        return JSONResponse(status_code=500, content={"answer": FAILURE_MESSAGE})

    if isinstance(outcome, Answered):
        logger.info(f"✅ Answered via {outcome.mode.value} path")
        return ChatResponse(answer=outcome.answer)

    if isinstance(outcome, NotReady):
        return JSONResponse(status_code=503, content={"answer": INITIALIZING_MESSAGE})

    logger.error(f"❌ Both answering paths failed: {type(outcome.cause).__name__}")
    return JSONResponse(status_code=500, content={"answer": FAILURE_MESSAGE})
