"""
Main FastAPI application.

Wires the orchestrator into the API. The server starts accepting requests
before the knowledge base is built; the build runs as a background task
started from the lifespan handler.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError as BodyValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_rag import __version__
from portfolio_rag.api.endpoints import chat_router, health_router, system_router
from portfolio_rag.api.models import FAILURE_MESSAGE, INVALID_QUESTION_MESSAGE
from portfolio_rag.config.settings import RAGConfig, get_config
from portfolio_rag.core.system import RAGOrchestrator
from portfolio_rag.utils.exceptions import RequestValidationError
from portfolio_rag.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(
    config: Optional[RAGConfig] = None,
    orchestrator: Optional[RAGOrchestrator] = None,
    initialize_on_startup: bool = True
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Configuration, the global one if None
        orchestrator: Orchestrator to serve, built from config if None
        initialize_on_startup: Start the knowledge base build when the app starts

    Returns:
        Configured FastAPI app
    """
    config = config or get_config()
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting RAG API server")
        if initialize_on_startup:
            app.state.orchestrator.start_initialization()
        yield
        await app.state.orchestrator.close()

    app = FastAPI(
        title="Portfolio RAG API",
        description="Retrieval-augmented chat over a local document set",
        version=__version__,
        lifespan=lifespan
    )
    app.state.orchestrator = orchestrator or RAGOrchestrator(config=config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat_router)
    app.include_router(health_router)
    app.include_router(system_router)

    @app.get("/", response_model=dict)
    async def root():
        """Root endpoint with API information."""
        return {
            "message": "Portfolio RAG API",
            "version": __version__,
            "chat": "/api/chat",
            "health": "/health"
        }

    @app.exception_handler(RequestValidationError)
    async def question_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"⚠️ Rejected question: {str(exc)}")
        return JSONResponse(status_code=422, content={"answer": INVALID_QUESTION_MESSAGE})

    @app.exception_handler(BodyValidationError)
    async def body_error_handler(request: Request, exc: BodyValidationError):
        logger.warning(f"⚠️ Rejected request body on {request.url.path}")
        return JSONResponse(status_code=422, content={"answer": INVALID_QUESTION_MESSAGE})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(f"❌ Internal server error: {type(exc).__name__}: {str(exc)}")
        return JSONResponse(status_code=500, content={"answer": FAILURE_MESSAGE})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    server_config = get_config().server
    uvicorn.run(
        "portfolio_rag.api.main:app",
        host=server_config.host,
        port=server_config.port,
        log_level="info"
    )
