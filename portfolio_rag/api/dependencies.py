"""FastAPI dependencies shared by the endpoints."""

from fastapi import Request

from portfolio_rag.core.system import RAGOrchestrator


def get_orchestrator(request: Request) -> RAGOrchestrator:
    return request.app.state.orchestrator
