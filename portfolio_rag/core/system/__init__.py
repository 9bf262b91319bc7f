"""
Core system module initialization.

Exports the orchestrator and its state types.
"""

from .rag_system import RAGOrchestrator, create_rag_orchestrator
from .state import (
    AnswerMode,
    Answered,
    ChatOutcome,
    Degraded,
    Failed,
    KnowledgeSnapshot,
    NotReady,
    ReadinessState,
    Ready,
    Unavailable
)

__all__ = [
    "RAGOrchestrator",
    "create_rag_orchestrator",
    "AnswerMode",
    "Answered",
    "ChatOutcome",
    "Degraded",
    "Failed",
    "KnowledgeSnapshot",
    "NotReady",
    "ReadinessState",
    "Ready",
    "Unavailable"
]
