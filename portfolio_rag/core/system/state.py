"""
State definitions for the knowledge base lifecycle and request dispatch.

``KnowledgeSnapshot`` is immutable; the orchestrator publishes a new one on
every readiness transition, and each request reads exactly one snapshot.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from portfolio_rag.core.vectorstore import EmbeddingIndex


class ReadinessState(str, Enum):
    """Lifecycle of the embedding index."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class AnswerMode(str, Enum):
    """Which path produced an answer."""

    RAG = "rag"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Ready:
    """The index is built; answer from retrieved passages."""

    index: EmbeddingIndex
    fallback_context: str


@dataclass(frozen=True)
class Degraded:
    """The index is not built yet; answer from the full document text."""

    fallback_context: str


@dataclass(frozen=True)
class Failed:
    """The index build failed; answer from the full document text."""

    cause: BaseException
    fallback_context: str


Route = Union[Ready, Degraded, Failed]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class KnowledgeSnapshot:
    """Everything a request needs to pick and run its answering path."""

    state: ReadinessState = ReadinessState.UNINITIALIZED
    fallback_context: str = ""
    index: Optional[EmbeddingIndex] = None
    error: Optional[BaseException] = None
    document_count: int = 0
    passage_count: int = 0
    updated_at: datetime = field(default_factory=_now)

    def route(self) -> Route:
        if self.state is ReadinessState.READY and self.index is not None:
            return Ready(index=self.index, fallback_context=self.fallback_context)
        if self.state is ReadinessState.FAILED:
            return Failed(cause=self.error, fallback_context=self.fallback_context)
        return Degraded(fallback_context=self.fallback_context)

    def describe(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "documents": self.document_count,
            "passages": self.passage_count,
            "updated_at": self.updated_at.isoformat(),
            # the type only; messages may carry provider details
            "last_error": type(self.error).__name__ if self.error else None,
        }


@dataclass(frozen=True)
class Answered:
    answer: str
    mode: AnswerMode
    sources: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NotReady:
    state: ReadinessState


@dataclass(frozen=True)
class Unavailable:
    cause: BaseException


ChatOutcome = Union[Answered, NotReady, Unavailable]
