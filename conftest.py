"""
Shared fixtures and stub collaborators for the test suite.

The stubs implement LangChain's ``Embeddings`` and ``BaseChatModel``
interfaces so the real index, synthesizer and orchestrator code runs
unchanged without network access.
"""

import asyncio
import re
from pathlib import Path
from typing import Any, List, Optional

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from portfolio_rag.config.settings import (
    DataConfig,
    EmbeddingConfig,
    LLMConfig,
    RAGConfig,
    RetrievalConfig,
    ServerConfig,
)

MUSHTAQ_DOCUMENTS = {
    "about.md": "Mushtaq is a software engineer.",
    "location.md": "He lives in City X.",
}


class KeywordEmbeddings(Embeddings):
    """Counts topic keywords; a constant last component keeps vectors non-zero."""

    TOPICS = (
        ("where", "live", "lives", "city", "located", "home"),
        ("engineer", "software", "job", "work", "developer"),
        ("project", "projects", "built", "portfolio"),
    )

    def __init__(self):
        self.document_calls = 0
        self.query_calls = 0

    def vector(self, text: str) -> List[float]:
        words = re.findall(r"[a-z]+", text.lower())
        return [float(sum(word in topic for word in words)) for topic in self.TOPICS] + [1.0]

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        self.document_calls += 1
        return [self.vector(text) for text in texts]

    def embed_query(self, text: str) -> List[float]:
        self.query_calls += 1
        return self.vector(text)


class FailingEmbeddings(KeywordEmbeddings):
    """Fails the first ``failures`` calls of each kind, or always when None."""

    def __init__(self, failures: Optional[int] = None, fail_queries: bool = True, fail_documents: bool = True):
        super().__init__()
        self.failures = failures
        self.fail_queries = fail_queries
        self.fail_documents = fail_documents

    def _should_fail(self, calls: int) -> bool:
        return self.failures is None or calls <= self.failures

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        self.document_calls += 1
        if self.fail_documents and self._should_fail(self.document_calls):
            raise RuntimeError("embedding quota exhausted")
        return [self.vector(text) for text in texts]

    def embed_query(self, text: str) -> List[float]:
        self.query_calls += 1
        if self.fail_queries and self._should_fail(self.query_calls):
            raise RuntimeError("embedding service unreachable")
        return self.vector(text)


class ShortEmbeddings(KeywordEmbeddings):
    """Returns one vector fewer than requested."""

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        return super().embed_documents(texts)[:-1]


class GatedEmbeddings(KeywordEmbeddings):
    """Holds passage embedding until ``gate`` is set."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()

    async def aembed_documents(self, texts: List[str]) -> List[List[float]]:
        await self.gate.wait()
        return self.embed_documents(texts)


class MalformedQueryEmbeddings(KeywordEmbeddings):
    """Indexes normally but answers queries with a non-numeric payload."""

    def embed_query(self, text: str) -> Any:
        self.query_calls += 1
        return {"error": "malformed"}


class EchoChatModel(BaseChatModel):
    """Answers with the content of every message it received."""

    received: List[List[BaseMessage]] = Field(default_factory=list)
    failures: Optional[int] = 0
    calls: int = 0

    @property
    def _llm_type(self) -> str:
        return "echo"

    def _generate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Any = None,
        **kwargs: Any
    ) -> ChatResult:
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            raise RuntimeError("rate limited by provider")
        self.received.append(list(messages))
        text = "\n".join(str(message.content) for message in messages)
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content=text))])


class SlowChatModel(EchoChatModel):
    """Never answers within a short timeout."""

    async def _agenerate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Any = None,
        **kwargs: Any
    ) -> ChatResult:
        await asyncio.sleep(5)
        return self._generate(messages, stop=stop)


class BlankChatModel(EchoChatModel):
    """Replies with whitespace for the first ``blanks`` calls, or always when None."""

    blanks: Optional[int] = None

    def _generate(
        self,
        messages: List[BaseMessage],
        stop: Optional[List[str]] = None,
        run_manager: Any = None,
        **kwargs: Any
    ) -> ChatResult:
        if self.blanks is None or self.calls < self.blanks:
            self.calls += 1
            return ChatResult(generations=[ChatGeneration(message=AIMessage(content="   "))])
        return super()._generate(messages, stop=stop, run_manager=run_manager, **kwargs)


def make_config(
    data_folder: Path,
    chunk_size: int = 50,
    chunk_overlap: int = 10,
    k: int = 4,
    llm_retries: int = 0,
    embedding_retries: int = 0,
    initializing_policy: str = "fallback"
) -> RAGConfig:
    return RAGConfig(
        data=DataConfig(data_folder=str(data_folder), chunk_size=chunk_size, chunk_overlap=chunk_overlap),
        embedding=EmbeddingConfig(max_retries=embedding_retries, retry_delay=0),
        llm=LLMConfig(max_retries=llm_retries, retry_delay=0, timeout=5),
        retrieval=RetrievalConfig(default_k=k),
        server=ServerConfig(initializing_policy=initializing_policy),
    )


def write_documents(folder: Path, documents: dict) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    for name, text in documents.items():
        path = folder / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return folder


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return write_documents(tmp_path / "data", MUSHTAQ_DOCUMENTS)


@pytest.fixture
def empty_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "empty"
    folder.mkdir()
    return folder
