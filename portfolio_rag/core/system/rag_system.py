"""
Main RAG system class that orchestrates all components.

Builds the knowledge base once (load -> chunk -> embed) and answers each
question either from retrieved passages or, when the index is unavailable
or the retrieval path fails, from the full document text.
"""

import asyncio
from typing import Any, Dict, List, Optional

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel

from portfolio_rag.chains.rag_chains import AnswerSynthesizer, Context, create_chat_model
from portfolio_rag.config.settings import RAGConfig, get_config
from portfolio_rag.core.data import PassageChunker, TextDocumentLoader, build_fallback_context
from portfolio_rag.core.embeddings import create_embeddings
from portfolio_rag.core.system.state import (
    AnswerMode,
    Answered,
    ChatOutcome,
    Degraded,
    Failed,
    KnowledgeSnapshot,
    NotReady,
    ReadinessState,
    Ready,
    Unavailable,
)
from portfolio_rag.core.vectorstore import EmbeddingIndex
from portfolio_rag.utils.decorators import retry_async, timing_decorator
from portfolio_rag.utils.exceptions import GenerationError, RAGException, RequestValidationError
from portfolio_rag.utils.logging import get_logger, preview

logger = get_logger(__name__)


class RAGOrchestrator:
    """Owns the knowledge base lifecycle and the per-request answering policy."""

    def __init__(
        self,
        config: Optional[RAGConfig] = None,
        embeddings: Optional[Embeddings] = None,
        llm: Optional[BaseChatModel] = None,
        loader: Optional[TextDocumentLoader] = None,
        chunker: Optional[PassageChunker] = None
    ):
        """
        Initialize the orchestrator. Nothing is loaded until ``initialize``.

        Args:
            config: Configuration, the global one if None
            embeddings: Embedding service, OpenAI from config if None
            llm: Chat model, OpenAI from config if None
            loader: Document loader, the configured data folder if None
            chunker: Passage chunker, the configured sizes if None
        """
        self.config = config or get_config()
        self.loader = loader or TextDocumentLoader(
            self.config.data.data_folder,
            self.config.data.extensions
        )
        self.chunker = chunker or PassageChunker(
            self.config.data.chunk_size,
            self.config.data.chunk_overlap
        )

        self._embeddings = embeddings
        self._llm = llm
        self._synthesizer: Optional[AnswerSynthesizer] = None
        self._snapshot = KnowledgeSnapshot()
        self._init_task: Optional[asyncio.Task] = None

        logger.info("🔧 RAG orchestrator created")

    @property
    def snapshot(self) -> KnowledgeSnapshot:
        return self._snapshot

    @property
    def state(self) -> ReadinessState:
        return self._snapshot.state

    def _publish(self, snapshot: KnowledgeSnapshot) -> None:
        previous = self._snapshot.state
        self._snapshot = snapshot
        logger.info(f"🔄 Knowledge base state: {previous.value} -> {snapshot.state.value}")

    def _get_embeddings(self) -> Embeddings:
        if self._embeddings is None:
            self._embeddings = create_embeddings(config=self.config)
        return self._embeddings

    def _get_synthesizer(self) -> AnswerSynthesizer:
        if self._synthesizer is None:
            llm = self._llm or create_chat_model(self.config)
            self._synthesizer = AnswerSynthesizer(llm, timeout=self.config.llm.timeout)
        return self._synthesizer

    # Initialization

    def start_initialization(self) -> "asyncio.Task[KnowledgeSnapshot]":
        """
        Move to ``initializing`` and build the knowledge base in the background.

        Calling this while a build is running returns the running build.
        """
        if self._init_task is not None and not self._init_task.done():
            logger.info("⏳ Initialization already running")
            return self._init_task

        self._publish(KnowledgeSnapshot(
            state=ReadinessState.INITIALIZING,
            fallback_context=self._snapshot.fallback_context,
            document_count=self._snapshot.document_count
        ))
        self._init_task = asyncio.create_task(self._build_knowledge_base())
        return self._init_task

    async def initialize(self) -> KnowledgeSnapshot:
        """Build the knowledge base and wait for the result."""
        return await self.start_initialization()

    @timing_decorator
    async def _build_knowledge_base(self) -> KnowledgeSnapshot:
        logger.info("📚 Initializing RAG knowledge base")
        documents = []
        fallback_context = ""

        try:
            documents = await asyncio.to_thread(self.loader.load_documents)
            fallback_context = build_fallback_context(documents)
            passages = self.chunker.process_documents(documents)
            index = await EmbeddingIndex.build(
                passages,
                self._get_embeddings(),
                batch_size=self.config.embedding.batch_size,
                max_retries=self.config.embedding.max_retries,
                retry_delay=self.config.embedding.retry_delay
            )
        except Exception as e:
            logger.error(f"❌ Failed to initialize knowledge base, serving degraded: {type(e).__name__}: {str(e)}")
            snapshot = KnowledgeSnapshot(
                state=ReadinessState.FAILED,
                fallback_context=fallback_context,
                error=e,
                document_count=len(documents)
            )
        else:
            logger.info(f"✅ RAG ready: {len(documents)} documents, {len(index)} passages indexed")
            snapshot = KnowledgeSnapshot(
                state=ReadinessState.READY,
                fallback_context=fallback_context,
                index=index,
                document_count=len(documents),
                passage_count=len(index)
            )

        self._publish(snapshot)
        return snapshot

    async def close(self) -> None:
        """Cancel a running build."""
        if self._init_task is not None and not self._init_task.done():
            self._init_task.cancel()
            try:
                await self._init_task
            except asyncio.CancelledError:
                pass
        logger.info("🛑 RAG orchestrator closed")

    # Requests

    def validate_question(self, question: Any) -> str:
        """
        Check an incoming question.

        Raises:
            RequestValidationError: If the question is missing, not text, blank or too long
        """
        if question is None:
            raise RequestValidationError("question is required")
        if not isinstance(question, str):
            raise RequestValidationError("question must be a string")

        question = question.strip()
        if not question:
            raise RequestValidationError("question must not be empty")

        max_length = self.config.server.max_question_length
        if len(question) > max_length:
            raise RequestValidationError(f"question must be at most {max_length} characters")
        return question

    async def _generate(self, question: str, context: Context) -> str:
        synthesizer = self._get_synthesizer()
        return await retry_async(
            lambda: synthesizer.synthesize(question, context),
            max_retries=self.config.llm.max_retries,
            delay=self.config.llm.retry_delay,
            retry_on=(GenerationError,),
            description="synthesize"
        )

    async def _answer_from_index(self, question: str, index: EmbeddingIndex) -> Answered:
        results = await index.query(question, self.config.retrieval.default_k)
        passages = [result.passage for result in results]
        answer = await self._generate(question, passages)

        sources: List[str] = []
        for passage in passages:
            if passage.source not in sources:
                sources.append(passage.source)
        return Answered(answer=answer, mode=AnswerMode.RAG, sources=tuple(sources))

    async def answer(self, question: Any) -> ChatOutcome:
        """
        Answer a question with whichever path the current state allows.

        Args:
            question: Raw question from the request

        Returns:
            Answered, NotReady (only with the ``reject`` policy) or Unavailable

        Raises:
            RequestValidationError: Before either path runs, for bad input
        """
        question = self.validate_question(question)
        route = self._snapshot.route()
        logger.info(f"❓ Processing question: {preview(question)} (route={type(route).__name__})")

        if isinstance(route, Ready):
            try:
                return await self._answer_from_index(question, route.index)
            except Exception as e:
                logger.warning(f"⚠️ Retrieval path failed, falling back to full context: {type(e).__name__}: {str(e)}")
        elif isinstance(route, Degraded):
            if self.config.server.initializing_policy == "reject":
                logger.info("⏳ Knowledge base not ready, rejecting question")
                return NotReady(state=self._snapshot.state)
            logger.info("⏳ Knowledge base not ready, answering from full context")
        elif isinstance(route, Failed):
            logger.info(f"🩹 Index unavailable ({type(route.cause).__name__}), answering from full context")

        try:
            answer = await self._generate(question, route.fallback_context)
        except RAGException as e:
            logger.error(f"❌ Fallback path failed: {str(e)}")
            return Unavailable(cause=e)

        return Answered(answer=answer, mode=AnswerMode.FALLBACK)

    def health_check(self) -> Dict[str, Any]:
        """Describe the knowledge base for monitoring."""
        snapshot = self._snapshot
        status = "healthy" if snapshot.state is ReadinessState.READY else "degraded"
        return {"status": status, **snapshot.describe()}


def create_rag_orchestrator(config: Optional[RAGConfig] = None) -> RAGOrchestrator:
    """
    Factory function to create the RAG orchestrator with default providers.

    Returns:
        RAGOrchestrator instance
    """
    return RAGOrchestrator(config=config)
