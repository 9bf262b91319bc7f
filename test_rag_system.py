"""
Tests for the orchestrator: readiness transitions, the two-tier fallback
policy and the end-to-end scenarios.
"""

import asyncio

import pytest

from conftest import (
    BlankChatModel,
    EchoChatModel,
    FailingEmbeddings,
    GatedEmbeddings,
    KeywordEmbeddings,
    MalformedQueryEmbeddings,
    make_config,
)
from portfolio_rag.core.system import (
    AnswerMode,
    Answered,
    NotReady,
    RAGOrchestrator,
    ReadinessState,
    Unavailable,
)
from portfolio_rag.utils.exceptions import EmbeddingServiceError, LoadError, RequestValidationError


def make_orchestrator(folder, embeddings=None, llm=None, **config_kwargs):
    return RAGOrchestrator(
        config=make_config(folder, **config_kwargs),
        embeddings=embeddings or KeywordEmbeddings(),
        llm=llm or EchoChatModel()
    )


def test_initialize_builds_index_and_becomes_ready(data_dir):
    orchestrator = make_orchestrator(data_dir)
    assert orchestrator.state is ReadinessState.UNINITIALIZED

    snapshot = asyncio.run(orchestrator.initialize())

    assert snapshot.state is ReadinessState.READY
    assert snapshot.document_count == 2
    assert snapshot.passage_count == 2
    assert orchestrator.health_check()["status"] == "healthy"


def test_question_about_location_is_answered_from_retrieved_passage(data_dir):
    llm = EchoChatModel()
    orchestrator = make_orchestrator(data_dir, llm=llm, chunk_size=50, chunk_overlap=10)

    async def scenario():
        await orchestrator.initialize()
        retrieved = await orchestrator.snapshot.index.query("Where does Mushtaq live?", 1)
        outcome = await orchestrator.answer("Where does Mushtaq live?")
        return retrieved, outcome

    retrieved, outcome = asyncio.run(scenario())

    assert "City X" in retrieved[0].passage.text
    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.RAG
    assert outcome.sources[0] == "location.md"
    assert "City X" in outcome.answer
    assert "City X" in llm.received[0][0].content


def test_empty_data_folder_end_to_end(empty_dir):
    llm = EchoChatModel()
    orchestrator = make_orchestrator(empty_dir, llm=llm)

    async def scenario():
        snapshot = await orchestrator.initialize()
        results = await snapshot.index.query("Where does Mushtaq live?", 4)
        outcome = await orchestrator.answer("Where does Mushtaq live?")
        return snapshot, results, outcome

    snapshot, results, outcome = asyncio.run(scenario())

    assert snapshot.state is ReadinessState.READY
    assert snapshot.passage_count == 0
    assert snapshot.fallback_context == ""
    assert results == []
    assert isinstance(outcome, Answered)
    assert len(llm.received) == 1


def test_build_failure_serves_every_request_from_fallback(data_dir):
    embeddings = FailingEmbeddings()
    llm = EchoChatModel()
    orchestrator = make_orchestrator(data_dir, embeddings=embeddings, llm=llm, embedding_retries=1)

    async def scenario():
        snapshot = await orchestrator.initialize()
        outcomes = [await orchestrator.answer(q) for q in ("Who is Mushtaq?", "Where does he live?")]
        return snapshot, outcomes

    snapshot, outcomes = asyncio.run(scenario())

    assert snapshot.state is ReadinessState.FAILED
    assert isinstance(snapshot.error, EmbeddingServiceError)
    assert snapshot.index is None
    assert all(isinstance(o, Answered) and o.mode is AnswerMode.FALLBACK for o in outcomes)
    for messages in llm.received:
        assert "Mushtaq is a software engineer.\n\nHe lives in City X." in messages[0].content
    assert embeddings.query_calls == 0
    assert orchestrator.health_check()["last_error"] == "EmbeddingServiceError"


def test_load_failure_is_not_fatal(tmp_path):
    orchestrator = make_orchestrator(tmp_path / "missing")

    async def scenario():
        snapshot = await orchestrator.initialize()
        return snapshot, await orchestrator.answer("Who is Mushtaq?")

    snapshot, outcome = asyncio.run(scenario())

    assert snapshot.state is ReadinessState.FAILED
    assert isinstance(snapshot.error, LoadError)
    assert snapshot.fallback_context == ""
    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.FALLBACK


def test_request_time_retrieval_failure_falls_back(data_dir):
    embeddings = FailingEmbeddings(fail_documents=False)
    orchestrator = make_orchestrator(data_dir, embeddings=embeddings)

    async def scenario():
        await orchestrator.initialize()
        return await orchestrator.answer("Where does Mushtaq live?")

    outcome = asyncio.run(scenario())

    assert orchestrator.state is ReadinessState.READY
    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.FALLBACK
    assert "He lives in City X." in outcome.answer


def test_request_time_generation_failure_falls_back(data_dir):
    llm = EchoChatModel(failures=1)
    orchestrator = make_orchestrator(data_dir, llm=llm)

    async def scenario():
        await orchestrator.initialize()
        return await orchestrator.answer("Where does Mushtaq live?")

    outcome = asyncio.run(scenario())

    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.FALLBACK
    assert llm.calls == 2


def test_malformed_query_vector_falls_back(data_dir):
    embeddings = MalformedQueryEmbeddings()
    orchestrator = make_orchestrator(data_dir, embeddings=embeddings)

    async def scenario():
        await orchestrator.initialize()
        return await orchestrator.answer("Where does Mushtaq live?")

    outcome = asyncio.run(scenario())

    assert orchestrator.state is ReadinessState.READY
    assert embeddings.query_calls == 1
    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.FALLBACK
    assert "He lives in City X." in outcome.answer


def test_blank_model_answer_falls_back(data_dir):
    llm = BlankChatModel(blanks=1)
    orchestrator = make_orchestrator(data_dir, llm=llm)

    async def scenario():
        await orchestrator.initialize()
        return await orchestrator.answer("Where does Mushtaq live?")

    outcome = asyncio.run(scenario())

    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.FALLBACK
    assert llm.calls == 2
    assert "He lives in City X." in outcome.answer


def test_blank_model_answers_on_both_paths_return_unavailable(data_dir):
    orchestrator = make_orchestrator(data_dir, llm=BlankChatModel())

    async def scenario():
        await orchestrator.initialize()
        return await orchestrator.answer("Where does Mushtaq live?")

    assert isinstance(asyncio.run(scenario()), Unavailable)


def test_transient_generation_failure_is_retried_on_the_same_path(data_dir):
    llm = EchoChatModel(failures=1)
    orchestrator = make_orchestrator(data_dir, llm=llm, llm_retries=1)

    async def scenario():
        await orchestrator.initialize()
        return await orchestrator.answer("Where does Mushtaq live?")

    outcome = asyncio.run(scenario())

    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.RAG


def test_both_paths_failing_returns_unavailable(data_dir):
    orchestrator = make_orchestrator(data_dir, llm=EchoChatModel(failures=None))

    async def scenario():
        await orchestrator.initialize()
        return await orchestrator.answer("Where does Mushtaq live?")

    outcome = asyncio.run(scenario())

    assert isinstance(outcome, Unavailable)


@pytest.mark.parametrize("question", [None, 42, "", "   ", "x" * 2001])
def test_invalid_questions_are_rejected_before_any_model_call(data_dir, question):
    llm = EchoChatModel()
    orchestrator = make_orchestrator(data_dir, llm=llm)

    with pytest.raises(RequestValidationError):
        asyncio.run(orchestrator.answer(question))
    assert llm.calls == 0


def test_uninitialized_system_answers_from_fallback(data_dir):
    orchestrator = make_orchestrator(data_dir)

    outcome = asyncio.run(orchestrator.answer("Who is Mushtaq?"))

    assert isinstance(outcome, Answered)
    assert outcome.mode is AnswerMode.FALLBACK


def test_reject_policy_refuses_questions_until_ready(data_dir):
    orchestrator = make_orchestrator(data_dir, initializing_policy="reject")

    async def scenario():
        before = await orchestrator.answer("Who is Mushtaq?")
        await orchestrator.initialize()
        after = await orchestrator.answer("Who is Mushtaq?")
        return before, after

    before, after = asyncio.run(scenario())

    assert isinstance(before, NotReady)
    assert before.state is ReadinessState.UNINITIALIZED
    assert isinstance(after, Answered)
    assert after.mode is AnswerMode.RAG


def test_questions_during_initialization_are_served_degraded(data_dir):
    async def scenario():
        embeddings = GatedEmbeddings()
        orchestrator = make_orchestrator(data_dir, embeddings=embeddings)

        task = orchestrator.start_initialization()
        assert orchestrator.state is ReadinessState.INITIALIZING
        assert orchestrator.start_initialization() is task

        during = await orchestrator.answer("Where does Mushtaq live?")
        assert orchestrator.state is ReadinessState.INITIALIZING

        embeddings.gate.set()
        await task
        after = await orchestrator.answer("Where does Mushtaq live?")
        return orchestrator, during, after

    orchestrator, during, after = asyncio.run(scenario())

    assert during.mode is AnswerMode.FALLBACK
    assert after.mode is AnswerMode.RAG
    assert orchestrator.state is ReadinessState.READY


def test_reload_rebuilds_from_current_documents(data_dir):
    orchestrator = make_orchestrator(data_dir)

    async def scenario():
        await orchestrator.initialize()
        (data_dir / "projects.md").write_text("He built a portfolio chatbot.", encoding="utf-8")
        return await orchestrator.initialize()

    snapshot = asyncio.run(scenario())

    assert snapshot.state is ReadinessState.READY
    assert snapshot.document_count == 3
    assert "portfolio chatbot" in snapshot.fallback_context
