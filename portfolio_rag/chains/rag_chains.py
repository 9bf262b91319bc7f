"""
LCEL chain compositions for the RAG system.

The answer synthesizer turns a question plus context (retrieved passages or
the full fallback text) into a single chat model call.
"""

import asyncio
from typing import Optional, Sequence, Union

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_openai import ChatOpenAI

from portfolio_rag.chains.prompts import get_no_context_prompt, get_rag_prompt
from portfolio_rag.config.models import Passage
from portfolio_rag.config.settings import RAGConfig, get_config, validate_api_keys
from portfolio_rag.utils.exceptions import GenerationError
from portfolio_rag.utils.logging import get_logger, preview

logger = get_logger(__name__)

Context = Union[str, Sequence[Passage]]


def format_context(context: Context) -> str:
    """Render retrieved passages (or pass fallback text through) for the prompt."""
    if isinstance(context, str):
        return context
    return "\n\n".join(f"[{p.source}]\n{p.text}" for p in context)


def create_chat_model(config: Optional[RAGConfig] = None) -> ChatOpenAI:
    """
    Create the chat model from configuration.

    Raises:
        APIKeyError: If the OpenAI API key is missing
    """
    config = config or get_config()
    validate_api_keys(config)

    llm = ChatOpenAI(
        model=config.llm.model_name,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
        timeout=config.llm.timeout,
        openai_api_key=config.openai_api_key,
        # the orchestrator owns the retry policy
        max_retries=0
    )
    logger.info(f"🤖 Initialized chat model: {config.llm.model_name}")
    return llm


class AnswerSynthesizer:
    """Produces an answer from a question and its context with one model call."""

    def __init__(self, llm: BaseChatModel, timeout: Optional[float] = None):
        """
        Initialize the synthesizer.

        Args:
            llm: Chat model to call
            timeout: Seconds to wait for the model, no limit if None
        """
        self.llm = llm
        self.timeout = timeout
        parser = StrOutputParser()
        self.rag_chain = get_rag_prompt() | llm | parser
        self.no_context_chain = get_no_context_prompt() | llm | parser

    async def synthesize(self, question: str, context: Context) -> str:
        """
        Answer ``question`` using only ``context``.

        Args:
            question: The user's question
            context: Retrieved passages (RAG mode) or one block of text (fallback mode)

        Returns:
            The model's answer

        Raises:
            GenerationError: On timeout, call failure or an empty/malformed response
        """
        context_text = format_context(context)
        if context_text.strip():
            chain = self.rag_chain
            inputs = {"context": context_text, "question": question}
        else:
            logger.warning("⚠️ Synthesizing without any reference material")
            chain = self.no_context_chain
            inputs = {"question": question}

        logger.info(f"🤖 Generating answer for: {preview(question)} (context_chars={len(context_text)})")

        try:
            answer = await asyncio.wait_for(chain.ainvoke(inputs), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationError(f"Chat model timed out after {self.timeout}s") from e
        except Exception as e:
            raise GenerationError(f"Chat model call failed: {str(e)}") from e

        if not isinstance(answer, str) or not answer.strip():
            raise GenerationError("Chat model returned an empty or malformed response")

        logger.info(f"✅ Answer generated (chars={len(answer)})")
        return answer.strip()
