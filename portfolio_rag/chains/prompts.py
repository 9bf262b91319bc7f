"""
Prompt templates for the RAG system.

The reference material travels in the system message; the user's question
is always a separate human turn.
"""

from langchain_core.prompts import ChatPromptTemplate

RAG_SYSTEM_TEMPLATE = """You are a helpful assistant answering questions about the portfolio described in the reference material below.

Guidelines:
- Only use information from the reference material
- If the reference material doesn't contain enough information to answer the question, say so clearly
- Be concise but thorough in your response

Reference material:
{context}"""

NO_CONTEXT_SYSTEM_TEMPLATE = """You are a helpful assistant answering questions about a portfolio.

No reference material is available right now. Tell the user that you have no grounded information about the portfolio, and only add general knowledge if it clearly helps."""


def get_rag_prompt() -> ChatPromptTemplate:
    """
    Get the main RAG prompt template.

    Returns:
        ChatPromptTemplate with ``context`` and ``question`` variables
    """
    return ChatPromptTemplate.from_messages([
        ("system", RAG_SYSTEM_TEMPLATE),
        ("human", "{question}"),
    ])


def get_no_context_prompt() -> ChatPromptTemplate:
    """
    Get the prompt used when there is no reference material at all.

    Returns:
        ChatPromptTemplate with a ``question`` variable
    """
    return ChatPromptTemplate.from_messages([
        ("system", NO_CONTEXT_SYSTEM_TEMPLATE),
        ("human", "{question}"),
    ])


__all__ = [
    "get_rag_prompt",
    "get_no_context_prompt"
]
