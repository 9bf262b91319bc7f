"""
Chains module initialization.

Exports prompts and the answer synthesizer.
"""

from .prompts import get_no_context_prompt, get_rag_prompt
from .rag_chains import AnswerSynthesizer, create_chat_model, format_context

__all__ = [
    "AnswerSynthesizer",
    "create_chat_model",
    "format_context",
    "get_no_context_prompt",
    "get_rag_prompt"
]
