"""
Document processing and text chunking utilities.

Splits documents into fixed-size, overlapping character windows. Windows
start every ``chunk_size - chunk_overlap`` characters and the last window
always reaches the end of the text, so concatenating the passages with the
overlap removed reproduces the document exactly.
"""

from typing import Any, List, Optional, Tuple

from langchain_text_splitters import TextSplitter

from portfolio_rag.config.models import Passage, SourceDocument
from portfolio_rag.config.settings import get_config
from portfolio_rag.utils.decorators import timing_decorator
from portfolio_rag.utils.logging import get_logger

logger = get_logger(__name__)


class FixedWindowTextSplitter(TextSplitter):
    """Character window splitter with an exact overlap between windows."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200, **kwargs: Any):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap must satisfy 0 <= overlap < chunk_size, "
                f"got overlap={chunk_overlap}, chunk_size={chunk_size}"
            )
        kwargs.setdefault("strip_whitespace", False)
        super().__init__(chunk_size=chunk_size, chunk_overlap=chunk_overlap, **kwargs)

    def windows(self, text: str) -> List[Tuple[int, str]]:
        """Return ``(offset, window)`` pairs covering ``text``."""
        if not text:
            return []

        step = self._chunk_size - self._chunk_overlap
        windows = []
        start = 0
        while True:
            end = start + self._chunk_size
            windows.append((start, text[start:end]))
            if end >= len(text):
                return windows
            start += step

    def split_text(self, text: str) -> List[str]:
        return [window for _, window in self.windows(text)]


class PassageChunker:
    """Turns loaded documents into ordered passages."""

    def __init__(
        self,
        chunk_size: Optional[int] = None,
        chunk_overlap: Optional[int] = None
    ):
        """
        Initialize the chunker.

        Args:
            chunk_size: Maximum passage length, uses config default if None
            chunk_overlap: Characters shared by consecutive passages, uses config default if None

        Raises:
            ValueError: If the overlap is not smaller than the chunk size
        """
        if chunk_size is None or chunk_overlap is None:
            config = get_config()
            chunk_size = config.data.chunk_size if chunk_size is None else chunk_size
            chunk_overlap = config.data.chunk_overlap if chunk_overlap is None else chunk_overlap

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.splitter = FixedWindowTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)

    @timing_decorator
    def process_documents(self, documents: List[SourceDocument]) -> List[Passage]:
        """
        Split documents into passages, keeping document and window order.

        Args:
            documents: Documents to split

        Returns:
            Passages numbered by their position across all documents
        """
        logger.info(f"✂️ Splitting {len(documents)} documents into passages "
                    f"(size={self.chunk_size}, overlap={self.chunk_overlap})")

        passages: List[Passage] = []
        for doc in documents:
            for offset, window in self.splitter.windows(doc.text):
                passages.append(Passage(
                    text=window,
                    source=doc.source,
                    offset=offset,
                    position=len(passages)
                ))

        logger.info(f"✅ Created {len(passages)} passages")
        return passages


def split_documents(
    documents: List[SourceDocument],
    chunk_size: Optional[int] = None,
    chunk_overlap: Optional[int] = None
) -> List[Passage]:
    """
    Convenience function to split documents.

    Args:
        documents: List of documents to split
        chunk_size: Size of passages
        chunk_overlap: Overlap between passages

    Returns:
        List of passages
    """
    chunker = PassageChunker(chunk_size, chunk_overlap)
    return chunker.process_documents(documents)
