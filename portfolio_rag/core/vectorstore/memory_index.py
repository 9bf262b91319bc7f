"""
In-memory embedding index.

Holds one vector per passage, computed once at build time, and ranks
passages by cosine similarity to an embedded query. The index is immutable
after ``build`` returns, so concurrent queries need no locking.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np
from langchain_core.embeddings import Embeddings

from portfolio_rag.config.models import Passage, ScoredPassage
from portfolio_rag.utils.decorators import retry_async, timing_decorator
from portfolio_rag.utils.exceptions import EmbeddingServiceError
from portfolio_rag.utils.logging import get_logger, preview

logger = get_logger(__name__)


def _normalize(matrix: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis=-1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms


class EmbeddingIndex:
    """Immutable collection of passages and their embedding vectors."""

    def __init__(
        self,
        passages: Sequence[Passage],
        vectors: np.ndarray,
        embeddings: Embeddings,
        max_retries: int = 3,
        retry_delay: float = 1.0
    ):
        if len(passages) != len(vectors):
            raise ValueError(f"Got {len(vectors)} vectors for {len(passages)} passages")

        self._passages: Tuple[Passage, ...] = tuple(passages)
        self._matrix = _normalize(vectors) if len(vectors) else vectors
        self._matrix.setflags(write=False)
        self._embeddings = embeddings
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @classmethod
    @timing_decorator
    async def build(
        cls,
        passages: Sequence[Passage],
        embeddings: Embeddings,
        batch_size: int = 100,
        max_retries: int = 3,
        retry_delay: float = 1.0
    ) -> "EmbeddingIndex":
        """
        Embed every passage and build the index.

        Args:
            passages: Passages in insertion order
            embeddings: Embedding service used for passages and later queries
            batch_size: Passages sent per embedding request
            max_retries: Retries allowed per batch
            retry_delay: Initial delay between retries in seconds

        Returns:
            A fully built index; never a partial one

        Raises:
            EmbeddingServiceError: If any batch cannot be embedded
        """
        logger.info(f"🔤 Embedding {len(passages)} passages (batch_size={batch_size})")

        vectors: List[List[float]] = []
        for start in range(0, len(passages), batch_size):
            batch = [p.text for p in passages[start:start + batch_size]]
            try:
                batch_vectors = await retry_async(
                    lambda batch=batch: embeddings.aembed_documents(batch),
                    max_retries=max_retries,
                    delay=retry_delay,
                    description="embed_documents"
                )
            except Exception as e:
                raise EmbeddingServiceError(
                    f"Failed to embed passages {start}-{start + len(batch) - 1}: {str(e)}"
                ) from e

            if len(batch_vectors) != len(batch):
                raise EmbeddingServiceError(
                    f"Embedding service returned {len(batch_vectors)} vectors for {len(batch)} passages"
                )
            vectors.extend(batch_vectors)

        try:
            matrix = np.asarray(vectors, dtype=float) if vectors else np.empty((0, 0))
        except (ValueError, TypeError) as e:
            raise EmbeddingServiceError(f"Embedding vectors have inconsistent dimensions: {str(e)}") from e
        if vectors and matrix.ndim != 2:
            raise EmbeddingServiceError("Embedding vectors have inconsistent dimensions")

        logger.info(f"✅ Indexed {len(passages)} passages")
        return cls(passages, matrix, embeddings, max_retries=max_retries, retry_delay=retry_delay)

    def __len__(self) -> int:
        return len(self._passages)

    @property
    def passages(self) -> Tuple[Passage, ...]:
        return self._passages

    @property
    def dimension(self) -> Optional[int]:
        if not self._passages:
            return None
        return int(self._matrix.shape[1])

    async def query(self, text: str, k: int) -> List[ScoredPassage]:
        """
        Return the ``k`` passages most similar to ``text``.

        Ties keep insertion order. An empty index returns an empty list
        without calling the embedding service.

        Raises:
            ValueError: If ``k`` is smaller than 1
            EmbeddingServiceError: If the query cannot be embedded
        """
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        if not self._passages:
            return []

        try:
            vector = await retry_async(
                lambda: self._embeddings.aembed_query(text),
                max_retries=self.max_retries,
                delay=self.retry_delay,
                description="embed_query"
            )
        except Exception as e:
            raise EmbeddingServiceError(f"Failed to embed query: {str(e)}") from e

        try:
            query_vector = np.asarray(vector, dtype=float)
        except (ValueError, TypeError) as e:
            raise EmbeddingServiceError(f"Embedding service returned a malformed query vector: {str(e)}") from e
        if query_vector.shape != (self._matrix.shape[1],):
            raise EmbeddingServiceError(
                f"Query vector has shape {query_vector.shape}, index dimension is {self._matrix.shape[1]}"
            )

        scores = self._matrix @ _normalize(query_vector)
        order = np.argsort(-scores, kind="stable")[:k]

        logger.info(f"🔍 Retrieved {len(order)} passages for: {preview(text)}")
        return [ScoredPassage(passage=self._passages[i], score=float(scores[i])) for i in order]
