"""
Retriever: embeds a parsed query and runs a category-scoped search.
"""

import asyncio
import time
from typing import Optional

from .context_tags import Query
from .errors import EmbeddingUnavailable
from ..util.logging import logger
from ..vector.embeddings import IEmbeddingProvider, validate_vector
from ..vector.index import IVectorStore
from ..vector.types import RetrievalResult

DEFAULT_THRESHOLD = 0.2
DEFAULT_TOP_K = 3


class Retriever:
    """Composes an embedding provider and a vector store."""

    def __init__(self, embedder: IEmbeddingProvider, vector_store: IVectorStore,
                 threshold: float = DEFAULT_THRESHOLD, top_k: int = DEFAULT_TOP_K,
                 embed_timeout: Optional[float] = None):
        self.embedder = embedder
        self.vector_store = vector_store
        self.threshold = threshold
        self.top_k = top_k
        self.embed_timeout = embed_timeout

    async def embed(self, text: str) -> list:
        """Embed ``text`` within the configured timeout."""
        try:
            vector = await asyncio.wait_for(self.embedder.embed(text), timeout=self.embed_timeout)
        except asyncio.TimeoutError as exc:
            raise EmbeddingUnavailable(f"Embedding timed out after {self.embed_timeout}s") from exc
        return validate_vector(vector)

    async def retrieve(self, query: Query) -> RetrievalResult:
        """
        Return the entries of ``query.category`` most similar to the question.

        EmbeddingUnavailable, StoreUnavailable and DimensionMismatch propagate;
        an empty result is returned as-is.
        """
        start = time.monotonic()
        vector = await self.embed(query.clean_message)

        results = self.vector_store.search(vector, query.category, self.threshold, self.top_k)

        duration_ms = round((time.monotonic() - start) * 1000, 2)
        top_score = results[0].score if results else None
        logger.log_retrieval(query.category, len(results), top_score, duration_ms)
        return results
