"""
FAISS-backed vector store.
One flat inner-product index per category over L2-normalized vectors.
"""

from typing import Dict, List, Optional, Sequence
import numpy as np

from .types import KnowledgeEntry, RetrievalResult
from .index import IVectorStore, as_query_array, cosine_scores, rank_hits
from ..core.errors import DimensionMismatch, StoreUnavailable

FLOAT32_SLACK = 1e-4


class FaissVectorStore(IVectorStore):
    """FAISS-backed implementation of IVectorStore."""

    def __init__(self, dimension: Optional[int] = None):
        """
        Initialize FAISS vector store.

        Args:
            dimension: Dimension of the vectors; None learns it from the first entry
        """
        try:
            import faiss
            self.faiss = faiss
        except ImportError:
            raise ImportError("FAISS not installed. Please install faiss-cpu package.")

        self._configured_dimension = dimension
        self._dimension = dimension
        self._indexes: Dict[str, object] = {}                  # category -> faiss.IndexFlatIP
        self._entries: Dict[str, List[KnowledgeEntry]] = {}    # category -> entries by vector index

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    def add(self, entry: KnowledgeEntry) -> None:
        """Add a single entry to the category's FAISS index."""
        self.batch_add([entry])

    def batch_add(self, entries: List[KnowledgeEntry]) -> None:
        """Add multiple entries, grouped per category in one index call each."""
        grouped: Dict[str, List[KnowledgeEntry]] = {}
        dimension = self._dimension
        for entry in entries:
            if dimension is None:
                dimension = entry.dimension
            elif entry.dimension != dimension:
                raise DimensionMismatch(expected=dimension, actual=entry.dimension)
            grouped.setdefault(entry.category, []).append(entry)
        self._dimension = dimension

        for category, group in grouped.items():
            vectors = np.vstack([self._normalize(entry.embedding) for entry in group]).astype(np.float32)
            index = self._indexes.get(category)
            if index is None:
                index = self.faiss.IndexFlatIP(self._dimension)
                self._indexes[category] = index
            index.add(vectors)
            self._entries.setdefault(category, []).extend(group)

    def search(self, query_vector: Sequence[float], category: str,
               threshold: float, top_k: int) -> RetrievalResult:
        query = as_query_array(query_vector, self._dimension)

        index = self._indexes.get(category)
        if index is None or not index.ntotal:
            return []

        query_array = self._normalize(query).astype(np.float32).reshape(1, -1)
        try:
            # Score every vector in the category so ties can be re-ordered by insertion
            scores, indices = index.search(query_array, index.ntotal)
        except RuntimeError as exc:
            raise StoreUnavailable(f"FAISS search failed: {exc}") from exc

        by_position = np.full(index.ntotal, -np.inf, dtype=np.float64)
        for vector_index, score in zip(indices[0], scores[0]):
            if vector_index >= 0:
                by_position[vector_index] = score

        # float32 scores only shortlist; the threshold is applied to float64 rescores
        positions = np.flatnonzero(by_position >= threshold - FLOAT32_SLACK)
        if positions.size == 0:
            return []
        candidates = [self._entries[category][position] for position in positions]
        matrix = np.array([entry.embedding for entry in candidates], dtype=np.float64)

        return rank_hits(candidates, cosine_scores(query, matrix), threshold, top_k)

    def count(self) -> int:
        return sum(index.ntotal for index in self._indexes.values())

    def clear(self) -> None:
        """Clear all records from the FAISS store."""
        self._indexes.clear()
        self._entries.clear()
        self._dimension = self._configured_dimension

    @staticmethod
    def _normalize(vector) -> np.ndarray:
        array = np.asarray(vector, dtype=np.float64)
        norm = np.linalg.norm(array)
        if norm == 0:
            # Zero vectors stay zero and score 0.0 against everything
            return array
        return array / norm
