"""
Vector store contract and the in-memory implementation.
Search is category-scoped cosine similarity with a threshold and a top-k cut.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence
import numpy as np

from .types import KnowledgeEntry, ScoredEntry, RetrievalResult
from ..core.errors import DimensionMismatch


def cosine_scores(query_vector: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of one query against each row of ``matrix``.

    Rows (or a query) with zero norm score 0.0 instead of dividing by zero.
    """
    query_norm = np.linalg.norm(query_vector)
    if query_norm == 0 or matrix.size == 0:
        return np.zeros(matrix.shape[0], dtype=np.float64)

    row_norms = np.linalg.norm(matrix, axis=1)
    # A row's score does not depend on the other rows
    dots = np.sum(matrix * query_vector, axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(row_norms > 0, dots / (row_norms * query_norm), 0.0)
    return np.clip(scores, -1.0, 1.0)


def rank_hits(candidates: Sequence[KnowledgeEntry], scores: Iterable[float],
              threshold: float, top_k: int) -> RetrievalResult:
    """Filter by threshold, then order by score descending.

    ``candidates`` must be in insertion order; ``sorted`` is stable, so equal
    scores keep that order.
    """
    if top_k <= 0:
        return []
    hits = [
        ScoredEntry(entry=entry, score=float(score))
        for entry, score in zip(candidates, scores)
        if float(score) >= threshold
    ]
    hits = sorted(hits, key=lambda hit: hit.score, reverse=True)
    return hits[:top_k]


def as_query_array(query_vector: Sequence[float], dimension: Optional[int]) -> np.ndarray:
    """Convert a query to float64 and enforce the store's dimensionality."""
    query = np.asarray(query_vector, dtype=np.float64).reshape(-1)
    if dimension is not None and query.shape[0] != dimension:
        raise DimensionMismatch(expected=dimension, actual=query.shape[0])
    return query


class IVectorStore(ABC):
    """Abstract interface for knowledge entry storage and lookup."""

    @abstractmethod
    def add(self, entry: KnowledgeEntry) -> None:
        """Add a single entry to the store."""
        pass

    def batch_add(self, entries: List[KnowledgeEntry]) -> None:
        """Add multiple entries, preserving their order."""
        for entry in entries:
            self.add(entry)

    @abstractmethod
    def search(self, query_vector: Sequence[float], category: str,
               threshold: float, top_k: int) -> RetrievalResult:
        """Return at most ``top_k`` entries of ``category`` scoring >= ``threshold``."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of entries held."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> Optional[int]:
        """Dimensionality shared by every entry, or None while empty."""
        pass

    def _check_entry_dimension(self, entry: KnowledgeEntry) -> None:
        if self.dimension is not None and entry.dimension != self.dimension:
            raise DimensionMismatch(expected=self.dimension, actual=entry.dimension)


class SimpleInMemoryVectorStore(IVectorStore):
    """In-memory store; entries are kept per category in insertion order."""

    def __init__(self, dimension: Optional[int] = None):
        self._configured_dimension = dimension
        self._dimension = dimension
        self._entries: dict = {}    # category -> [KnowledgeEntry]
        self._matrices: dict = {}   # category -> stacked embeddings (lazily rebuilt)

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    def add(self, entry: KnowledgeEntry) -> None:
        self._check_entry_dimension(entry)
        if self._dimension is None:
            self._dimension = entry.dimension

        self._entries.setdefault(entry.category, []).append(entry)
        # Invalidate the cached matrix for this category
        self._matrices.pop(entry.category, None)

    def search(self, query_vector: Sequence[float], category: str,
               threshold: float, top_k: int) -> RetrievalResult:
        query = as_query_array(query_vector, self._dimension)

        candidates = self._entries.get(category)
        if not candidates:
            return []

        scores = cosine_scores(query, self._matrix_for(category))
        return rank_hits(candidates, scores, threshold, top_k)

    def count(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def categories(self) -> List[str]:
        return list(self._entries.keys())

    def clear(self) -> None:
        """Clear all entries and forget any learned dimensionality."""
        self._entries.clear()
        self._matrices.clear()
        self._dimension = self._configured_dimension

    def _matrix_for(self, category: str) -> np.ndarray:
        matrix = self._matrices.get(category)
        if matrix is None:
            matrix = np.array([entry.embedding for entry in self._entries[category]], dtype=np.float64)
            self._matrices[category] = matrix
        return matrix
