"""
SQLite-persisted vector store.
Embeddings are stored as JSON text; similarity is computed in numpy per query.
"""

import json
import sqlite3
from typing import List, Optional, Sequence
import numpy as np

from .types import KnowledgeEntry, RetrievalResult
from .index import IVectorStore, as_query_array, cosine_scores, rank_hits
from ..core.db import get_db, init_db
from ..core.errors import StoreUnavailable


class SqliteVectorStore(IVectorStore):
    """Corpus kept in the ``knowledge_entries`` table."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        try:
            init_db(db_path)
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Could not initialize knowledge store: {exc}") from exc
        self._dimension: Optional[int] = None

    @property
    def dimension(self) -> Optional[int]:
        if self._dimension is None:
            self._dimension = self._load_dimension()
        return self._dimension

    def add(self, entry: KnowledgeEntry) -> None:
        self.batch_add([entry])

    def batch_add(self, entries: List[KnowledgeEntry]) -> None:
        """Insert entries in one transaction."""
        if not entries:
            return
        for entry in entries:
            self._check_entry_dimension(entry)
            if self._dimension is None:
                self._dimension = entry.dimension

        rows = [
            (entry.entry_id, entry.content, entry.category, json.dumps(list(entry.embedding)))
            for entry in entries
        ]
        try:
            with get_db(self.db_path) as conn:
                conn.executemany(
                    "INSERT INTO knowledge_entries (entry_id, content, category, embedding_json) VALUES (?, ?, ?, ?)",
                    rows,
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Could not write knowledge entries: {exc}") from exc

    def search(self, query_vector: Sequence[float], category: str,
               threshold: float, top_k: int) -> RetrievalResult:
        try:
            with get_db(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT entry_id, content, category, embedding_json FROM knowledge_entries "
                    "WHERE category = ? ORDER BY id",
                    (category,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Knowledge store query failed: {exc}") from exc

        query = as_query_array(query_vector, self.dimension)
        if not rows:
            return []

        candidates = [self._row_to_entry(row) for row in rows]
        matrix = np.array([entry.embedding for entry in candidates], dtype=np.float64)
        return rank_hits(candidates, cosine_scores(query, matrix), threshold, top_k)

    def count(self) -> int:
        try:
            with get_db(self.db_path) as conn:
                return conn.execute("SELECT COUNT(*) FROM knowledge_entries").fetchone()[0]
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Knowledge store count failed: {exc}") from exc

    def clear(self) -> None:
        try:
            with get_db(self.db_path) as conn:
                conn.execute("DELETE FROM knowledge_entries")
                conn.commit()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Could not clear knowledge store: {exc}") from exc
        self._dimension = None

    def _load_dimension(self) -> Optional[int]:
        try:
            with get_db(self.db_path) as conn:
                row = conn.execute("SELECT embedding_json FROM knowledge_entries ORDER BY id LIMIT 1").fetchone()
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Knowledge store query failed: {exc}") from exc
        if row is None:
            return None
        return len(json.loads(row["embedding_json"]))

    @staticmethod
    def _row_to_entry(row) -> KnowledgeEntry:
        return KnowledgeEntry(
            content=row["content"],
            embedding=tuple(json.loads(row["embedding_json"])),
            category=row["category"],
            entry_id=row["entry_id"],
        )
