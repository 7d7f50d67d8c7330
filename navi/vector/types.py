"""
Knowledge records held by the vector stores.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

GENERAL_CATEGORY = "General"


@dataclass(frozen=True)
class KnowledgeEntry:
    """An immutable unit of indexed knowledge."""

    content: str
    """Text shown to the generator as grounding context"""

    embedding: Tuple[float, ...]
    """Vector representation of the content"""

    category: str = GENERAL_CATEGORY
    """Scope label; "General" means unscoped"""

    entry_id: Optional[str] = field(default=None, compare=False)
    """Optional corpus identifier, used for provenance only"""

    def __post_init__(self):
        if not self.content or not self.content.strip():
            raise ValueError("content cannot be empty")
        if len(self.embedding) == 0:
            raise ValueError("embedding cannot be empty")
        # Freeze whatever sequence was passed in (list, ndarray, ...)
        object.__setattr__(self, "embedding", tuple(float(v) for v in self.embedding))

    @property
    def dimension(self) -> int:
        return len(self.embedding)

    @classmethod
    def create(cls, content: str, embedding: Sequence[float], category: str = GENERAL_CATEGORY,
               entry_id: Optional[str] = None) -> "KnowledgeEntry":
        return cls(content=content, embedding=tuple(embedding), category=category, entry_id=entry_id)


@dataclass(frozen=True)
class ScoredEntry:
    """A search hit: the entry and its cosine similarity to the query."""

    entry: KnowledgeEntry
    score: float

    @property
    def content(self) -> str:
        return self.entry.content


# Ordered by descending score; empty means "no grounding available".
RetrievalResult = List[ScoredEntry]
