"""
Knowledge storage and embedding for category-scoped retrieval.
"""

# Package initialization for vector module
from .index import IVectorStore, SimpleInMemoryVectorStore
from .types import KnowledgeEntry, ScoredEntry, RetrievalResult, GENERAL_CATEGORY
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding, OllamaEmbedding

__all__ = [
    'IVectorStore',
    'SimpleInMemoryVectorStore',
    'KnowledgeEntry',
    'ScoredEntry',
    'RetrievalResult',
    'GENERAL_CATEGORY',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'OllamaEmbedding'
]
