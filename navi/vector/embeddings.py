"""
Embedding providers: text -> fixed-length vector.
Every provider is async; embed() is the only suspension point and raises
EmbeddingUnavailable for any transport failure or malformed vector.
"""

from abc import ABC, abstractmethod
import asyncio
import hashlib
import math
import re
from typing import Optional, Sequence

import httpx
import ollama

from ..core.errors import EmbeddingUnavailable

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")


def validate_vector(values, expected_dimension: Optional[int] = None) -> list:
    """Coerce a provider response to a list of finite floats or raise EmbeddingUnavailable."""
    if values is None or isinstance(values, (str, bytes)):
        raise EmbeddingUnavailable("Embedding response is not a vector")
    try:
        vector = [float(v) for v in values]
    except (TypeError, ValueError) as exc:
        raise EmbeddingUnavailable(f"Embedding response contains non-numeric values: {exc}") from exc

    if not vector:
        raise EmbeddingUnavailable("Embedding response is empty")
    if not all(math.isfinite(v) for v in vector):
        raise EmbeddingUnavailable("Embedding response contains NaN or infinite values")
    if expected_dimension is not None and len(vector) != expected_dimension:
        raise EmbeddingUnavailable(
            f"Embedding dimension {len(vector)} does not match expected dimension {expected_dimension}"
        )
    return vector


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    async def embed(self, text: str) -> list:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> Optional[int]:
        """Get the dimension of the embedding vectors, if known."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hashed bag-of-words embedding.

    Each lowercase token is hashed into one bucket with a hash-derived sign,
    so texts sharing words land close together. Useful for development and
    tests without a model download or a running embedding service.
    """

    def __init__(self, dimension: int = 384):
        self.dimension = dimension

    def embed_text(self, text: str) -> list:
        """Synchronous embedding, used by the corpus loader and tests."""
        vector = [0.0] * self.dimension
        for token in _TOKEN_PATTERN.findall(text.lower()):
            digest = hashlib.md5(token.encode()).digest()
            bucket = int.from_bytes(digest[:4], "big") % self.dimension
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign

        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0:
            return vector
        return [v / norm for v in vector]

    async def embed(self, text: str) -> list:
        return self.embed_text(text)

    def get_dimension(self) -> int:
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    Uses the all-mpnet-base-v2 model by default. Encoding runs in a worker
    thread so the event loop stays free and the call can be abandoned.
    """

    def __init__(self, model_name: str = "all-mpnet-base-v2", expected_dimension: Optional[int] = None):
        self.model_name = model_name
        self.expected_dimension = expected_dimension
        self._model = None
        self._dimension = expected_dimension

    @property
    def model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            self._model = SentenceTransformer(self.model_name)
        return self._model

    async def embed(self, text: str) -> list:
        try:
            # First call also loads the model in the worker thread
            embedding = await asyncio.to_thread(lambda: self.model.encode(text, convert_to_tensor=False))
        except (OSError, RuntimeError, ValueError) as exc:
            raise EmbeddingUnavailable(f"sentence-transformers encode failed: {exc}") from exc

        vector = validate_vector(embedding, self.expected_dimension)
        if self._dimension is None:
            self._dimension = len(vector)
        return vector

    def get_dimension(self) -> Optional[int]:
        """Known once an expected dimension is set, the model is loaded, or a vector was produced."""
        if self._dimension is None and self._model is not None:
            self._dimension = self._model.get_sentence_embedding_dimension()
        return self._dimension


class OllamaEmbedding(IEmbeddingProvider):
    """Embeddings served by a local or remote Ollama instance."""

    def __init__(self, model_name: str = "nomic-embed-text", host: Optional[str] = None,
                 expected_dimension: Optional[int] = None, client: Optional[ollama.AsyncClient] = None):
        self.model_name = model_name
        self.expected_dimension = expected_dimension
        self._client = client or ollama.AsyncClient(host=host)
        self._dimension = expected_dimension

    async def embed(self, text: str) -> list:
        try:
            response = await self._client.embed(model=self.model_name, input=text)
        except (ollama.ResponseError, ollama.RequestError, httpx.HTTPError, ConnectionError) as exc:
            raise EmbeddingUnavailable(f"Ollama embedding call failed: {exc}") from exc

        try:
            embeddings = response["embeddings"]
            first = embeddings[0]
        except (KeyError, IndexError, TypeError) as exc:
            raise EmbeddingUnavailable("Ollama embedding response is malformed") from exc

        vector = validate_vector(first, self.expected_dimension)
        if self._dimension is None:
            self._dimension = len(vector)
        return vector

    def get_dimension(self) -> Optional[int]:
        return self._dimension


def embed_sync(provider: IEmbeddingProvider, texts: Sequence[str]) -> list:
    """Embed a batch outside of an event loop (scripts only)."""

    async def _embed_all():
        return [await provider.embed(text) for text in texts]

    return asyncio.run(_embed_all())
