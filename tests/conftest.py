"""
Shared fakes for the embedding and generation collaborators.
"""

import asyncio
import re

import pytest

from navi.core.errors import EmbeddingUnavailable, GenerationUnavailable
from navi.core.pipeline import AnsweringPipeline
from navi.core.retriever import Retriever
from navi.llm.generator import BaseGenerator
from navi.vector.embeddings import IEmbeddingProvider
from navi.vector.index import SimpleInMemoryVectorStore
from navi.vector.types import KnowledgeEntry

# Each vocabulary word owns one axis; other words are ignored.
VOCABULARY = ["library", "hours", "open", "dean", "office", "engineering", "enroll", "parking"]


class KeywordEmbedder(IEmbeddingProvider):
    """Deterministic embedder counting vocabulary words; records every call."""

    def __init__(self):
        self.calls = []

    def vector_for(self, text: str) -> list:
        vector = [0.0] * len(VOCABULARY)
        for token in re.findall(r"[a-z]+", text.lower()):
            if token in VOCABULARY:
                vector[VOCABULARY.index(token)] += 1.0
        return vector

    async def embed(self, text: str) -> list:
        self.calls.append(text)
        return self.vector_for(text)

    def get_dimension(self) -> int:
        return len(VOCABULARY)


class FailingEmbedder(KeywordEmbedder):
    async def embed(self, text: str) -> list:
        self.calls.append(text)
        raise EmbeddingUnavailable("embedding service unreachable")


class SlowEmbedder(KeywordEmbedder):
    """Blocks until cancelled or the delay passes; signals when the call started."""

    def __init__(self, delay: float = 10.0):
        super().__init__()
        self.delay = delay
        self.started = None

    async def embed(self, text: str) -> list:
        self.calls.append(text)
        if self.started is not None:
            self.started.set()
        await asyncio.sleep(self.delay)
        return self.vector_for(text)


class RecordingGenerator(BaseGenerator):
    """Returns a canned answer and records each prompt."""

    def __init__(self, answer: str = "Generated answer"):
        super().__init__("fake-model")
        self.answer = answer
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


class FailingGenerator(RecordingGenerator):
    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        raise GenerationUnavailable("generation service unreachable")


def make_entry(content: str, category: str = "General", embedder: KeywordEmbedder = None) -> KnowledgeEntry:
    embedder = embedder or KeywordEmbedder()
    return KnowledgeEntry.create(content=content, embedding=embedder.vector_for(content), category=category)


def make_pipeline(store=None, embedder=None, generator=None, **kwargs) -> AnsweringPipeline:
    store = store if store is not None else SimpleInMemoryVectorStore()
    retriever = Retriever(
        embedder=embedder or KeywordEmbedder(),
        vector_store=store,
        threshold=kwargs.pop("threshold", 0.2),
        top_k=kwargs.pop("top_k", 3),
        embed_timeout=kwargs.pop("embed_timeout", None),
    )
    return AnsweringPipeline(retriever=retriever, generator=generator or RecordingGenerator(), **kwargs)


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def generator():
    return RecordingGenerator()


@pytest.fixture
def library_store(embedder):
    store = SimpleInMemoryVectorStore()
    store.add(make_entry("Library is open 8am-6pm", "General", embedder))
    return store


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point DB_PATH at a fresh SQLite file with the schema created."""
    from navi.core import config
    from navi.core.db import init_db

    db_path = str(tmp_path / "navi.db")
    monkeypatch.setattr(config, "DB_PATH", db_path)
    init_db()
    return db_path
