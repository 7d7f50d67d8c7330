"""
Tests for the retriever (embedder + vector store composition).
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from navi.core.context_tags import parse
from navi.core.errors import EmbeddingUnavailable, StoreUnavailable
from navi.core.retriever import Retriever, DEFAULT_THRESHOLD, DEFAULT_TOP_K
from navi.vector.index import SimpleInMemoryVectorStore

from conftest import FailingEmbedder, KeywordEmbedder, SlowEmbedder, make_entry


def test_defaults():
    assert DEFAULT_THRESHOLD == 0.2
    assert DEFAULT_TOP_K == 3


def test_retrieve_embeds_clean_message_and_searches_category():
    embedder = KeywordEmbedder()
    store = MagicMock()
    store.search.return_value = []
    retriever = Retriever(embedder, store, threshold=0.3, top_k=2)

    results = asyncio.run(retriever.retrieve(parse("[Context: College of Engineering] dean office")))

    assert results == []
    assert embedder.calls == ["dean office"]
    store.search.assert_called_once_with(
        embedder.vector_for("dean office"), "College of Engineering", 0.3, 2
    )


def test_retrieve_returns_store_results(library_store, embedder):
    retriever = Retriever(embedder, library_store)

    results = asyncio.run(retriever.retrieve(parse("Library hours?")))

    assert [r.entry.content for r in results] == ["Library is open 8am-6pm"]
    assert results[0].score >= 0.2


def test_embedding_failure_propagates():
    store = MagicMock()
    retriever = Retriever(FailingEmbedder(), store)

    with pytest.raises(EmbeddingUnavailable):
        asyncio.run(retriever.retrieve(parse("Library hours?")))
    store.search.assert_not_called()


def test_store_failure_propagates(embedder):
    store = MagicMock()
    store.search.side_effect = StoreUnavailable("database is locked")
    retriever = Retriever(embedder, store)

    with pytest.raises(StoreUnavailable):
        asyncio.run(retriever.retrieve(parse("Library hours?")))


def test_embedding_timeout_becomes_embedding_unavailable():
    store = SimpleInMemoryVectorStore()
    store.add(make_entry("Library is open 8am-6pm"))
    retriever = Retriever(SlowEmbedder(delay=5.0), store, embed_timeout=0.01)

    with pytest.raises(EmbeddingUnavailable):
        asyncio.run(retriever.retrieve(parse("Library hours?")))


def test_malformed_embedder_output_is_rejected(embedder):
    class NaNEmbedder(KeywordEmbedder):
        async def embed(self, text):
            return [float("nan")] * 8

    retriever = Retriever(NaNEmbedder(), MagicMock())

    with pytest.raises(EmbeddingUnavailable):
        asyncio.run(retriever.retrieve(parse("Library hours?")))
