"""
Tests for the in-memory vector store search contract.
"""

import numpy as np
import pytest

from navi.core.errors import DimensionMismatch
from navi.vector.index import IVectorStore, SimpleInMemoryVectorStore, cosine_scores, rank_hits
from navi.vector.types import KnowledgeEntry


def entry(content, vector, category="General"):
    return KnowledgeEntry.create(content=content, embedding=vector, category=category)


def test_vector_store_interface():
    """SimpleInMemoryVectorStore implements IVectorStore."""
    assert isinstance(SimpleInMemoryVectorStore(), IVectorStore)


def test_search_orders_by_similarity():
    store = SimpleInMemoryVectorStore()
    store.add(entry("b", [0.0, 1.0]))
    store.add(entry("a", [1.0, 0.0]))
    store.add(entry("ab", [1.0, 1.0]))

    results = store.search([1.0, 0.1], "General", threshold=-1.0, top_k=3)

    assert [r.entry.content for r in results] == ["a", "ab", "b"]
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)


def test_search_respects_top_k():
    store = SimpleInMemoryVectorStore()
    store.batch_add([entry(f"e{i}", [1.0, i / 10]) for i in range(10)])

    results = store.search([1.0, 0.0], "General", threshold=0.0, top_k=3)

    assert len(results) == 3


def test_search_respects_threshold():
    store = SimpleInMemoryVectorStore()
    store.add(entry("close", [1.0, 0.1]))
    store.add(entry("far", [0.0, 1.0]))

    results = store.search([1.0, 0.0], "General", threshold=0.2, top_k=5)

    assert [r.entry.content for r in results] == ["close"]
    assert all(r.score >= 0.2 for r in results)


def test_score_equal_to_threshold_is_kept():
    store = SimpleInMemoryVectorStore()
    store.add(entry("same", [1.0, 0.0]))

    results = store.search([1.0, 0.0], "General", threshold=1.0, top_k=1)

    assert len(results) == 1


def test_ties_keep_insertion_order():
    store = SimpleInMemoryVectorStore()
    store.add(entry("A", [0.3, 0.4]))
    store.add(entry("B", [0.3, 0.4]))

    results = store.search([0.3, 0.4], "General", threshold=0.2, top_k=3)

    assert [r.entry.content for r in results] == ["A", "B"]


def test_category_match_is_exact_and_case_sensitive():
    store = SimpleInMemoryVectorStore()
    store.add(entry("eng", [1.0, 0.0], "College of Engineering"))
    store.add(entry("gen", [1.0, 0.0], "General"))

    assert [r.entry.content for r in store.search([1.0, 0.0], "College of Engineering", 0.2, 3)] == ["eng"]
    assert store.search([1.0, 0.0], "college of engineering", 0.2, 3) == []
    assert store.search([1.0, 0.0], "Engineering", 0.2, 3) == []


def test_unknown_category_returns_empty_result():
    store = SimpleInMemoryVectorStore()
    store.add(entry("gen", [1.0, 0.0]))

    results = store.search([1.0, 0.0], "College of Engineering", 0.2, 3)

    assert results == []


def test_empty_store_returns_empty_result():
    assert SimpleInMemoryVectorStore().search([1.0, 0.0], "General", 0.2, 3) == []


def test_query_dimension_mismatch():
    store = SimpleInMemoryVectorStore()
    store.add(entry("gen", [1.0, 0.0, 0.0]))

    with pytest.raises(DimensionMismatch) as exc_info:
        store.search([1.0, 0.0], "General", 0.2, 3)

    assert exc_info.value.expected == 3
    assert exc_info.value.actual == 2
    assert exc_info.value.reason_code == "retrieval_failed"


def test_configured_dimension_is_enforced_on_add():
    store = SimpleInMemoryVectorStore(dimension=2)

    with pytest.raises(DimensionMismatch):
        store.add(entry("bad", [1.0, 0.0, 0.0]))


def test_zero_query_vector_scores_zero():
    store = SimpleInMemoryVectorStore()
    store.add(entry("gen", [1.0, 0.0]))

    assert store.search([0.0, 0.0], "General", 0.2, 3) == []
    assert len(store.search([0.0, 0.0], "General", 0.0, 3)) == 1


def test_add_after_search_is_visible():
    store = SimpleInMemoryVectorStore()
    store.add(entry("first", [1.0, 0.0]))
    store.search([1.0, 0.0], "General", 0.2, 3)
    store.add(entry("second", [1.0, 0.0]))

    results = store.search([1.0, 0.0], "General", 0.2, 3)

    assert [r.entry.content for r in results] == ["first", "second"]


def test_count_and_clear():
    store = SimpleInMemoryVectorStore()
    store.batch_add([entry("a", [1.0, 0.0], "X"), entry("b", [1.0, 0.0], "Y")])
    assert store.count() == 2
    assert store.categories() == ["X", "Y"]

    store.clear()

    assert store.count() == 0
    assert store.dimension is None


def test_cosine_scores_handles_zero_rows():
    matrix = np.array([[1.0, 0.0], [0.0, 0.0], [-1.0, 0.0]])

    scores = cosine_scores(np.array([2.0, 0.0]), matrix)

    assert scores.tolist() == [1.0, 0.0, -1.0]


def test_rank_hits_with_non_positive_top_k():
    candidates = [entry("a", [1.0])]

    assert rank_hits(candidates, [1.0], threshold=0.0, top_k=0) == []


def test_knowledge_entry_is_immutable_and_validated():
    e = entry("content", np.array([1.0, 2.0]))
    assert e.embedding == (1.0, 2.0)

    with pytest.raises(Exception):
        e.content = "other"
    with pytest.raises(ValueError):
        entry("   ", [1.0])
    with pytest.raises(ValueError):
        entry("content", [])
