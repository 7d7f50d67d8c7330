"""
Tests for the retry transport around embedders and generators.
"""

import asyncio
from unittest.mock import patch

import pytest

from navi.core.errors import EmbeddingUnavailable, GenerationUnavailable
from navi.llm.retry import (
    RetryConfig,
    RetryingEmbedder,
    RetryingGenerator,
    calculate_delay,
    retry_async,
)

from conftest import FailingEmbedder, KeywordEmbedder, RecordingGenerator


class FlakyEmbedder(KeywordEmbedder):
    """Fails ``failures`` times before succeeding."""

    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures

    async def embed(self, text):
        self.calls.append(text)
        if len(self.calls) <= self.failures:
            raise EmbeddingUnavailable("temporarily unavailable")
        return self.vector_for(text)


class FlakyGenerator(RecordingGenerator):
    def __init__(self, failures: int):
        super().__init__("Recovered answer")
        self.failures = failures

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if len(self.prompts) <= self.failures:
            raise GenerationUnavailable("model loading")
        return self.answer


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


NO_JITTER = RetryConfig(max_attempts=3, initial_delay_ms=100, max_delay_ms=150, jitter=False)


def test_calculate_delay_exponential_and_capped():
    assert calculate_delay(0, NO_JITTER) == pytest.approx(0.1)
    assert calculate_delay(1, NO_JITTER) == pytest.approx(0.15)
    assert calculate_delay(5, NO_JITTER) == pytest.approx(0.15)


def test_calculate_delay_jitter_bounds():
    config = RetryConfig(initial_delay_ms=1000, jitter=True)

    with patch("navi.llm.retry.random.random", return_value=0.0):
        assert calculate_delay(0, config) == pytest.approx(0.75)
    with patch("navi.llm.retry.random.random", return_value=1.0):
        assert calculate_delay(0, config) == pytest.approx(1.25)


def test_embedder_recovers_after_transient_failure():
    sleep = RecordingSleep()
    inner = FlakyEmbedder(failures=2)
    embedder = RetryingEmbedder(inner, NO_JITTER, sleep=sleep)

    vector = asyncio.run(embedder.embed("library"))

    assert vector == inner.vector_for("library")
    assert len(inner.calls) == 3
    assert sleep.delays == [pytest.approx(0.1), pytest.approx(0.15)]
    assert embedder.get_dimension() == inner.get_dimension()


def test_embedder_reraises_after_exhaustion():
    sleep = RecordingSleep()
    inner = FailingEmbedder()
    embedder = RetryingEmbedder(inner, NO_JITTER, sleep=sleep)

    with pytest.raises(EmbeddingUnavailable):
        asyncio.run(embedder.embed("library"))

    assert len(inner.calls) == 3
    assert len(sleep.delays) == 2


def test_generator_recovers_after_transient_failure():
    sleep = RecordingSleep()
    inner = FlakyGenerator(failures=1)
    generator = RetryingGenerator(inner, NO_JITTER, sleep=sleep)

    assert asyncio.run(generator.generate("PROMPT")) == "Recovered answer"
    assert inner.prompts == ["PROMPT", "PROMPT"]
    assert generator.get_status()["retry_max_attempts"] == 3


def test_non_retryable_errors_are_not_retried():
    sleep = RecordingSleep()
    calls = []

    async def operation():
        calls.append(1)
        raise ValueError("bug")

    with pytest.raises(ValueError):
        asyncio.run(retry_async(operation, NO_JITTER, retry_on=(EmbeddingUnavailable,), sleep=sleep))

    assert len(calls) == 1
    assert sleep.delays == []


def test_single_attempt_config_does_not_sleep():
    sleep = RecordingSleep()
    inner = FailingEmbedder()
    embedder = RetryingEmbedder(inner, RetryConfig(max_attempts=1), sleep=sleep)

    with pytest.raises(EmbeddingUnavailable):
        asyncio.run(embedder.embed("library"))

    assert len(inner.calls) == 1
    assert sleep.delays == []
