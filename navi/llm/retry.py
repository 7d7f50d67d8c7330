"""
Retry transport for the embedding and generation adapters.

Bounded exponential backoff lives here, around the adapters, so the answering
pipeline itself never sleeps or loops.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Tuple, Type

from ..core.errors import EmbeddingUnavailable, GenerationUnavailable
from ..util.logging import logger
from ..vector.embeddings import IEmbeddingProvider
from .generator import BaseGenerator


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts (including first try)
        initial_delay_ms: Initial delay in milliseconds
        max_delay_ms: Maximum delay in milliseconds
        backoff_multiplier: Multiplier for exponential backoff
        jitter: Whether to add random jitter to delay
    """
    max_attempts: int = 3
    initial_delay_ms: float = 250.0
    max_delay_ms: float = 2000.0
    backoff_multiplier: float = 2.0
    jitter: bool = True


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay for a given attempt with exponential backoff.

    Args:
        attempt: Attempt number (0-based)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay_ms = min(
        config.initial_delay_ms * (config.backoff_multiplier ** attempt),
        config.max_delay_ms
    )

    # ±25% random variation
    if config.jitter:
        delay_ms *= 0.75 + (random.random() * 0.5)

    return delay_ms / 1000.0


async def retry_async(
    operation: Callable[[], Awaitable],
    config: RetryConfig,
    retry_on: Tuple[Type[BaseException], ...],
    operation_name: str = "operation",
    sleep: Callable[[float], Awaitable] = asyncio.sleep,
):
    """
    Await ``operation`` until it succeeds or ``config.max_attempts`` is reached.

    Only ``retry_on`` errors are retried; the last one is re-raised once
    attempts are exhausted. Cancellation propagates immediately.
    """
    attempts = max(1, config.max_attempts)
    for attempt in range(attempts):
        try:
            return await operation()
        except retry_on as e:
            is_last = attempt == attempts - 1
            delay = None if is_last else calculate_delay(attempt, config)
            logger.log_retry_attempt(operation_name, attempt + 1, attempts, e, delay)
            if is_last:
                raise
            await sleep(delay)


class RetryingEmbedder(IEmbeddingProvider):
    """Embedding provider decorator that retries EmbeddingUnavailable."""

    def __init__(self, inner: IEmbeddingProvider, config: Optional[RetryConfig] = None,
                 sleep: Callable[[float], Awaitable] = asyncio.sleep):
        self.inner = inner
        self.config = config or RetryConfig()
        self._sleep = sleep

    async def embed(self, text: str) -> list:
        return await retry_async(
            lambda: self.inner.embed(text),
            self.config,
            retry_on=(EmbeddingUnavailable,),
            operation_name="embed",
            sleep=self._sleep,
        )

    def get_dimension(self) -> Optional[int]:
        return self.inner.get_dimension()


class RetryingGenerator(BaseGenerator):
    """Generator decorator that retries GenerationUnavailable."""

    def __init__(self, inner: BaseGenerator, config: Optional[RetryConfig] = None,
                 sleep: Callable[[float], Awaitable] = asyncio.sleep):
        super().__init__(inner.model_name)
        self.inner = inner
        self.config = config or RetryConfig()
        self._sleep = sleep

    async def generate(self, prompt: str) -> str:
        return await retry_async(
            lambda: self.inner.generate(prompt),
            self.config,
            retry_on=(GenerationUnavailable,),
            operation_name="generate",
            sleep=self._sleep,
        )

    async def check_health(self) -> bool:
        return await self.inner.check_health()

    def get_status(self):
        status = self.inner.get_status()
        status["retry_max_attempts"] = self.config.max_attempts
        return status
