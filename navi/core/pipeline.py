"""
Answering pipeline: Parsing -> Retrieving -> Assembling -> Generating -> Done.

answer() never raises for an expected failure; every error in the taxonomy is
mapped to a Degraded outcome with a stable reason code. Cancellation is not
an error and propagates to the caller.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from . import context_tags, prompts
from .context_tags import Query
from .errors import DimensionMismatch, GenerationUnavailable, InvalidQuery, RetrievalError
from .retriever import Retriever
from ..llm.generator import BaseGenerator
from ..util.logging import logger
from ..vector.types import RetrievalResult

FALLBACK_INVALID_QUERY = "Please enter a question."
FALLBACK_RETRIEVAL_FAILED = "I can't reach the knowledge base right now."
FALLBACK_GENERATION_FAILED = "I can't generate a response right now. Please try again."


class PipelineState(str, Enum):
    PARSING = "parsing"
    RETRIEVING = "retrieving"
    ASSEMBLING = "assembling"
    GENERATING = "generating"
    DONE = "done"


@dataclass(frozen=True)
class Answered:
    """Generated answer text."""
    text: str

    @property
    def reply(self) -> str:
        return self.text

    @property
    def reason_code(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class Degraded:
    """User-safe fallback produced when a step failed."""
    reason_code: str
    fallback_text: str

    @property
    def reply(self) -> str:
        return self.fallback_text


AnswerOutcome = Union[Answered, Degraded]


@dataclass
class PipelineRun:
    """Everything one call produced, for diagnostics and tests."""
    outcome: AnswerOutcome
    states: List[PipelineState] = field(default_factory=list)
    query: Optional[Query] = None
    retrieval: Optional[RetrievalResult] = None
    prompt: Optional[str] = None


class AnsweringPipeline:
    """
    Stateless orchestration over an injected retriever and generator.
    Safe to share across concurrent calls as long as its collaborators are.
    """

    def __init__(self, retriever: Retriever, generator: BaseGenerator,
                 generation_timeout: Optional[float] = None,
                 assistant_name: str = prompts.DEFAULT_ASSISTANT_NAME):
        self.retriever = retriever
        self.generator = generator
        self.generation_timeout = generation_timeout
        self.assistant_name = assistant_name

    async def answer(self, raw_message: str) -> AnswerOutcome:
        """Answer one question; returns Answered or Degraded, never raises."""
        run = await self.run(raw_message)
        return run.outcome

    async def run(self, raw_message: str) -> PipelineRun:
        run = PipelineRun(outcome=None)

        run.states.append(PipelineState.PARSING)
        try:
            run.query = context_tags.parse(raw_message)
        except InvalidQuery as e:
            return self._finish(run, Degraded(InvalidQuery.reason_code, FALLBACK_INVALID_QUERY), e)
        logger.log_query_parsed(run.query.category, run.query.clean_message)

        run.states.append(PipelineState.RETRIEVING)
        try:
            run.retrieval = await self.retriever.retrieve(run.query)
        except RetrievalError as e:
            if isinstance(e, DimensionMismatch):
                logger.log_invariant_violation("vector_store", str(e), {
                    "expected": e.expected,
                    "actual": e.actual,
                })
            return self._finish(run, Degraded(RetrievalError.reason_code, FALLBACK_RETRIEVAL_FAILED), e)
        except Exception as e:
            # Unmapped adapter error
            logger.log_invariant_violation("retriever", f"unexpected {type(e).__name__}: {e}")
            return self._finish(run, Degraded(RetrievalError.reason_code, FALLBACK_RETRIEVAL_FAILED), e)

        run.states.append(PipelineState.ASSEMBLING)
        run.prompt = prompts.assemble(run.query, run.retrieval, assistant_name=self.assistant_name)

        run.states.append(PipelineState.GENERATING)
        try:
            text = await self._generate(run.prompt)
        except GenerationUnavailable as e:
            return self._finish(run, Degraded(GenerationUnavailable.reason_code, FALLBACK_GENERATION_FAILED), e)
        except Exception as e:
            logger.log_invariant_violation("generator", f"unexpected {type(e).__name__}: {e}")
            return self._finish(run, Degraded(GenerationUnavailable.reason_code, FALLBACK_GENERATION_FAILED), e)

        return self._finish(run, Answered(text))

    async def _generate(self, prompt: str) -> str:
        try:
            text = await asyncio.wait_for(self.generator.generate(prompt), timeout=self.generation_timeout)
        except asyncio.TimeoutError as e:
            raise GenerationUnavailable(f"Generation timed out after {self.generation_timeout}s") from e
        if not isinstance(text, str) or not text.strip():
            raise GenerationUnavailable("Generator returned an empty response")
        return text

    @staticmethod
    def _finish(run: PipelineRun, outcome: AnswerOutcome, error: Exception = None) -> PipelineRun:
        if isinstance(outcome, Degraded):
            logger.log_degraded(outcome.reason_code, error)
        run.outcome = outcome
        run.states.append(PipelineState.DONE)
        return run
