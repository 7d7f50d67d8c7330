"""
Error taxonomy for the answering pipeline.
Every class carries the stable reason code the pipeline reports when it degrades.
"""


class NaviError(Exception):
    """Base class for all recoverable pipeline failures."""

    reason_code = "internal_error"


class InvalidQuery(NaviError):
    """The message is empty once the context annotation is stripped."""

    reason_code = "invalid_query"


class RetrievalError(NaviError):
    """Base for failures raised while retrieving grounding context."""

    reason_code = "retrieval_failed"


class EmbeddingUnavailable(RetrievalError):
    """Embedding call failed, timed out, or returned a malformed vector."""


class StoreUnavailable(RetrievalError):
    """The vector store's underlying storage call failed."""


class DimensionMismatch(RetrievalError):
    """Query vector dimensionality differs from the store's."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Vector dimension {actual} does not match expected dimension {expected}")
        self.expected = expected
        self.actual = actual


class GenerationUnavailable(NaviError):
    """Generation call failed, timed out, or returned an empty response."""

    reason_code = "generation_failed"
