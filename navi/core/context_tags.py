"""
Context tag parsing.
Clients scope a question by embedding "[Context: <category>]" in the message;
this module is the only place that knows about that convention.
"""

import re
from dataclasses import dataclass

from .errors import InvalidQuery
from ..vector.types import GENERAL_CATEGORY

CONTEXT_TAG_PATTERN = re.compile(r"\[Context: (.*?)\]")


@dataclass(frozen=True)
class Query:
    """A parsed, per-request question."""
    raw_message: str
    category: str
    clean_message: str


def parse(raw_message: str) -> Query:
    """
    Split a raw message into its category scope and the question text.

    The first annotation found anywhere in the message wins; its captured text
    is used verbatim as the category. Without an annotation the category is
    "General".

    Raises:
        InvalidQuery: if nothing is left once the annotation is removed.
    """
    raw_message = raw_message or ""
    match = CONTEXT_TAG_PATTERN.search(raw_message)

    if match:
        category = match.group(1)
        clean_message = (raw_message[:match.start()] + raw_message[match.end():]).strip()
    else:
        category = GENERAL_CATEGORY
        clean_message = raw_message.strip()

    if not clean_message:
        raise InvalidQuery("Message is empty after removing the context annotation")

    return Query(raw_message=raw_message, category=category, clean_message=clean_message)


def tag_message(category: str, message: str) -> str:
    """Build a raw message in the client convention (inverse of parse)."""
    return f"[Context: {category}] {message}"
