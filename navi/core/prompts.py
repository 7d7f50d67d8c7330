"""
Prompt assembly for grounded generation.
"""

from .context_tags import Query
from ..vector.types import RetrievalResult

DEFAULT_ASSISTANT_NAME = "Navi"

PROMPT_TEMPLATE = """You are {assistant_name}, the AI Campus Navigator.

CURRENT CONTEXT: You are currently assisting a member of "{category}".
If they ask about a location, assume they mean within {category} unless the question states otherwise.

Strictly answer based ONLY on the provided Context.
If the Context is empty, say: "{fallback}"

Context:
{context}

Question: {question}"""


def fallback_sentence(category: str) -> str:
    """The sentence the generator is told to use when there is no context."""
    return f"I don't have information on that specific topic for {category}."


def build_context_block(result: RetrievalResult) -> str:
    """Entry contents in rank order separated by a blank line; empty when nothing matched."""
    return "\n\n".join(hit.content for hit in result)


def assemble(query: Query, result: RetrievalResult, assistant_name: str = DEFAULT_ASSISTANT_NAME) -> str:
    """Build the generation prompt for ``query`` grounded on ``result``."""
    return PROMPT_TEMPLATE.format(
        assistant_name=assistant_name,
        category=query.category,
        fallback=fallback_sentence(query.category),
        context=build_context_block(result),
        question=query.clean_message,
    )
