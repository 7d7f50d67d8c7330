"""
Mock generator for development and offline runs.
Answers are derived from the prompt itself, so they stay deterministic.
"""

import re
from typing import List

from .generator import BaseGenerator

_CONTEXT_BLOCK = re.compile(r"Context:\n(.*?)\n\nQuestion:", re.DOTALL)
_FALLBACK_LINE = re.compile(r'If the Context is empty, say: "(.*?)"')


class MockGenerator(BaseGenerator):
    """
    Echoes the first context passage, or the prompt's own fallback sentence
    when no context was retrieved. Every prompt it receives is recorded.
    """

    def __init__(self, model_name: str = "mock-model"):
        super().__init__(model_name)
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)

        context_match = _CONTEXT_BLOCK.search(prompt)
        context = context_match.group(1).strip() if context_match else ""
        if context:
            first_passage = context.split("\n\n")[0]
            return f"Here is what I found: {first_passage}"

        fallback_match = _FALLBACK_LINE.search(prompt)
        if fallback_match:
            return fallback_match.group(1)
        return "I don't have information on that topic."
