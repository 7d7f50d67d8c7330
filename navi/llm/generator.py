"""
Base generator interface: prompt -> answer text.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class BaseGenerator(ABC):
    """
    Abstract base class for text generators.
    generate() is async and is the only suspension point; implementations
    raise GenerationUnavailable instead of returning empty text.
    """

    def __init__(self, model_name: str):
        self.model_name = model_name

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Produce an answer for a fully assembled prompt.

        Args:
            prompt: Grounded prompt text from the prompt assembler

        Returns:
            str: Non-empty answer text
        """
        pass

    async def check_health(self) -> bool:
        """Whether the backing service looks reachable."""
        return True

    def get_status(self) -> Dict[str, Any]:
        """Get current status of this generator."""
        return {
            "model_name": self.model_name,
            "generator_type": self.__class__.__name__,
        }
