"""
Ollama-backed generator.
"""

from datetime import datetime
from typing import Any, Dict, Optional

import httpx
import ollama

from .generator import BaseGenerator
from ..core.errors import GenerationUnavailable
from ..util.logging import logger


class OllamaGenerator(BaseGenerator):
    """
    Generator that sends the assembled prompt to an Ollama chat model.
    The prompt already carries persona and grounding instructions, so it is
    sent as a single user message.
    """

    def __init__(self, model_name: str, host: Optional[str] = None,
                 options: Optional[Dict[str, Any]] = None, client: Optional[ollama.AsyncClient] = None):
        super().__init__(model_name)
        self.options = options or {
            'temperature': 0.3,  # Low creativity
            'top_p': 0.9
        }
        self._client = client or ollama.AsyncClient(host=host)

    async def generate(self, prompt: str) -> str:
        start_time = datetime.now()
        try:
            response = await self._client.chat(
                model=self.model_name,
                messages=[{'role': 'user', 'content': prompt}],
                options=self.options
            )
        except (ollama.ResponseError, ollama.RequestError, httpx.HTTPError, ConnectionError) as e:
            raise GenerationUnavailable(f"Ollama model error: {e}") from e

        try:
            content = response['message']['content']
        except (KeyError, TypeError) as e:
            raise GenerationUnavailable("Ollama response is malformed") from e

        if not isinstance(content, str) or not content.strip():
            raise GenerationUnavailable("Ollama returned an empty response")

        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
        logger.log_generation(self.model_name, processing_time, len(content))
        return content.strip()

    async def check_health(self) -> bool:
        """Check if Ollama is reachable."""
        try:
            await self._client.list()
            return True
        except Exception:
            return False

    def get_status(self) -> Dict[str, Any]:
        status = super().get_status()
        status.update({'options': self.options})
        return status
