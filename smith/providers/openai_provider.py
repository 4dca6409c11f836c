# smith/providers/openai_provider.py
"""
A concrete implementation of the LLMProvider for OpenAI-compatible
chat-completions endpoints.
"""
from typing import Any, Dict

from smith.exceptions import DispatchError
from smith.providers.base import NO_RESPONSE, LLMProvider, TokenUsage
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)


class OpenAIProvider(LLMProvider):
    """
    Provider for interacting with an OpenAI ``/v1/chat/completions`` endpoint.
    """

    name = "openai"
    temperature = 0.5

    async def generate_response(self, prompt: str) -> str:
        """
        Gets a completion from the chat-completions endpoint.
        """
        logger.info(f"Sending prompt to OpenAI backend (model: {self.model})")
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        data = await self._post_json(headers, payload)

        try:
            choices = data.get("choices") or []
            content = choices[0].get("message", {}).get("content") if choices else None
        except (AttributeError, TypeError) as e:
            raise DispatchError("Invalid response format from OpenAI.", self.name) from e

        usage = data.get("usage") or {}
        if usage:
            self.last_usage = TokenUsage(
                prompt_tokens=usage.get("prompt_tokens"),
                response_tokens=usage.get("completion_tokens"),
            )
        return content or NO_RESPONSE
