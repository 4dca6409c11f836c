# smith/providers/gemini_provider.py
"""
A concrete implementation of the LLMProvider for Google's Gemini
``generateContent`` REST endpoint.
"""
from smith.exceptions import DispatchError
from smith.providers.base import NO_RESPONSE, LLMProvider, TokenUsage
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)


class GeminiProvider(LLMProvider):
    """
    Provider for a Gemini ``models/<model>:generateContent`` endpoint. The
    endpoint in config is used as-is, so it must already name the model.
    """

    name = "gemini"

    async def generate_response(self, prompt: str) -> str:
        logger.info(f"Sending prompt to Gemini backend (model: {self.model})")
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        data = await self._post_json(headers, payload)

        try:
            candidates = data.get("candidates") or []
            parts = candidates[0].get("content", {}).get("parts", []) if candidates else []
            text = "".join(part.get("text", "") for part in parts)
        except (AttributeError, TypeError) as e:
            raise DispatchError("Invalid response format from Gemini.", self.name) from e

        usage = data.get("usageMetadata") or {}
        if usage:
            self.last_usage = TokenUsage(
                prompt_tokens=usage.get("promptTokenCount"),
                response_tokens=usage.get("candidatesTokenCount"),
            )
        return text or NO_RESPONSE
