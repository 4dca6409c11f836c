# smith/providers/jules_provider.py
"""
Placeholder LLMProvider for the Jules backend.
"""
from smith.exceptions import DispatchError
from smith.providers.base import LLMProvider
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)


class JulesProvider(LLMProvider):
    """
    Registered so configs can name it, but the Jules API is not integrated
    yet: construction validates the secret like any other backend and every
    call fails.
    """

    name = "jules"

    async def generate_response(self, prompt: str) -> str:
        logger.debug(
            "JulesProvider.generate_response called",
            extra={"model": self.model, "endpoint": self.endpoint, "prompt_length": len(prompt)},
        )
        raise DispatchError("Jules provider not implemented yet.", self.name)
