# smith/providers/base.py
"""
Defines the abstract base class for all language-model providers.
"""
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from smith.exceptions import ConfigError, DispatchError
from smith.schemas.config import ProviderConfig
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)

NO_RESPONSE = "(No response)"
DISPATCH_ERROR_SENTINEL = "(Error generating response)"


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: Optional[int] = None
    response_tokens: Optional[int] = None


def read_api_key(api_key_env: str) -> str:
    """Reads a provider secret from the environment.

    :raises ConfigError: If the variable is unset or empty.
    """
    key = os.environ.get(api_key_env)
    if not key:
        raise ConfigError(f"API key missing in environment variable: {api_key_env}")
    return key


class LLMProvider(ABC):
    """
    An abstract base class for a backend that turns a prompt into generated
    text. Concrete providers read their secret when constructed and expose a
    single capability, `generate_response`.

    Providers that can report token counts set `last_usage` after each
    successful call.
    """

    name: str = "base"

    def __init__(
        self,
        config: ProviderConfig,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.api_key = read_api_key(config.api_key_env)
        self.timeout = httpx.Timeout(timeout)
        self.transport = transport
        self.last_usage: Optional[TokenUsage] = None

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    @abstractmethod
    async def generate_response(self, prompt: str) -> str:
        """
        Sends a prompt to the backend and returns the generated text.

        :param prompt: The fully assembled prompt.
        :return: The model's response text.
        :raises DispatchError: On transport, HTTP or decoding failures.
        """
        pass

    async def _post_json(self, headers: Dict[str, str], payload: Dict[str, Any]) -> Any:
        """POSTs `payload` to the configured endpoint and decodes the JSON body."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise DispatchError(f"Request to {self.name} timed out.", self.name) from e
        except httpx.RequestError as e:
            raise DispatchError(f"Network error while contacting {self.name}: {e}", self.name) from e

        if not response.is_success:
            logger.error(
                f"Error from {self.name} ({response.status_code}) at '{self.endpoint}'",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            raise DispatchError(
                f"{self.name} returned HTTP {response.status_code}: {response.text[:200]}",
                self.name,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DispatchError(f"{self.name} returned a non-JSON response.", self.name) from e
