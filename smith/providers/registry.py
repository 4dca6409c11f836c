# smith/providers/registry.py
"""
Provider registry and dispatcher.

Maps a provider name from config to a concrete `LLMProvider`. The set of
backends is a closed `ProviderKind` enum; `_PROVIDER_FACTORIES` binds every
kind to its constructor. Adding a backend means adding an enum member, a
module, and one table entry.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from smith.exceptions import ConfigError, ProviderInitError, UnknownProviderError
from smith.providers.base import LLMProvider
from smith.providers.gemini_provider import GeminiProvider
from smith.providers.jules_provider import JulesProvider
from smith.providers.openai_provider import OpenAIProvider
from smith.schemas.config import ProviderConfig
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)

REQUIRED_CONFIG_PROPS = ("apiKeyEnv", "model", "endpoint")
_SNAKE_NAMES = {"apiKeyEnv": "api_key_env"}


class ProviderKind(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    JULES = "jules"


ProviderFactory = Callable[..., LLMProvider]

_PROVIDER_FACTORIES: Dict[ProviderKind, ProviderFactory] = {
    ProviderKind.OPENAI: OpenAIProvider,
    ProviderKind.GEMINI: GeminiProvider,
    ProviderKind.JULES: JulesProvider,
}


def _normalize(name: str) -> str:
    return name.strip().lower()


def _coerce_config(config: Any) -> ProviderConfig:
    if isinstance(config, ProviderConfig):
        return config
    if not isinstance(config, Mapping):
        raise ConfigError("Provider config must be a valid object")

    for prop in REQUIRED_CONFIG_PROPS:
        if not (config.get(prop) or config.get(_SNAKE_NAMES.get(prop, prop))):
            raise ConfigError(f"Missing required config property: {prop}")
    try:
        return ProviderConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigError(f"Invalid provider config: {e}") from e


def get_llm_provider(
    name: Any,
    config: Union[ProviderConfig, Mapping[str, Any], None],
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LLMProvider:
    """Builds the backend registered under `name`.

    :param name: Provider name; case and surrounding whitespace are ignored.
    :param config: The provider's entry from the system config.
    :param timeout: Optional network timeout in seconds.
    :param transport: Optional httpx transport, mainly for tests.
    :return: A ready-to-use provider.
    :raises ConfigError: If `name` or `config` is malformed.
    :raises UnknownProviderError: If no backend is registered under `name`.
    :raises ProviderInitError: If the backend fails to construct.
    """
    if not name or not isinstance(name, str) or not name.strip():
        raise ConfigError("Provider name must be a non-empty string")
    if config is None:
        raise ConfigError("Provider config must be a valid object")

    provider_config = _coerce_config(config)

    try:
        kind = ProviderKind(_normalize(name))
    except ValueError:
        available = list_available_providers()
        raise UnknownProviderError(
            f'Unknown LLM provider: "{name}". Available providers: {", ".join(available)}',
            available,
        ) from None

    factory = _PROVIDER_FACTORIES[kind]
    try:
        provider = factory(provider_config, timeout=timeout, transport=transport)
    except Exception as e:
        logger.error(f'Failed to initialize LLM provider "{name}": {e}')
        raise ProviderInitError(
            f'Failed to initialize LLM provider "{name}": {e}', cause=e
        ) from e

    logger.debug(f"Initialized provider '{kind.value}' (model: {provider_config.model})")
    return provider


def list_available_providers() -> List[str]:
    """Returns the registered provider names in registration order."""
    return [kind.value for kind in _PROVIDER_FACTORIES]


def is_provider_available(name: Any) -> bool:
    """Case-insensitive check that `name` is a registered provider."""
    if not name or not isinstance(name, str):
        return False
    return _normalize(name) in list_available_providers()
