# smith/providers/__init__.py
"""
The `providers` package contains the concrete implementations for different
language-model backends, all adhering to the `LLMProvider` interface defined
in `base.py`, and the registry that selects one by name.
"""
from smith.providers.base import DISPATCH_ERROR_SENTINEL, LLMProvider, TokenUsage
from smith.providers.registry import (
    ProviderKind,
    get_llm_provider,
    is_provider_available,
    list_available_providers,
)

__all__ = [
    "DISPATCH_ERROR_SENTINEL",
    "LLMProvider",
    "ProviderKind",
    "TokenUsage",
    "get_llm_provider",
    "is_provider_available",
    "list_available_providers",
]
