# smith/exceptions.py
"""
Defines custom exception classes for the Smith framework.

Using custom exceptions allows for precise handling at the CLI boundary and a
clear distinction between the stages of a run: loading documents, validating
configuration and tasks, constructing a provider, and dispatching a prompt.
"""
from typing import Iterable, List, Optional, Sequence, Tuple


class SmithError(Exception):
    """Base exception class for all custom errors in the Smith application."""

    pass


class NotFoundError(SmithError, FileNotFoundError):
    """Raised when a required file or directory does not exist.

    Covers the config and task documents, agent prompt files, the task's
    source file and the project root itself. Inherits from `FileNotFoundError`
    so callers matching on the builtin keep working.
    """

    pass


class ParseError(SmithError, ValueError):
    """Raised when a structured document cannot be parsed or is empty."""

    pass


class SchemaValidationError(SmithError):
    """Raised when a task document fails JSON Schema validation.

    Carries every violation found, not only the first one.
    """

    def __init__(self, message: str, errors: Optional[Iterable[Tuple[str, str]]] = None):
        """Initializes the error with the full list of violations.

        :param message: Human-readable summary.
        :param errors: Pairs of ``(instance_path, message)``.
        """
        super().__init__(message)
        self.errors: List[Tuple[str, str]] = list(errors or [])


class ConfigError(SmithError):
    """Raised when the system, provider or agent configuration is malformed,
    incomplete or inconsistent.
    """

    pass


class UnknownProviderError(ConfigError):
    """Raised when a provider name does not match any registered backend."""

    def __init__(self, message: str, available: Sequence[str] = ()):
        super().__init__(message)
        self.available = list(available)


class ProviderInitError(SmithError):
    """Raised when a backend cannot be constructed.

    The most common cause is the provider's API key environment variable not
    being set. The original exception is kept on ``cause`` and chained.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DispatchError(SmithError):
    """Raised when a backend fails to generate a response.

    This includes network errors, non-success HTTP statuses and responses
    that cannot be decoded.
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
