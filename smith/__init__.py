"""
Smith core package.

Runs declarative tasks: an agent's prompt plus a project source file, sent to
a configurable language-model provider, with the response written back to
the project and the run recorded in metrics.
"""

__version__ = "1.0.0"

__all__ = [
    "cli",
    "context",
    "exceptions",
    "orchestrator",
    "providers",
    "schemas",
    "utils",
]
