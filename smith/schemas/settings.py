# smith/schemas/settings.py
"""
Centralized settings management using pydantic-settings.

This module defines a Settings model that loads configuration values from
environment variables (prefixed with ``SMITH_``) or a ``.env`` file. It holds
the locations of the documents a run reads and the directories it writes to.
Provider secrets are NOT modelled here: their variable names come from the
system config document and are read from the process environment when a
provider is constructed.
"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Loads Smith's environment-driven settings into a structured model.

    :ivar config_path: Location of the system config document (JSONC).
    :vartype config_path: Path
    :ivar schema_path: Location of the JSON Schema used to validate tasks.
    :vartype schema_path: Path
    :ivar task_path: Default task document, overridable with ``SMITH_TASK_PATH``.
    :vartype task_path: Path
    :ivar metrics_dir: Directory holding per-day task logs and the aggregate.
    :vartype metrics_dir: Path
    :ivar log_dir: Directory holding the per-day application log files.
    :vartype log_dir: Path
    :ivar log_level: Root log level name (debug, info, warning, error).
    :vartype log_level: str
    :ivar request_timeout: Optional network timeout for backend calls, in seconds.
    :vartype request_timeout: Optional[float]
    :ivar degrade_on_dispatch_error: Write a sentinel response instead of failing
        the run when a backend cannot generate a response.
    :vartype degrade_on_dispatch_error: bool
    """

    config_path: Path = Field(default=Path("config/agent.config.jsonc"))
    schema_path: Path = Field(default=Path("schemas/task.schema.json"))
    task_path: Path = Field(default=Path("tasks/task-001.jsonc"))
    metrics_dir: Path = Field(default=Path("logs/metrics"))
    log_dir: Path = Field(default=Path("logs"))
    log_level: str = Field(default="info")
    request_timeout: Optional[float] = Field(default=None)
    degrade_on_dispatch_error: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="SMITH_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


_SETTINGS_CACHE: Optional[Settings] = None


def get_settings() -> Settings:
    global _SETTINGS_CACHE
    if _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings()
    return _SETTINGS_CACHE


def reload_settings() -> Settings:
    """Clear cache and reload (primarily for tests)."""
    global _SETTINGS_CACHE
    _SETTINGS_CACHE = None
    return get_settings()
