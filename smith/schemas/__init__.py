# smith/schemas/__init__.py
"""
Pydantic models describing Smith's documents: the system configuration, task
descriptions, run metrics and environment-driven settings.
"""
from smith.schemas.config import AgentConfig, ProviderConfig, SystemConfig
from smith.schemas.metrics import SystemMetrics, TaskMetrics
from smith.schemas.task import TaskDescription

__all__ = [
    "AgentConfig",
    "ProviderConfig",
    "SystemConfig",
    "SystemMetrics",
    "TaskDescription",
    "TaskMetrics",
]
