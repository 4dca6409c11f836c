# smith/schemas/metrics.py
"""
Pydantic schemas for run telemetry.

`TaskMetrics` is one record per run, appended to a per-day log.
`SystemMetrics` is the single rolling aggregate across all runs.
Both serialize with camelCase keys and ISO-8601 timestamps.
"""
from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import Field

from smith.schemas.config import CamelModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskMetrics(CamelModel):
    """Execution record of a single task.

    ``end_time`` and ``duration`` stay unset until the task completes, so
    readers must tolerate records without them.
    """

    task_id: str
    agent_id: str
    provider_name: str
    start_time: datetime = Field(default_factory=utcnow)
    end_time: Optional[datetime] = None
    duration: Optional[float] = Field(default=None, description="Milliseconds.")
    success: bool = False
    prompt_tokens: Optional[int] = None
    response_tokens: Optional[int] = None
    response_length: int = 0
    error_message: Optional[str] = None
    source_file: str
    output_file: str

    @property
    def total_tokens(self) -> int:
        return (self.prompt_tokens or 0) + (self.response_tokens or 0)


class SystemMetrics(CamelModel):
    """Aggregate statistics across every completed task."""

    total_tasks: int = 0
    successful_tasks: int = 0
    failed_tasks: int = 0
    average_duration: float = Field(default=0.0, description="Milliseconds.")
    total_tokens_used: int = 0
    provider_usage: Dict[str, int] = Field(default_factory=dict)
    agent_usage: Dict[str, int] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=utcnow)

    @property
    def success_rate(self) -> float:
        """Percentage of successful tasks, 0 when nothing ran yet."""
        if self.total_tasks <= 0:
            return 0.0
        return self.successful_tasks / self.total_tasks * 100
