# smith/utils/metrics.py
"""
Task metrics collection and aggregation.

A `MetricsCollector` tracks at most one in-flight task. Completing it appends
the record to ``tasks-<YYYY-MM-DD>.json`` and folds it into
``system-metrics.json``. Both files are rewritten in full on every update and
are not locked: task execution must be serialized by the caller.
"""
import json
from datetime import date
from pathlib import Path
from typing import List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from smith.schemas.metrics import SystemMetrics, TaskMetrics, utcnow
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)

SYSTEM_METRICS_FILE = "system-metrics.json"
NO_METRICS_MESSAGE = "No metrics available"

_TASK_LIST = TypeAdapter(List[TaskMetrics])


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


class MetricsCollector:
    """Records per-task outcomes and maintains the rolling aggregate."""

    def __init__(self, metrics_dir: Union[str, Path] = "logs/metrics"):
        self.metrics_dir = Path(metrics_dir)
        self.metrics_dir.mkdir(parents=True, exist_ok=True)
        self._current_task: Optional[TaskMetrics] = None

    @property
    def current_task(self) -> Optional[TaskMetrics]:
        return self._current_task

    @property
    def system_metrics_path(self) -> Path:
        return self.metrics_dir / SYSTEM_METRICS_FILE

    def task_log_path(self, day: Union[date, str]) -> Path:
        """Per-day task log path.

        :raises ValueError: If `day` is a string that is not an ISO date.
        """
        if isinstance(day, str):
            day = date.fromisoformat(day)
        return self.metrics_dir / f"tasks-{day.isoformat()}.json"

    def start_task(
        self,
        task_id: str,
        agent_id: str,
        provider_name: str,
        source_file: Union[str, Path],
        output_file: Union[str, Path],
    ) -> TaskMetrics:
        """Opens a new in-flight record, replacing any previous one."""
        if self._current_task is not None:
            logger.warning(
                "Replacing in-flight task that was never completed",
                extra={"task_id": self._current_task.task_id},
            )
        self._current_task = TaskMetrics(
            task_id=task_id,
            agent_id=agent_id,
            provider_name=provider_name,
            start_time=utcnow(),
            source_file=str(source_file),
            output_file=str(output_file),
        )
        logger.debug(
            "Started tracking task",
            extra={"task_id": task_id, "agent_id": agent_id, "provider_name": provider_name},
        )
        return self._current_task

    def update_token_usage(
        self, prompt_tokens: Optional[int], response_tokens: Optional[int]
    ) -> None:
        if self._current_task is None:
            return
        self._current_task.prompt_tokens = prompt_tokens
        self._current_task.response_tokens = response_tokens

    def complete_task(
        self, success: bool, response_length: int, error_message: Optional[str] = None
    ) -> Optional[TaskMetrics]:
        """Closes the in-flight record and persists it.

        :return: The completed record, or None when nothing was in flight.
        """
        task = self._current_task
        if task is None:
            logger.warning("No active task to complete")
            return None
        self._current_task = None

        task.end_time = utcnow()
        task.duration = (task.end_time - task.start_time).total_seconds() * 1000
        task.success = success
        task.response_length = response_length
        task.error_message = error_message

        self._save_task_metrics(task)
        self._update_system_metrics(task)

        logger.info(
            "Task completed",
            extra={"task_id": task.task_id, "success": success, "duration": task.duration},
        )
        return task

    def _save_task_metrics(self, task: TaskMetrics) -> None:
        path = self.task_log_path(task.end_time.date())
        tasks: list = []
        if path.exists():
            try:
                tasks = json.loads(path.read_text(encoding="utf-8"))
                if not isinstance(tasks, list):
                    raise ValueError("task log is not a JSON array")
            except ValueError as e:
                logger.warning("Failed to read existing task metrics", extra={"error": str(e)})
                tasks = []

        tasks.append(_dump(task))
        path.write_text(json.dumps(tasks, indent=2), encoding="utf-8")

    def _load_system_metrics(self) -> SystemMetrics:
        path = self.system_metrics_path
        if not path.exists():
            return SystemMetrics()
        try:
            return SystemMetrics.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            logger.warning("Failed to read system metrics", extra={"error": str(e)})
            return SystemMetrics()

    def _update_system_metrics(self, task: TaskMetrics) -> SystemMetrics:
        metrics = self._load_system_metrics()

        metrics.total_tasks += 1
        if task.success:
            metrics.successful_tasks += 1
        else:
            metrics.failed_tasks += 1

        if task.duration is not None:
            n = metrics.total_tasks
            metrics.average_duration = (metrics.average_duration * (n - 1) + task.duration) / n

        if task.prompt_tokens is not None or task.response_tokens is not None:
            metrics.total_tokens_used += task.total_tokens

        metrics.provider_usage[task.provider_name] = (
            metrics.provider_usage.get(task.provider_name, 0) + 1
        )
        metrics.agent_usage[task.agent_id] = metrics.agent_usage.get(task.agent_id, 0) + 1
        metrics.last_updated = utcnow()

        self.system_metrics_path.write_text(
            json.dumps(_dump(metrics), indent=2), encoding="utf-8"
        )
        return metrics

    def get_system_metrics(self) -> Optional[SystemMetrics]:
        path = self.system_metrics_path
        if not path.exists():
            return None
        try:
            return SystemMetrics.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError:
            logger.exception("Failed to read system metrics")
            return None

    def get_task_metrics(self, day: Union[date, str]) -> List[TaskMetrics]:
        path = self.task_log_path(day)
        if not path.exists():
            return []
        try:
            return _TASK_LIST.validate_json(path.read_text(encoding="utf-8"))
        except ValidationError:
            logger.exception("Failed to read task metrics", extra={"date": str(day)})
            return []

    def generate_report(self) -> str:
        metrics = self.get_system_metrics()
        if metrics is None:
            return NO_METRICS_MESSAGE

        top_provider = _most_used(metrics.provider_usage)
        top_agent = _most_used(metrics.agent_usage)
        last_updated = metrics.last_updated.isoformat()

        return (
            "\nSmith Framework Metrics Report\n"
            "==============================\n\n"
            f"Total Tasks: {metrics.total_tasks}\n"
            f"Successful: {metrics.successful_tasks}\n"
            f"Failed: {metrics.failed_tasks}\n"
            f"Success Rate: {metrics.success_rate:.2f}%\n\n"
            f"Average Duration: {metrics.average_duration / 1000:.2f}s\n"
            f"Total Tokens Used: {metrics.total_tokens_used}\n\n"
            f"Most Used Provider: {top_provider}\n"
            f"Most Used Agent: {top_agent}\n\n"
            f"Last Updated: {last_updated}\n"
        )


def _most_used(usage: dict) -> str:
    if not usage:
        return "None"
    return max(usage.items(), key=lambda item: item[1])[0]
