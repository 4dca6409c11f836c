# smith/utils/log_sinks.py
"""
Custom logging components for the Smith framework.

This module provides a filter that stamps each record with the id of the task
being run, and a handler that appends formatted records to one log file per
calendar day.
"""
import contextvars
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

# A context variable to hold the current task_id. This allows loggers
# anywhere in the call stack to access the task_id without it being
# passed down as an argument.
task_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "task_id", default=None
)


class TaskIdFilter(logging.Filter):
    """
    A logging filter that injects the current task_id from the contextvar
    into the log record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Adds the task_id to the log record if it exists in the context.

        :param record: The log record being processed.
        :type record: logging.LogRecord
        :return: Always returns True to allow the record to be processed.
        :rtype: bool
        """
        record.task_id = task_id_context.get()
        return True


class DailyFileHandler(logging.Handler):
    """
    A logging handler that appends formatted records to
    ``<logs_dir>/<prefix>-<YYYY-MM-DD>.log``, one record per line.

    The file name is chosen per record, so a long-running process rolls over
    to a new file at midnight UTC without any extra bookkeeping.
    """

    def __init__(self, logs_dir: Union[str, Path], prefix: str = "smith"):
        """Initializes the handler with the target directory for logs.

        :param logs_dir: The directory where log files will be stored.
        :type logs_dir: Union[str, Path]
        :param prefix: File name prefix for each daily log file.
        :type prefix: str
        """
        super().__init__()
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self.addFilter(TaskIdFilter())

    def path_for(self, when: datetime) -> Path:
        return self.logs_dir / f"{self.prefix}-{when.date().isoformat()}.log"

    def emit(self, record: logging.LogRecord):
        """Appends the formatted record to today's log file.

        :param record: The log record to be emitted.
        :type record: logging.LogRecord
        """
        try:
            when = datetime.fromtimestamp(record.created, tz=timezone.utc)
            line = self.format(record)
            with self.path_for(when).open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)
