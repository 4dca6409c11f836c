# smith/utils/logger.py
"""
Centralized logging setup for the Smith framework.

This module configures the root logger with a JSON formatter so every log
line carries a timestamp, the logger name, the level and the id of the task
being run. `setup_logger` is the entry point for modules; `configure_logging`
is called once by the CLI to apply the requested level and attach the
per-day log file.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Any, MutableMapping, Optional, Union

from pythonjsonlogger import jsonlogger

from smith.utils.log_sinks import DailyFileHandler, TaskIdFilter

_LOGGING_CONFIGURED = False

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(task_id)s %(message)s"


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Extends the standard logging adapter to support structured logging.

    This adapter allows passing a dictionary of structured data via the `extra`
    parameter in a log call. The data is wrapped under an ``extra_data`` key so
    it never collides with the standard `LogRecord` attributes.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        """Processes the log message and keyword arguments.

        :param msg: The original log message.
        :type msg: str
        :param kwargs: The keyword arguments passed to the log call.
        :type kwargs: MutableMapping[str, Any]
        :return: The processed message and keyword arguments.
        :rtype: tuple[str, MutableMapping[str, Any]]
        """
        original_extra_content = kwargs.get("extra")
        if original_extra_content is not None:
            kwargs["extra"] = {"extra_data": original_extra_content}
        return msg, kwargs


def _level_from_name(name: Optional[str]) -> int:
    return getattr(logging, (name or "info").upper(), logging.INFO)


def _json_formatter() -> jsonlogger.JsonFormatter:
    return jsonlogger.JsonFormatter(LOG_FORMAT)


def setup_logger(
    name: str,
) -> StructuredLoggerAdapter:
    """Sets up the root logger and returns a structured child logger.

    On the first call, the root logger is configured with a JSON stdout
    handler. Subsequent calls simply retrieve a logger for the specified name.

    :param name: The name of the logger, typically `__name__`.
    :type name: str
    :return: A `StructuredLoggerAdapter` instance ready for use.
    :rtype: StructuredLoggerAdapter
    """
    global _LOGGING_CONFIGURED

    if not _LOGGING_CONFIGURED:
        root_logger = logging.getLogger()
        root_logger.setLevel(_level_from_name(os.getenv("SMITH_LOG_LEVEL")))

        if root_logger.hasHandlers():
            root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(_json_formatter())
        console_handler.addFilter(TaskIdFilter())
        root_logger.addHandler(console_handler)
        _LOGGING_CONFIGURED = True

    logger_instance = logging.getLogger(name)
    return StructuredLoggerAdapter(logger_instance, {})


def configure_logging(
    level: Optional[str] = None, log_dir: Optional[Union[str, Path]] = None
) -> None:
    """Applies the run's log level and attaches the per-day file handler.

    Safe to call more than once: any previously attached `DailyFileHandler`
    is replaced.

    :param level: Level name such as ``"debug"`` or ``"info"``.
    :param log_dir: Directory for ``smith-<date>.log`` files; no file logging
        when omitted.
    """
    setup_logger("smith")
    root_logger = logging.getLogger()
    if level:
        root_logger.setLevel(_level_from_name(level))

    for handler in list(root_logger.handlers):
        if isinstance(handler, DailyFileHandler):
            root_logger.removeHandler(handler)
            handler.close()

    if log_dir is not None:
        file_handler = DailyFileHandler(log_dir)
        file_handler.setFormatter(_json_formatter())
        root_logger.addHandler(file_handler)
