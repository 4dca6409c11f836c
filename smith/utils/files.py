# smith/utils/files.py
"""
Loaders for Smith's commented-JSON documents.

Config and task files are JSONC: JSON plus comments and trailing commas.
Parsing is delegated to `json5`, which accepts that superset.
"""
from pathlib import Path
from typing import Any, Union

import json5
from pydantic import ValidationError

from smith.exceptions import ConfigError, NotFoundError, ParseError, SchemaValidationError
from smith.schemas.config import SystemConfig
from smith.schemas.task import TaskDescription
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)


def read_jsonc(file_path: Union[str, Path]) -> Any:
    """Reads and parses a JSONC document.

    :param file_path: Path to the document.
    :return: The parsed value (usually a dict).
    :raises NotFoundError: If the path does not exist or is not a file.
    :raises ParseError: If the content is malformed or parses to nothing.
    """
    path = Path(file_path)
    if not path.is_file():
        logger.error(f"Error reading JSONC file: {path}", extra={"reason": "not found"})
        raise NotFoundError(f"File not found: {path}")

    try:
        parsed = json5.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        logger.error(f"Error reading JSONC file: {path}", extra={"reason": str(e)})
        raise ParseError(f"Failed to parse JSONC file: {path}: {e}") from e

    if parsed is None or parsed == {} or parsed == []:
        logger.error(f"Error reading JSONC file: {path}", extra={"reason": "empty document"})
        raise ParseError(f"Failed to parse JSONC file: {path}: document is empty")

    return parsed


def parse_system_config(data: Any, source: Union[str, Path] = "<config>") -> SystemConfig:
    try:
        return SystemConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid system configuration in {source}: {e}") from e


def parse_task(data: Any, source: Union[str, Path] = "<task>") -> TaskDescription:
    """Builds a `TaskDescription` from a parsed task document.

    Only structural checks happen here; `validate_task_schema` is the
    authoritative validator and should run first.
    """
    try:
        return TaskDescription.model_validate(data)
    except ValidationError as e:
        errors = [
            ("/" + "/".join(str(p) for p in err["loc"]), err["msg"]) for err in e.errors()
        ]
        raise SchemaValidationError(f"Invalid task document {source}", errors) from e

