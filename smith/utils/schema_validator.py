# smith/utils/schema_validator.py
"""
JSON Schema validation for task documents.

Every violation is collected before failing, so a task author sees all of
the problems with a document in one run.
"""
from pathlib import Path
from typing import Any, List, Mapping, Tuple, Union

from jsonschema import FormatChecker, SchemaError
from jsonschema.validators import validator_for

from smith.exceptions import SchemaValidationError
from smith.utils.files import read_jsonc
from smith.utils.logger import setup_logger

logger = setup_logger(__name__)

SchemaSource = Union[str, Path, Mapping[str, Any]]


def _instance_path(error) -> str:
    if not error.absolute_path:
        return "root"
    return "/" + "/".join(str(part) for part in error.absolute_path)


def load_schema(schema: SchemaSource) -> Mapping[str, Any]:
    if isinstance(schema, Mapping):
        return schema
    return read_jsonc(schema)


def collect_schema_errors(data: Any, schema: SchemaSource) -> List[Tuple[str, str]]:
    """Returns every ``(instance_path, message)`` violation of `schema` by `data`.

    :raises SchemaValidationError: If the schema document itself is invalid.
    """
    schema_doc = load_schema(schema)
    validator_cls = validator_for(schema_doc)
    try:
        validator_cls.check_schema(schema_doc)
    except SchemaError as e:
        raise SchemaValidationError(f"Invalid task schema: {e.message}") from e

    validator = validator_cls(schema_doc, format_checker=FormatChecker())
    errors = sorted(validator.iter_errors(data), key=lambda err: list(map(str, err.absolute_path)))
    return [(_instance_path(err), err.message) for err in errors]


def validate_task_schema(data: Any, schema: SchemaSource) -> None:
    """Validates a task document against a JSON Schema.

    :param data: The parsed task document.
    :param schema: The schema as a mapping, or a path to a JSON/JSONC file.
    :raises SchemaValidationError: Carrying every violation found.
    """
    errors = collect_schema_errors(data, schema)
    if errors:
        error_messages = ", ".join(f"{path}: {message}" for path, message in errors)
        logger.error(
            "Task validation failed",
            extra={"errors": [{"path": p, "message": m} for p, m in errors]},
        )
        raise SchemaValidationError(f"Task validation failed: {error_messages}", errors)

    logger.info("Task schema validation passed")
