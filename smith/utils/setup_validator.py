# smith/utils/setup_validator.py
"""
Pre-flight validation of the runtime environment and the system config.

Both checks accumulate every error and warning instead of stopping at the
first problem. Errors block a run; warnings are only reported.
"""
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlparse

from smith.utils.logger import setup_logger

logger = setup_logger(__name__)

MIN_PYTHON: Tuple[int, int] = (3, 10)
REQUIRED_DIRS: Tuple[str, ...] = ("config", "agents", "tasks", "schemas")
REQUIRED_SECTIONS: Tuple[str, ...] = ("defaultEngine", "providers", "agents")
REQUIRED_PROVIDER_PROPS: Tuple[str, ...] = ("apiKeyEnv", "model", "endpoint")


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def is_valid_url(url: Any) -> bool:
    if not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def _resolve(path: str, base_dir: Optional[Path]) -> Path:
    candidate = Path(path)
    if base_dir is not None and not candidate.is_absolute():
        return base_dir / candidate
    return candidate


def validate_provider_config(name: str, config: Any) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(config, Mapping):
        result.errors.append(f'Provider "{name}": Configuration must be an object')
        return result

    for prop in REQUIRED_PROVIDER_PROPS:
        if not config.get(prop):
            result.errors.append(f'Provider "{name}": Missing required property "{prop}"')

    for prop in ("apiKeyEnv", "endpoint"):
        value = config.get(prop)
        if value and not isinstance(value, str):
            result.errors.append(f'Provider "{name}": Property "{prop}" must be a string')

    api_key_env = config.get("apiKeyEnv")
    if isinstance(api_key_env, str) and api_key_env and not os.environ.get(api_key_env):
        result.warnings.append(
            f'Provider "{name}": Environment variable "{api_key_env}" not set'
        )

    endpoint = config.get("endpoint")
    if isinstance(endpoint, str) and endpoint and not is_valid_url(endpoint):
        result.errors.append(f'Provider "{name}": Invalid endpoint URL format')

    return result


def validate_agent_definition(
    name: str, config: Any, base_dir: Optional[Path] = None
) -> ValidationResult:
    result = ValidationResult()
    if not isinstance(config, Mapping):
        result.errors.append(f'Agent "{name}": Configuration must be an object')
        return result

    prompt_file = config.get("promptFile")
    if prompt_file and not isinstance(prompt_file, str):
        result.errors.append(f'Agent "{name}": Property "promptFile" must be a string')
    elif prompt_file:
        if not _resolve(prompt_file, base_dir).is_file():
            result.errors.append(f'Agent "{name}": Prompt file not found: {prompt_file}')
    else:
        result.errors.append(f'Agent "{name}": Missing promptFile property')

    if config.get("enabled") is False:
        result.warnings.append(f'Agent "{name}": Currently disabled')

    return result


def validate_system_config(
    config: Any, base_dir: Optional[Union[str, Path]] = None
) -> ValidationResult:
    """Checks the structure and consistency of the raw system config mapping.

    :param config: The parsed ``agent.config.jsonc`` document.
    :param base_dir: Directory that relative prompt paths are resolved from;
        the working directory when omitted.
    :return: Every error and warning found.
    """
    result = ValidationResult()
    base = Path(base_dir) if base_dir is not None else None

    if not isinstance(config, Mapping):
        result.errors.append("Configuration must be an object")
        return result

    for prop in REQUIRED_SECTIONS:
        if not config.get(prop):
            result.errors.append(f"Missing required property: {prop}")

    providers = config.get("providers")
    if isinstance(providers, Mapping):
        for provider_name, provider_config in providers.items():
            result.merge(validate_provider_config(provider_name, provider_config))
    elif providers:
        result.errors.append("Property providers must be an object")

    agents = config.get("agents")
    if isinstance(agents, Mapping):
        for agent_name, agent_config in agents.items():
            result.merge(validate_agent_definition(agent_name, agent_config, base))
    elif agents:
        result.errors.append("Property agents must be an object")

    default_engine = config.get("defaultEngine")
    if default_engine and not isinstance(default_engine, str):
        result.errors.append("Property defaultEngine must be a string")
    elif default_engine and isinstance(providers, Mapping):
        if default_engine not in providers:
            result.errors.append(f'Default engine "{default_engine}" not found in providers')

    return result


def validate_environment(
    base_dir: Optional[Union[str, Path]] = None,
    min_version: Tuple[int, int] = MIN_PYTHON,
    required_dirs: Sequence[str] = REQUIRED_DIRS,
) -> ValidationResult:
    """Checks the interpreter version and the project directory layout."""
    result = ValidationResult()
    base = Path(base_dir) if base_dir is not None else Path.cwd()

    if tuple(sys.version_info[:2]) < tuple(min_version):
        found = ".".join(str(part) for part in sys.version_info[:3])
        required = ".".join(str(part) for part in min_version)
        result.errors.append(
            f"Python version {found} is not supported. Minimum required: {required}"
        )

    for directory in required_dirs:
        if not (base / directory).is_dir():
            result.errors.append(f"Required directory not found: {directory}")

    return result


def validate_setup(config: Any, base_dir: Optional[Union[str, Path]] = None) -> bool:
    """Runs both pre-flight checks, logs every finding and returns the verdict.

    :return: True only when neither check reported an error.
    """
    logger.info("Validating configuration and environment...")

    env_result = validate_environment(base_dir)
    config_result = validate_system_config(config, base_dir)

    for error in env_result.errors + config_result.errors:
        logger.error(error)
    for warning in env_result.warnings + config_result.warnings:
        logger.warning(warning)

    is_valid = env_result.is_valid and config_result.is_valid
    if is_valid:
        logger.info("Configuration validation passed")
    else:
        logger.error("Configuration validation failed")
    return is_valid
