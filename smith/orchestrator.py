# smith/orchestrator.py
"""
The orchestration driver: runs one task from documents on disk to a written
output file and a metrics record.

A run walks a fixed sequence of `RunState`s. Any failure moves it to
`RunState.FAILED`, closes the in-flight metrics record (if one was opened)
with ``success=False`` and re-raises, leaving the exit status to the caller.
"""
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from smith.context import SmithContext
from smith.exceptions import (
    ConfigError,
    DispatchError,
    NotFoundError,
    UnknownProviderError,
)
from smith.providers.base import DISPATCH_ERROR_SENTINEL
from smith.providers.registry import ProviderFactory, get_llm_provider
from smith.schemas.config import AgentConfig, SystemConfig
from smith.schemas.task import TaskDescription
from smith.utils.files import parse_system_config, parse_task, read_jsonc
from smith.utils.log_sinks import task_id_context
from smith.utils.logger import setup_logger
from smith.utils.prompt import build_prompt
from smith.utils.schema_validator import validate_task_schema
from smith.utils.setup_validator import validate_setup

logger = setup_logger(__name__)


class RunState(str, Enum):
    INIT = "init"
    CONFIG_LOADED = "config_loaded"
    VALIDATED = "validated"
    TASK_LOADED = "task_loaded"
    SCHEMA_VALIDATED = "schema_validated"
    AGENT_RESOLVED = "agent_resolved"
    PROVIDER_RESOLVED = "provider_resolved"
    PROMPT_ASSEMBLED = "prompt_assembled"
    DISPATCHED = "dispatched"
    METRICS_RECORDED = "metrics_recorded"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class RunResult:
    task_id: str
    agent: str
    provider: str
    output_path: Path
    response_length: int
    degraded: bool = False


class Orchestrator:
    """Drives a single task run.

    :param context: Settings, metrics collector and base directory.
    :param project_root: Directory the task's source/output paths resolve against.
    :param task_path: Task document; defaults to ``settings.task_path``.
    :param provider_factory: Builds the backend; `get_llm_provider` by default.
    """

    def __init__(
        self,
        context: SmithContext,
        project_root: Union[str, Path],
        task_path: Optional[Union[str, Path]] = None,
        provider_factory: ProviderFactory = get_llm_provider,
    ):
        self.context = context
        self.settings = context.settings
        self.metrics = context.metrics
        self.project_root = Path(project_root)
        self.task_path = context.resolve(Path(task_path or self.settings.task_path))
        self.provider_factory = provider_factory
        self.state = RunState.INIT
        self.history: List[RunState] = [RunState.INIT]

    def _advance(self, state: RunState) -> None:
        logger.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    async def run(self) -> RunResult:
        try:
            return await self._run()
        except Exception as e:
            self._advance(RunState.FAILED)
            self.metrics.complete_task(False, 0, str(e) or e.__class__.__name__)
            logger.error(f"Orchestrator execution failed: {e}", extra={"error_type": e.__class__.__name__})
            raise
        finally:
            task_id_context.set(None)

    async def _run(self) -> RunResult:
        logger.info("Starting Smith orchestrator...")
        if not self.project_root.is_dir():
            raise NotFoundError(f"Invalid project root path: {self.project_root}")

        raw_config = read_jsonc(self.context.resolve(self.settings.config_path))
        self._advance(RunState.CONFIG_LOADED)

        if not validate_setup(raw_config, self.context.base_dir):
            raise ConfigError("Configuration validation failed")
        config = parse_system_config(raw_config, self.settings.config_path)
        self._advance(RunState.VALIDATED)

        raw_task = read_jsonc(self.task_path)
        self._advance(RunState.TASK_LOADED)

        validate_task_schema(raw_task, self.context.resolve(self.settings.schema_path))
        task = parse_task(raw_task, self.task_path)
        self._advance(RunState.SCHEMA_VALIDATED)

        agent = self._resolve_agent(config, task)
        prompt_path = self.context.resolve(Path(agent.prompt_file))
        source_path = (self.project_root / task.source_file).resolve()
        output_path = (self.project_root / task.output_file).resolve()
        if not source_path.is_file():
            raise NotFoundError(f"Source file not found: {source_path}")
        self._advance(RunState.AGENT_RESOLVED)

        provider_name = config.provider_for(agent)
        provider_config = config.providers.get(provider_name)
        if provider_config is None:
            raise UnknownProviderError(
                f"Provider configuration not found: {provider_name}", list(config.providers)
            )
        logger.info(f"Using LLM provider: {provider_name}")
        self._advance(RunState.PROVIDER_RESOLVED)

        task_id = f"{task.agent}-{int(time.time() * 1000)}"
        task_id_context.set(task_id)
        self.metrics.start_task(task_id, task.agent, provider_name, source_path, output_path)

        logger.info(
            "Loading prompt and source code...",
            extra={"agent_id": task.agent, "prompt_path": str(prompt_path), "source_path": str(source_path)},
        )
        prompt = build_prompt(
            agent_id=task.agent,
            prompt_template=prompt_path.read_text(encoding="utf-8"),
            source_code=source_path.read_text(encoding="utf-8"),
            context=task.context,
            source_path=source_path,
        )
        self._advance(RunState.PROMPT_ASSEMBLED)

        provider = self.provider_factory(
            provider_name, provider_config, timeout=self.settings.request_timeout
        )
        logger.info("Generating LLM response...")
        degraded_error: Optional[DispatchError] = None
        try:
            response = await provider.generate_response(prompt)
        except DispatchError as e:
            if not self.settings.degrade_on_dispatch_error:
                raise
            logger.warning(f"Dispatch failed, writing placeholder response: {e}")
            response = DISPATCH_ERROR_SENTINEL
            degraded_error = e
        self._advance(RunState.DISPATCHED)

        usage = getattr(provider, "last_usage", None)
        if usage is not None:
            self.metrics.update_token_usage(usage.prompt_tokens, usage.response_tokens)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(response, encoding="utf-8")

        if degraded_error is None:
            self.metrics.complete_task(True, len(response))
        else:
            self.metrics.complete_task(False, len(response), str(degraded_error))
        self._advance(RunState.METRICS_RECORDED)

        logger.info(
            "Task completed successfully",
            extra={"output_file": str(output_path), "response_length": len(response)},
        )
        self._advance(RunState.DONE)
        return RunResult(
            task_id=task_id,
            agent=task.agent,
            provider=provider_name,
            output_path=output_path,
            response_length=len(response),
            degraded=degraded_error is not None,
        )

    def _resolve_agent(self, config: SystemConfig, task: TaskDescription) -> AgentConfig:
        agent = config.agents.get(task.agent)
        if agent is None:
            raise ConfigError(f'Agent "{task.agent}" is not defined in configuration')
        if not agent.enabled:
            raise ConfigError(f'Agent "{task.agent}" is not enabled in configuration')

        prompt_path = self.context.resolve(Path(agent.prompt_file))
        if not prompt_path.is_file():
            raise NotFoundError(f"Prompt file not found: {agent.prompt_file}")
        return agent
