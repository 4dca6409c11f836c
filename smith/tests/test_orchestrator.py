# smith/tests/test_orchestrator.py
"""
End-to-end tests for a single orchestrated task run, with the backend
replaced by an in-process fake.
"""
import pytest

from smith.context import SmithContext
from smith.exceptions import (
    ConfigError,
    DispatchError,
    NotFoundError,
    ProviderInitError,
    SchemaValidationError,
    UnknownProviderError,
)
from smith.orchestrator import Orchestrator, RunState
from smith.providers.base import DISPATCH_ERROR_SENTINEL, TokenUsage
from smith.schemas.settings import Settings

DAY = "2026-03-14"


class FakeProvider:
    def __init__(self, response="refactored code", error=None, usage=None):
        self.response = response
        self.error = error
        self.last_usage = usage
        self.prompts = []

    async def generate_response(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


class FakeFactory:
    def __init__(self, provider):
        self.provider = provider
        self.calls = []

    def __call__(self, name, config, **kwargs):
        self.calls.append((name, config, kwargs))
        return self.provider


@pytest.fixture
def factory():
    return FakeFactory(FakeProvider(usage=TokenUsage(prompt_tokens=30, response_tokens=12)))


def _orchestrator(workspace, factory, **kwargs):
    return Orchestrator(workspace.context, workspace.project, provider_factory=factory, **kwargs)


@pytest.mark.asyncio
async def test_successful_run_writes_output_and_metrics(workspace, factory, fake_clock):
    orchestrator = _orchestrator(workspace, factory)

    result = await orchestrator.run()

    output = workspace.project / "out/a.out.ts"
    assert output.read_text() == "refactored code"
    assert result.output_path == output.resolve()
    assert result.agent == "codeArchitect"
    assert result.provider == "openai"
    assert result.response_length == len("refactored code")
    assert not result.degraded
    assert result.task_id.startswith("codeArchitect-")

    assert orchestrator.state is RunState.DONE
    assert orchestrator.history[-3:] == [RunState.DISPATCHED, RunState.METRICS_RECORDED, RunState.DONE]

    name, config, kwargs = factory.calls[0]
    assert name == "openai"
    assert config.model == "gpt-4o"
    assert kwargs == {"timeout": None}

    prompt = factory.provider.prompts[0]
    assert "A small TypeScript project." in prompt
    assert "Refactor the code for clarity." in prompt
    assert "export const a = 1;" in prompt

    tasks = workspace.context.metrics.get_task_metrics(DAY)
    assert len(tasks) == 1
    assert tasks[0].success is True
    assert tasks[0].task_id == result.task_id
    assert (tasks[0].prompt_tokens, tasks[0].response_tokens) == (30, 12)
    system = workspace.context.metrics.get_system_metrics()
    assert system.total_tasks == 1
    assert system.total_tokens_used == 42


@pytest.mark.asyncio
async def test_agent_engine_overrides_default(workspace, factory, config_data, jsonc_writer):
    config_data["providers"]["gemini"] = dict(config_data["providers"]["openai"], model="gemini-pro")
    config_data["agents"]["codeArchitect"]["engine"] = " Gemini "
    jsonc_writer(workspace.config_path, config_data)

    result = await _orchestrator(workspace, factory).run()

    assert result.provider == "gemini"
    assert factory.calls[0][1].model == "gemini-pro"


@pytest.mark.asyncio
async def test_schema_failure_stops_before_dispatch(workspace, factory, task_data, jsonc_writer, fake_clock):
    del task_data["sourceFile"]
    jsonc_writer(workspace.task_path, task_data)
    orchestrator = _orchestrator(workspace, factory)

    with pytest.raises(SchemaValidationError):
        await orchestrator.run()

    assert orchestrator.state is RunState.FAILED
    assert factory.calls == []
    assert workspace.context.metrics.get_task_metrics(DAY) == []
    assert workspace.context.metrics.get_system_metrics() is None


@pytest.mark.asyncio
async def test_disabled_agent_is_rejected(workspace, factory, task_data, jsonc_writer):
    task_data["agent"] = "sleepyAgent"
    jsonc_writer(workspace.task_path, task_data)

    with pytest.raises(ConfigError, match="not enabled"):
        await _orchestrator(workspace, factory).run()
    assert factory.calls == []


@pytest.mark.asyncio
async def test_undefined_agent_is_rejected(workspace, factory, task_data, jsonc_writer):
    task_data["agent"] = "ghost"
    jsonc_writer(workspace.task_path, task_data)

    with pytest.raises(ConfigError, match="not defined"):
        await _orchestrator(workspace, factory).run()


@pytest.mark.asyncio
async def test_missing_source_file(workspace, factory):
    (workspace.project / "src/a.ts").unlink()

    with pytest.raises(NotFoundError, match="Source file not found"):
        await _orchestrator(workspace, factory).run()
    assert factory.calls == []


@pytest.mark.asyncio
async def test_invalid_project_root(workspace, factory):
    orchestrator = Orchestrator(workspace.context, workspace.base / "nope", provider_factory=factory)
    with pytest.raises(NotFoundError, match="Invalid project root"):
        await orchestrator.run()


@pytest.mark.asyncio
async def test_invalid_setup_fails_run(workspace, factory, config_data, jsonc_writer):
    config_data["defaultEngine"] = "missing"
    jsonc_writer(workspace.config_path, config_data)

    with pytest.raises(ConfigError, match="Configuration validation failed"):
        await _orchestrator(workspace, factory).run()


@pytest.mark.asyncio
async def test_agent_engine_without_provider_entry(workspace, factory, config_data, jsonc_writer):
    config_data["agents"]["codeArchitect"]["engine"] = "gemini"
    jsonc_writer(workspace.config_path, config_data)

    with pytest.raises(UnknownProviderError, match="Provider configuration not found: gemini"):
        await _orchestrator(workspace, factory).run()


@pytest.mark.asyncio
async def test_missing_api_key_records_failed_task(workspace, monkeypatch, fake_clock):
    monkeypatch.delenv("SMITH_TEST_OPENAI_KEY")
    orchestrator = Orchestrator(workspace.context, workspace.project)

    with pytest.raises(ProviderInitError):
        await orchestrator.run()

    tasks = workspace.context.metrics.get_task_metrics(DAY)
    assert len(tasks) == 1
    assert tasks[0].success is False
    assert "SMITH_TEST_OPENAI_KEY" in tasks[0].error_message
    assert workspace.context.metrics.get_system_metrics().failed_tasks == 1
    assert not (workspace.project / "out/a.out.ts").exists()


@pytest.mark.asyncio
async def test_dispatch_error_propagates_by_default(workspace, fake_clock):
    factory = FakeFactory(FakeProvider(error=DispatchError("HTTP 500", "openai")))

    with pytest.raises(DispatchError):
        await _orchestrator(workspace, factory).run()

    assert not (workspace.project / "out/a.out.ts").exists()
    tasks = workspace.context.metrics.get_task_metrics(DAY)
    assert [t.success for t in tasks] == [False]
    assert tasks[0].error_message == "HTTP 500"


@pytest.mark.asyncio
async def test_dispatch_error_degrades_when_enabled(workspace, fake_clock):
    settings = Settings(
        _env_file=None,
        metrics_dir=workspace.settings.metrics_dir,
        degrade_on_dispatch_error=True,
        request_timeout=5,
    )
    context = SmithContext.from_settings(settings, base_dir=workspace.base)
    factory = FakeFactory(FakeProvider(error=DispatchError("HTTP 500", "openai")))

    result = await Orchestrator(context, workspace.project, provider_factory=factory).run()

    assert result.degraded
    assert (workspace.project / "out/a.out.ts").read_text() == DISPATCH_ERROR_SENTINEL
    assert factory.calls[0][2] == {"timeout": 5}
    tasks = context.metrics.get_task_metrics(DAY)
    assert len(tasks) == 1
    assert tasks[0].success is False
    assert tasks[0].response_length == len(DISPATCH_ERROR_SENTINEL)


@pytest.mark.asyncio
async def test_explicit_task_path(workspace, factory, task_data, jsonc_writer):
    task_data["outputFile"] = "out/other.ts"
    other = jsonc_writer(workspace.base / "tasks/task-002.jsonc", task_data)

    result = await _orchestrator(workspace, factory, task_path=other).run()

    assert result.output_path.name == "other.ts"
    assert (workspace.project / "out/other.ts").exists()


@pytest.mark.asyncio
async def test_mistyped_config_fails_validation(workspace, factory, config_data, jsonc_writer):
    config_data["defaultEngine"] = ["openai"]
    config_data["providers"]["openai"]["apiKeyEnv"] = 5
    jsonc_writer(workspace.config_path, config_data)
    orchestrator = _orchestrator(workspace, factory)

    with pytest.raises(ConfigError, match="Configuration validation failed"):
        await orchestrator.run()
    assert orchestrator.state is RunState.FAILED
    assert factory.calls == []
