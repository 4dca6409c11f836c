# smith/tests/conftest.py
"""
Shared fixtures: an on-disk Smith workspace with a config, a task schema, an
agent prompt and a project root holding one source file.
"""
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from smith.context import SmithContext
from smith.scaffold import TASK_SCHEMA
from smith.schemas.settings import Settings


def write_jsonc(path: Path, data, comment: str = "generated by tests") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"// {comment}\n{json.dumps(data, indent=2)}\n", encoding="utf-8")
    return path


def base_config() -> dict:
    return {
        "defaultEngine": "openai",
        "providers": {
            "openai": {
                "apiKeyEnv": "SMITH_TEST_OPENAI_KEY",
                "model": "gpt-4o",
                "endpoint": "https://api.openai.com/v1/chat/completions",
            }
        },
        "agents": {
            "codeArchitect": {
                "enabled": True,
                "promptFile": "agents/code-architect/prompt.md",
            },
            "sleepyAgent": {
                "enabled": False,
                "promptFile": "agents/code-architect/prompt.md",
            },
        },
    }


def base_task() -> dict:
    return {
        "agent": "codeArchitect",
        "sourceFile": "src/a.ts",
        "outputFile": "out/a.out.ts",
        "context": "A small TypeScript project.",
        "constraints": ["Keep the public API"],
    }


@pytest.fixture
def config_data() -> dict:
    return base_config()


@pytest.fixture
def task_data() -> dict:
    return base_task()


@pytest.fixture
def jsonc_writer():
    return write_jsonc


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch):
    """A complete Smith workspace; the working directory is its base."""
    base = tmp_path / "smith"
    for d in ("config", "agents/code-architect", "tasks", "schemas"):
        (base / d).mkdir(parents=True)
    (base / "agents/code-architect/prompt.md").write_text(
        "Refactor the code for clarity.", encoding="utf-8"
    )
    config_path = write_jsonc(base / "config/agent.config.jsonc", base_config())
    task_path = write_jsonc(base / "tasks/task-001.jsonc", base_task())
    schema_path = base / "schemas/task.schema.json"
    schema_path.write_text(json.dumps(TASK_SCHEMA), encoding="utf-8")

    project = tmp_path / "project"
    (project / "src").mkdir(parents=True)
    (project / "src/a.ts").write_text("export const a = 1;\n", encoding="utf-8")

    monkeypatch.chdir(base)
    monkeypatch.setenv("SMITH_TEST_OPENAI_KEY", "sk-test")

    settings = Settings(_env_file=None, log_dir=base / "logs", metrics_dir=base / "logs/metrics")
    context = SmithContext.from_settings(settings, base_dir=base)
    return SimpleNamespace(
        base=base,
        project=project,
        config_path=config_path,
        task_path=task_path,
        schema_path=schema_path,
        settings=settings,
        context=context,
    )


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, milliseconds: float) -> None:
        self.now = self.now + timedelta(milliseconds=milliseconds)


@pytest.fixture
def fake_clock(monkeypatch) -> FakeClock:
    clock = FakeClock(datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc))
    monkeypatch.setattr("smith.utils.metrics.utcnow", clock)
    return clock
