# smith/scaffold.py
"""
Project scaffolding for ``smith init``.

Creates the directory layout the environment check expects and writes
starter documents. Existing files are never overwritten.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Union

from smith.utils.logger import setup_logger

logger = setup_logger(__name__)

AGENT_DIRS = {
    "codeArchitect": "code-architect",
    "scraperEngineer": "scraper-engineer",
    "autoUpdater": "auto-updater",
}

DIRECTORIES = [
    *(f"agents/{d}" for d in AGENT_DIRS.values()),
    "config",
    "tasks",
    "schemas",
    "logs",
    "outputs",
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "defaultEngine": "openai",
    "providers": {
        "openai": {
            "apiKeyEnv": "OPENAI_API_KEY",
            "model": "gpt-4o",
            "endpoint": "https://api.openai.com/v1/chat/completions",
        },
        "gemini": {
            "apiKeyEnv": "GEMINI_API_KEY",
            "model": "gemini-1.5-pro",
            "endpoint": "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-pro:generateContent",
        },
    },
    "agents": {
        "codeArchitect": {"enabled": True, "promptFile": "agents/code-architect/prompt.md"},
        "scraperEngineer": {
            "enabled": False,
            "promptFile": "agents/scraper-engineer/prompt.md",
        },
        "autoUpdater": {
            "enabled": False,
            "promptFile": "agents/auto-updater/prompt.md",
            "engine": "gemini",
        },
    },
}

TASK_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Smith task",
    "type": "object",
    "required": ["agent", "sourceFile", "outputFile"],
    "properties": {
        "agent": {"type": "string", "minLength": 1},
        "objective": {"type": "string"},
        "sourceFile": {"type": "string", "minLength": 1},
        "outputFile": {"type": "string", "minLength": 1},
        "context": {"type": "string"},
        "constraints": {"type": "array", "items": {"type": "string"}},
        "createdAt": {"type": "string", "format": "date-time"},
        "reference": {"type": "string", "format": "uri"},
    },
    "additionalProperties": False,
}

EXAMPLE_TASK: Dict[str, Any] = {
    "agent": "codeArchitect",
    "objective": "Example task objective",
    "sourceFile": "src/example.ts",
    "outputFile": "src/example.improved.ts",
    "constraints": ["Maintain functionality"],
    "context": "Example context",
}

PROMPTS = {
    "codeArchitect": "You are a senior software architect. Review the source code and return an improved version.\n",
    "scraperEngineer": "You are a web scraping engineer. Return a robust scraper for the given source.\n",
    "autoUpdater": "You keep code current. Update deprecated APIs in the given source.\n",
}


def _jsonc(data: Dict[str, Any], header: str) -> str:
    return f"// {header}\n{json.dumps(data, indent=2)}\n"


def scaffold_files() -> Dict[str, str]:
    files = {
        "config/agent.config.jsonc": _jsonc(DEFAULT_CONFIG, "Smith agent configuration"),
        "schemas/task.schema.json": json.dumps(TASK_SCHEMA, indent=2) + "\n",
        "tasks/task-example.jsonc": _jsonc(EXAMPLE_TASK, "Example task"),
    }
    for agent, directory in AGENT_DIRS.items():
        files[f"agents/{directory}/prompt.md"] = PROMPTS[agent]
    return files


def init_project(directory: Union[str, Path] = ".") -> List[Path]:
    """Creates the Smith layout under `directory`.

    :return: Every directory and file that was created.
    """
    target = Path(directory).resolve()
    logger.info(f"Initializing Smith project in: {target}")
    created: List[Path] = []

    for name in DIRECTORIES:
        path = target / name
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            created.append(path)
            logger.info(f"Created directory: {name}")

    for name, content in scaffold_files().items():
        path = target / name
        if path.exists():
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        created.append(path)
        logger.info(f"Created file: {name}")

    return created
