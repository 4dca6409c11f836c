# smith/utils/prompt.py
"""
Assembles the final prompt sent to a provider.

The layout is fixed: a project-context block, the agent's instructions and
the source file in a fenced code block.
"""
from pathlib import Path
from typing import Optional, Union

NO_CONTEXT = "(no additional context)"

# File extension -> code fence language tag.
FENCE_LANGUAGES = {
    ".ts": "ts",
    ".tsx": "tsx",
    ".js": "js",
    ".jsx": "jsx",
    ".py": "python",
    ".java": "java",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".cs": "csharp",
    ".json": "json",
    ".md": "markdown",
}


def fence_language(source_path: Union[str, Path]) -> str:
    return FENCE_LANGUAGES.get(Path(source_path).suffix.lower(), "")


def build_prompt(
    agent_id: str,
    prompt_template: str,
    source_code: str,
    context: Optional[str] = None,
    source_path: Union[str, Path] = "",
) -> str:
    """Renders the prompt for one task.

    :param agent_id: Name of the agent, quoted in the instructions header.
    :param prompt_template: Raw text of the agent's prompt file.
    :param source_code: Raw text of the task's source file.
    :param context: The task's free-text context, if any.
    :param source_path: Used only to pick the code fence language.
    :return: The assembled prompt.
    """
    language = fence_language(source_path) if source_path else ""
    return (
        "=== PROJECT CONTEXT ===\n"
        f"{context or NO_CONTEXT}\n"
        "\n"
        f'=== INSTRUCTIONS FOR AGENT "{agent_id}" ===\n'
        f"{prompt_template}\n"
        "\n"
        "=== SOURCE CODE ===\n"
        f"```{language}\n"
        f"{source_code}\n"
        "```\n"
    )
