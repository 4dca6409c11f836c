# smith/cli.py
"""
Command-line interface (CLI) for the Smith framework.

This module provides the commands for running a task against a project,
inspecting run metrics, validating configuration and scaffolding a new
Smith workspace. It uses Typer for argument parsing and Rich for output.
"""

import asyncio
import datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

from smith.context import SmithContext
from smith.exceptions import SmithError
from smith.orchestrator import Orchestrator
from smith.providers.registry import list_available_providers
from smith.scaffold import init_project
from smith.schemas.settings import get_settings
from smith.utils.files import read_jsonc
from smith.utils.logger import configure_logging, setup_logger
from smith.utils.metrics import NO_METRICS_MESSAGE
from smith.utils.setup_validator import validate_setup

app = typer.Typer(
    name="smith",
    help="AI agent framework for code architecture and development.",
    add_completion=False,
)
console = Console()
logger = setup_logger(__name__)


@app.callback()
def main_callback() -> None:
    """Smith command-line interface."""
    # Provider API keys are read from the process environment.
    load_dotenv()


def _log_level(verbose: bool, debug: bool) -> str:
    if debug:
        return "debug"
    if verbose:
        return "info"
    return get_settings().log_level


@app.command(name="run")
def run_task(
    project_root: Annotated[
        Path, typer.Option("--project-root", "-p", help="Project root directory.")
    ],
    task: Annotated[
        Optional[Path], typer.Option("--task", "-t", help="Task file to execute.")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
    debug: Annotated[bool, typer.Option("--debug", "-d", help="Enable debug logging.")] = False,
) -> None:
    """
    Executes a task against the given project root.
    """
    settings = get_settings()
    context = SmithContext.from_settings(settings)
    configure_logging(_log_level(verbose, debug), context.resolve(settings.log_dir))

    if not project_root.is_dir():
        logger.error(f"Project root directory not found: {project_root}")
        console.print(f"[bold red]Error:[/bold red] Project root directory not found: {project_root}")
        raise typer.Exit(code=1)

    orchestrator = Orchestrator(context, project_root, task)
    try:
        result = asyncio.run(orchestrator.run())
    except SmithError as e:
        console.print(f"\n[bold red]TASK FAILED:[/bold red] {e.__class__.__name__}: {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        logger.exception("Failed to execute task")
        console.print(f"\n[bold red]UNEXPECTED FATAL ERROR:[/bold red] {e}")
        raise typer.Exit(code=1)

    if result.degraded:
        console.print(
            f"[yellow]Task finished with a placeholder response:[/yellow] {result.output_path}"
        )
    else:
        console.print(f"[bold green]Task completed:[/bold green] {result.output_path}")


@app.command(name="metrics")
def show_metrics(
    report: Annotated[bool, typer.Option("--report", "-r", help="Generate detailed report.")] = False,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Show metrics for a specific date (YYYY-MM-DD)."),
    ] = None,
) -> None:
    """
    Displays metrics and analytics.
    """
    metrics = SmithContext.from_settings().metrics

    if report:
        console.print(metrics.generate_report(), markup=False)
        return

    if date:
        try:
            day = datetime.date.fromisoformat(date)
        except ValueError:
            console.print(f"[bold red]Error:[/bold red] Invalid date, expected YYYY-MM-DD: {date}")
            raise typer.Exit(code=1)
        tasks = metrics.get_task_metrics(day)
        table = Table(title=f"Tasks executed on {date}")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Agent", style="magenta")
        table.add_column("Provider")
        table.add_column("Success")
        table.add_column("Duration", justify="right")
        table.add_column("Response Length", justify="right")
        for t in tasks:
            duration = f"{t.duration / 1000:.2f}s" if t.duration is not None else "N/A"
            table.add_row(
                t.task_id,
                t.agent_id,
                t.provider_name,
                "✅" if t.success else "❌",
                duration,
                str(t.response_length),
            )
        console.print(table)
        return

    system_metrics = metrics.get_system_metrics()
    if system_metrics is None:
        console.print(NO_METRICS_MESSAGE)
        return
    console.print("📊 Smith Framework Metrics:")
    console.print(f"Total Tasks: {system_metrics.total_tasks}")
    console.print(f"Success Rate: {system_metrics.success_rate:.2f}%")
    console.print(f"Average Duration: {system_metrics.average_duration / 1000:.2f}s")
    console.print(f"Total Tokens: {system_metrics.total_tokens_used}")


@app.command(name="validate")
def validate_config(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file to validate."),
    ] = None,
) -> None:
    """
    Validates configuration and environment.
    """
    config_path = config or get_settings().config_path
    try:
        raw_config = read_jsonc(config_path)
    except SmithError as e:
        console.print(f"[bold red]❌ Validation failed:[/bold red] {e}")
        raise typer.Exit(code=1)

    if validate_setup(raw_config):
        console.print("[bold green]✅ Configuration validation passed[/bold green]")
        return
    console.print("[bold red]❌ Configuration validation failed[/bold red]")
    raise typer.Exit(code=1)


@app.command(name="init")
def init(
    directory: Annotated[
        Path, typer.Option("--directory", "-d", help="Target directory.")
    ] = Path("."),
) -> None:
    """
    Initializes a new Smith project.
    """
    created = init_project(directory)
    for path in created:
        console.print(f"  [green]created[/green] {path}")
    console.print("[bold green]✅ Smith project initialized successfully![/bold green]")
    console.print("Next steps:")
    console.print("1. Configure your API keys in environment variables")
    console.print("2. Edit the agent prompt files in agents/")
    console.print("3. Define your tasks in tasks/")
    console.print("4. Run: smith run -p /path/to/your/project -t tasks/task-example.jsonc")


@app.command(name="providers")
def list_providers() -> None:
    """
    Lists the registered LLM providers.
    """
    table = Table(title="Registered LLM Providers")
    table.add_column("Name", style="cyan", no_wrap=True)
    for name in list_available_providers():
        table.add_row(name)
    console.print(table)
