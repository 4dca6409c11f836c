# smith/context.py
"""
The run context: the explicitly constructed state shared by one Smith
invocation, in place of module-level singletons.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from smith.schemas.settings import Settings, get_settings
from smith.utils.metrics import MetricsCollector


@dataclass
class SmithContext:
    """Holds the settings, the metrics collector and the base directory that
    relative config, schema and prompt paths are resolved from.
    """

    settings: Settings
    metrics: MetricsCollector
    base_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, base_dir: Optional[Path] = None
    ) -> "SmithContext":
        settings = settings or get_settings()
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        metrics_dir = settings.metrics_dir
        if not metrics_dir.is_absolute():
            metrics_dir = base / metrics_dir
        return cls(settings=settings, metrics=MetricsCollector(metrics_dir), base_dir=base)

    def resolve(self, path: Path) -> Path:
        """Resolves `path` against `base_dir` unless it is already absolute."""
        path = Path(path)
        return path if path.is_absolute() else self.base_dir / path
