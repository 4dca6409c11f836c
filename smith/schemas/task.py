# smith/schemas/task.py
"""
Pydantic schema for a declarative task document.

This module contains the `TaskDescription` model: one unit of work naming the
agent to run, the project file to feed it and where the response goes.
"""
from typing import List, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from smith.schemas.config import CamelModel


class TaskDescription(CamelModel):
    """Represents a task loaded from a ``tasks/*.jsonc`` document.

    Instances are frozen once loaded and live for one orchestration run.

    :ivar agent: Key of the agent in the system config.
    :vartype agent: str
    :ivar source_file: Source path, relative to the project root.
    :vartype source_file: str
    :ivar output_file: Destination path, relative to the project root.
    :vartype output_file: str
    :ivar context: Free-text project context placed at the top of the prompt.
    :vartype context: Optional[str]
    :ivar constraints: Ordered list of constraints for the agent.
    :vartype constraints: List[str]
    :ivar objective: Short statement of what the task should achieve.
    :vartype objective: Optional[str]
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    agent: str = Field(..., min_length=1)
    source_file: str = Field(..., min_length=1)
    output_file: str = Field(..., min_length=1)
    context: Optional[str] = None
    constraints: List[str] = Field(default_factory=list)
    objective: Optional[str] = None
