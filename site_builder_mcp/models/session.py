from typing import Literal

from pydantic import BaseModel, Field

from site_builder_mcp.core.interfaces import ChatMessage
from site_builder_mcp.models.steps import Step, StepStatus
from site_builder_mcp.models.tree import ProjectTree

TemplateId = Literal["node", "react"]


class ProjectSession(BaseModel):
    """Stores the project state for a single conversation."""

    project_id: str = "default"
    template: TemplateId | None = None
    tree: ProjectTree = Field(default_factory=ProjectTree)
    # Durable log of every parsed step, kept after the steps are folded.
    steps: list[Step] = Field(default_factory=list)
    messages: list[ChatMessage] = Field(default_factory=list)
    next_step_id: int = 0

    def steps_with_status(self, status: StepStatus | None = None) -> list[Step]:
        if status is None:
            return list(self.steps)
        return [step for step in self.steps if step.status == status]
