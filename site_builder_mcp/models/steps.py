from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

StepStatus = Literal["pending", "completed"]


class StepKind(str, Enum):
    """The closed set of step kinds an artifact can describe."""

    CREATE_FILE = "CreateFile"
    RUN_COMMAND = "RunCommand"
    CREATE_FOLDER = "CreateFolder"


class Step(BaseModel):
    """A single unit of work extracted from model output."""

    id: int
    kind: StepKind
    title: str = ""
    description: str | None = None
    path: str | None = None
    content: str = ""
    status: StepStatus = "pending"

    def completed(self) -> "Step":
        """Returns a copy of this step marked as completed."""
        return self.model_copy(update={"status": "completed"})


class ParsedArtifact(BaseModel):
    """The result of scanning one artifact block."""

    artifact_id: str | None = None
    title: str | None = None
    steps: list[Step] = Field(default_factory=list)
    # Set when the artifact or its last action was cut off mid-stream.
    truncated: bool = False
