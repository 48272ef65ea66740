# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Tool for applying model artifacts to a project."""

import logging
from typing_extensions import override

from site_builder_mcp.core.artifact_parser import parse_artifact_document
from site_builder_mcp.core.project_tree import FoldResult
from site_builder_mcp.core.workspace import ingest_artifact, start_project
from site_builder_mcp.models.session import ProjectSession
from site_builder_mcp.prompts.templates import TEMPLATES
from site_builder_mcp.tools.base import ToolCallArguments, ToolError, ToolExecResult, ToolParameter
from site_builder_mcp.tools.base_project_tool import BaseProjectTool
from site_builder_mcp.tools.utils.formatting_utils import format_errors, format_steps

# Настройка логирования
logger = logging.getLogger(__name__)

ArtifactToolCommands = ["apply", "preview", "start", "steps"]


class ArtifactTool(BaseProjectTool):
    """Tool to turn model artifacts into steps and fold them into the project tree."""

    @override
    def get_name(self) -> str:
        return "artifact"

    @override
    def get_description(self) -> str:
        return """Tool for applying model artifacts to the in-memory project
* `apply`: parse the `<boltArtifact>` block in `artifact` and apply its file and folder actions to the project
* `preview`: parse `artifact` and return its steps without touching any project
* `start`: start the project from a starter template (`node` or `react`)
* `steps`: list the step log of the project, optionally filtered by `status`

Notes:
* Actions after the last complete `</boltAction>` of a truncated response are ignored
* A later file action for the same path replaces the earlier content
* Actions that would turn a file into a folder (or the other way round) are rejected and reported in `errors`
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description=f"The command to run. Allowed options are: {', '.join(ArtifactToolCommands)}.",
                required=True,
                enum=ArtifactToolCommands,
            ),
            ToolParameter(
                name="artifact",
                type="string",
                description="Required parameter of `apply` and `preview`: the raw model response containing the artifact.",
            ),
            ToolParameter(
                name="template",
                type="string",
                description="Required parameter of `start`: the starter template.",
                enum=list(TEMPLATES),
            ),
            ToolParameter(
                name="status",
                type="string",
                description="Optional parameter of `steps`: only list steps with this status.",
                enum=["pending", "completed"],
            ),
        ]

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        # Previewing is stateless and works without a session.
        if arguments.get("command") == "preview":
            try:
                return self._preview(self._require_str(arguments, "artifact", "preview"))
            except ToolError as e:
                return ToolExecResult(error=str(e), error_code=-1)
        return await super().execute(arguments)

    @override
    async def _execute_operation(self, arguments: ToolCallArguments, session: ProjectSession) -> ToolExecResult:
        command = str(arguments.get("command"))
        logger.debug(f"Processing command '{command}' for project '{session.project_id}'")

        match command:
            case "apply":
                artifact = self._require_str(arguments, "artifact", command)
                return self._fold_output(session, ingest_artifact(session, artifact))
            case "start":
                template = self._require_str(arguments, "template", command)
                if session.steps:
                    raise ToolError(f"Project '{session.project_id}' has already been started.")
                return self._fold_output(session, start_project(session, template))
            case "steps":
                status = arguments.get("status")
                if status not in (None, "pending", "completed"):
                    raise ToolError(f"Invalid status filter: {status}")
                steps = session.steps_with_status(status)
                return ToolExecResult(
                    output=f"Project '{session.project_id}' has {len(steps)} steps.",
                    data={"steps": format_steps(steps)},
                )
            case _:
                return ToolExecResult(
                    error=f"Unrecognized command {command}. The allowed commands for the {self.get_name()} tool are: {', '.join(ArtifactToolCommands)}",
                    error_code=-1,
                )

    def _preview(self, artifact: str) -> ToolExecResult:
        parsed = parse_artifact_document(artifact)
        output = f"Parsed {len(parsed.steps)} steps."
        if parsed.truncated:
            output += " The artifact was truncated; incomplete actions were dropped."
        return ToolExecResult(
            output=output,
            data={
                "artifact_id": parsed.artifact_id,
                "title": parsed.title,
                "truncated": parsed.truncated,
                "steps": format_steps(parsed.steps),
            },
        )

    def _fold_output(self, session: ProjectSession, result: FoldResult) -> ToolExecResult:
        output = f"Applied {len(result.steps)} steps to project '{session.project_id}'."
        if result.errors:
            output += f" {len(result.errors)} steps were rejected, see `errors`."
        return ToolExecResult(
            output=output,
            data={
                "steps": format_steps(result.steps),
                "errors": format_errors(result.errors),
            },
        )
