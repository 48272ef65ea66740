# Copyright (c) 2023 Anthropic
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates.
# SPDX-License-Identifier: MIT
#
# This file has been modified by ByteDance Ltd. and/or its affiliates. on 13 June 2025
#
# Original file was released under MIT License, with the full license text
# available at https://github.com/anthropics/anthropic-quickstarts/blob/main/LICENSE
#
# This modified file is released under the same license.

import logging
from typing_extensions import override

from site_builder_mcp.core.workspace import edit_file, read_file
from site_builder_mcp.models.session import ProjectSession
from site_builder_mcp.tools.base import ToolCallArguments, ToolError, ToolExecResult, ToolParameter
from site_builder_mcp.tools.base_project_tool import BaseProjectTool
from site_builder_mcp.tools.utils.constants import SNIPPET_LINES
from site_builder_mcp.tools.utils.formatting_utils import format_project_tree
from site_builder_mcp.utils.path_utils import normalize_path

# Настройка логирования
logger = logging.getLogger(__name__)

ProjectFileSubCommands = [
    "view",
    "write",
    "str_replace",
    "list",
]


class ProjectFileTool(BaseProjectTool):
    """Tool to view and edit single files of the in-memory project."""

    @override
    def get_name(self) -> str:
        return "project_file"

    @override
    def get_description(self) -> str:
        return """Editor for the files of the in-memory project
* `view` displays the result of applying `cat -n` to the file at `path`
* `write` replaces the whole file at `path` with `content`, creating it (and its folders) if needed
* `str_replace` replaces `old_str` with `new_str` in the file at `path`
* `list` shows the project structure
* Direct edits do not create steps; they replace the file just like a file action would

Notes for using the `str_replace` command:
* The `old_str` parameter should match EXACTLY one or more consecutive lines from the original file. Be mindful of whitespaces!
* If the `old_str` parameter is not unique in the file, the replacement will not be performed
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description=f"The commands to run. Allowed options are: {', '.join(ProjectFileSubCommands)}.",
                required=True,
                enum=ProjectFileSubCommands,
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Project path of the file, e.g. 'src/App.tsx'. Not needed for `list`.",
            ),
            ToolParameter(
                name="content",
                type="string",
                description="Required parameter of `write` command, with the new content of the file.",
            ),
            ToolParameter(
                name="old_str",
                type="string",
                description="Required parameter of `str_replace` command containing the string in `path` to replace.",
            ),
            ToolParameter(
                name="new_str",
                type="string",
                description="Optional parameter of `str_replace` command containing the new string (if not given, `old_str` is removed).",
            ),
            ToolParameter(
                name="view_range",
                type="array",
                description="Optional parameter of `view` command. If provided, the file will be shown in the indicated line number range, e.g. [11, 12] will show lines 11 and 12. Indexing at 1 to start. Setting `[start_line, -1]` shows all lines from `start_line` to the end of the file.",
                items={"type": "integer"},
            ),
        ]

    @override
    async def _execute_operation(self, arguments: ToolCallArguments, session: ProjectSession) -> ToolExecResult:
        command = str(arguments.get("command"))
        logger.debug(f"Processing command '{command}' for project '{session.project_id}'")

        match command:
            case "list":
                return ToolExecResult(output=format_project_tree(session.tree, session.project_id))
            case "view":
                return self._view(session, self._require_str(arguments, "path", command), arguments.get("view_range"))
            case "write":
                path = normalize_path(self._require_str(arguments, "path", command))
                content = self._require_str(arguments, "content", command)
                edit_file(session, path, content)
                return ToolExecResult(output=f"File {path} has been written ({len(content)} characters).")
            case "str_replace":
                return self._str_replace(
                    session,
                    self._require_str(arguments, "path", command),
                    self._require_str(arguments, "old_str", command),
                    arguments.get("new_str"),
                )
            case _:
                logger.error(f"Unrecognized command: {command}")
                return ToolExecResult(
                    error=f"Unrecognized command {command}. The allowed commands for the {self.get_name()} tool are: {', '.join(ProjectFileSubCommands)}",
                    error_code=-1,
                )

    def _view(self, session: ProjectSession, path_str: str, view_range: object) -> ToolExecResult:
        """Implement the view command"""
        path = normalize_path(path_str)
        file_content = read_file(session, path)
        init_line = 1
        if view_range is not None:
            if not (
                isinstance(view_range, list)
                and len(view_range) == 2
                and all(isinstance(i, int) for i in view_range)
            ):
                raise ToolError("Invalid `view_range`. It should be a list of two integers.")
            file_lines = file_content.split("\n")
            n_lines_file = len(file_lines)
            init_line, final_line = view_range
            if init_line < 1 or init_line > n_lines_file:
                raise ToolError(
                    f"Invalid `view_range`: {view_range}. Its first element `{init_line}` should be within the range of lines of the file: {[1, n_lines_file]}"
                )
            if final_line > n_lines_file:
                raise ToolError(
                    f"Invalid `view_range`: {view_range}. Its second element `{final_line}` should be smaller than the number of lines in the file: `{n_lines_file}`"
                )
            if final_line != -1 and final_line < init_line:
                raise ToolError(
                    f"Invalid `view_range`: {view_range}. Its second element `{final_line}` should be larger or equal than its first `{init_line}`"
                )

            if final_line == -1:
                file_content = "\n".join(file_lines[init_line - 1 :])
            else:
                file_content = "\n".join(file_lines[init_line - 1 : final_line])

        return ToolExecResult(output=self._make_output(file_content, path, init_line=init_line))

    def _str_replace(self, session: ProjectSession, path_str: str, old_str: str, new_str: object) -> ToolExecResult:
        """Implement the str_replace command, which replaces old_str with new_str in the file content"""
        if not (new_str is None or isinstance(new_str, str)):
            raise ToolError("Parameter `new_str` should be a string or null for command: str_replace")
        new_str = new_str or ""

        path = normalize_path(path_str)
        file_content = read_file(session, path)

        occurrences = file_content.count(old_str)
        logger.debug(f"Found {occurrences} occurrences of old_str in {path}")
        if occurrences == 0:
            raise ToolError(
                f"No replacement was performed, old_str `{old_str}` did not appear verbatim in {path}."
            )
        if occurrences > 1:
            lines = [idx + 1 for idx, line in enumerate(file_content.split("\n")) if old_str in line]
            raise ToolError(
                f"No replacement was performed. Multiple occurrences of old_str `{old_str}` in lines {lines} in {path}. Please ensure it is unique"
            )

        new_file_content = file_content.replace(old_str, new_str)
        edit_file(session, path, new_file_content)

        # Create a snippet of the edited section
        replacement_line = file_content.split(old_str)[0].count("\n")
        start_line = max(0, replacement_line - SNIPPET_LINES)
        end_line = replacement_line + SNIPPET_LINES + new_str.count("\n")
        snippet = "\n".join(new_file_content.split("\n")[start_line : end_line + 1])

        success_msg = f"The file {path} has been edited. "
        success_msg += self._make_output(snippet, f"a snippet of {path}", start_line + 1)
        success_msg += "Review the changes and make sure they are as expected. Edit the file again if necessary."
        return ToolExecResult(output=success_msg)
