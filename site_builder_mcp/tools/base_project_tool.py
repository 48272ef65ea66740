# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Base class for tools operating on a project session."""

import logging
from abc import ABC, abstractmethod
from typing_extensions import override

from site_builder_mcp.core.errors import ProjectTreeError, TemplateResolutionError
from site_builder_mcp.models.session import ProjectSession
from site_builder_mcp.tools.base import Tool, ToolCallArguments, ToolError, ToolExecResult
from site_builder_mcp.tools.utils.formatting_utils import maybe_truncate

logger = logging.getLogger(__name__)


class BaseProjectTool(Tool, ABC):
    """Base class for project tools with common functionality."""

    def _validate_session(self, arguments: ToolCallArguments) -> ProjectSession:
        """
        Validate and extract the ProjectSession from arguments.

        Args:
            arguments: The tool call arguments

        Returns:
            The validated ProjectSession

        Raises:
            ToolError: If the ProjectSession is not found or invalid
        """
        session = arguments.get("_session")
        if not isinstance(session, ProjectSession):
            logger.error("ProjectSession not found in arguments")
            raise ToolError("ProjectSession not found in arguments.")
        return session

    def _require_str(self, arguments: ToolCallArguments, name: str, command: str) -> str:
        value = arguments.get(name)
        if not isinstance(value, str):
            raise ToolError(f"Parameter `{name}` is required and must be a string for command: {command}")
        return value

    def _make_output(self, file_content: str, file_descriptor: str, init_line: int = 1) -> str:
        """Generate `cat -n` style output for a file's content."""
        file_content = maybe_truncate(file_content)
        file_content = "\n".join(
            [f"{i + init_line:6}\t{line}" for i, line in enumerate(file_content.split("\n"))]
        )
        return f"Here's the result of running `cat -n` on {file_descriptor}:\n" + file_content + "\n"

    @abstractmethod
    async def _execute_operation(self, arguments: ToolCallArguments, session: ProjectSession) -> ToolExecResult:
        """
        Execute the specific operation for this tool.

        Args:
            arguments: The tool call arguments
            session: The project session to operate on

        Returns:
            The result of the operation
        """
        pass

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        """
        Execute the tool with common validation and error handling.

        Project tree errors (collisions, malformed or missing paths) are
        returned as tool errors rather than raised.
        """
        try:
            session = self._validate_session(arguments)
            return await self._execute_operation(arguments, session)

        except (ToolError, ProjectTreeError, TemplateResolutionError) as e:
            logger.error(f"Tool error in {self.get_name()}: {e}")
            return ToolExecResult(error=str(e), error_code=-1)
        except Exception as e:
            logger.error(f"Unexpected error in {self.get_name()}: {e}", exc_info=True)
            return ToolExecResult(error=f"Unexpected error: {str(e)}", error_code=-1)
