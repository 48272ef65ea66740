"""
MCP server definition for the Site Builder MCP.
"""

import logging
from typing import Any, List, Optional

from fastapi.middleware.cors import CORSMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware

from mcp.server.fastmcp import Context, FastMCP

from site_builder_mcp.core.workspace import build_mount_descriptor
from site_builder_mcp.prompts import get_prompts
from site_builder_mcp.tools.base import ToolExecResult
from site_builder_mcp.utils.config import ServiceConfig
from site_builder_mcp.utils.dependencies import (
    get_artifact_tool_provider,
    get_base_config,
    get_project_file_tool_provider,
    get_session_manager,
)


# Get a module-level logger
logger = logging.getLogger(__name__)


class CustomFastMCP(FastMCP):
    """Custom FastMCP server with CORS middleware."""

    def _add_cors_middleware(self, app: Starlette) -> Starlette:
        """A helper to add CORS middleware to a Starlette app."""
        app.user_middleware.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origin_regex=".*",  # Allow any origin
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        )
        app.middleware_stack = app.build_middleware_stack()
        return app

    def sse_app(self, mount_path: str | None = None) -> Starlette:
        """Overrides the default sse_app to inject CORS middleware."""
        app = super().sse_app(mount_path)
        return self._add_cors_middleware(app)

    def streamable_http_app(self) -> Starlette:
        """Overrides the default streamable_http_app to inject CORS middleware."""
        app = super().streamable_http_app()
        return self._add_cors_middleware(app)


def build_server(config: ServiceConfig) -> CustomFastMCP:
    """Build and configure the FastMCP server instance.

    Args:
        config: The server's service configuration.

    Returns:
        A configured CustomFastMCP instance.
    """
    logger.info(
        "Initializing FastMCP server",
        extra={"host": config.MCP_HOST, "port": config.MCP_PORT},
    )
    return CustomFastMCP(
        "site-builder-mcp",
        host=config.MCP_HOST,
        port=config.MCP_PORT,
    )


def to_response(result: ToolExecResult) -> dict[str, Any]:
    """Converts a tool result into the dictionary returned to the client."""
    if result.error:
        return {"status": "error", "error": result.error, "exit_code": result.error_code}
    response: dict[str, Any] = {"status": "success", "result": result.output, "exit_code": result.error_code}
    if result.data is not None:
        response.update(result.data)
    return response


# Get the base configuration for server initialization.
# This is also imported by main.py to run the server.
server_config = get_base_config()
mcp_app = build_server(server_config)


# --- Prompt Handlers ---
@mcp_app.prompt(title="Artifact Format for Site Builder")
def get_artifact_format_prompt() -> str:
    """Provides the system prompt describing the artifact format."""
    prompts = get_prompts()
    return prompts["artifact-format"] + prompts["editing-instructions"]

# --- Tool Definitions ---

@mcp_app.tool()
async def start_project(
    context: Context,
    project_id: str,
    template: Optional[str] = None,
) -> dict[str, Any]:
    """
    Starts a project from a starter template.

    Args:
        project_id: Identifier of the project to create.
        template: The starter template, 'node' or 'react'. Defaults to the configured template.

    Returns:
        A dictionary with the applied steps and any rejected steps.
    """
    template = template or server_config.DEFAULT_TEMPLATE
    logger.info(f"Starting project '{project_id}' from template '{template}'")
    try:
        session = get_session_manager().get_session(project_id)
        tool = get_artifact_tool_provider()
        result = await tool.execute({"command": "start", "template": template, "_session": session})
        return to_response(result)

    except Exception as e:
        logger.error(f"Error starting project: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool()
async def apply_artifact(
    context: Context,
    project_id: str,
    artifact: str,
) -> dict[str, Any]:
    """
    Parses a model response and applies its artifact to the project.

    Args:
        project_id: Identifier of the project.
        artifact: The raw model response containing a <boltArtifact> block.

    Returns:
        A dictionary with the applied steps and any rejected steps.
    """
    logger.info(f"Applying artifact to project '{project_id}' ({len(artifact)} characters)")
    try:
        session = get_session_manager().get_session(project_id)
        tool = get_artifact_tool_provider()
        result = await tool.execute({"command": "apply", "artifact": artifact, "_session": session})
        return to_response(result)

    except Exception as e:
        logger.error(f"Error applying artifact: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool()
async def preview_artifact(
    context: Context,
    artifact: str,
) -> dict[str, Any]:
    """
    Parses a model response without applying it to any project.

    Args:
        artifact: The raw model response containing a <boltArtifact> block.

    Returns:
        A dictionary with the parsed steps and whether the artifact was truncated.
    """
    logger.info("Previewing artifact")
    try:
        tool = get_artifact_tool_provider()
        result = await tool.execute({"command": "preview", "artifact": artifact})
        return to_response(result)

    except Exception as e:
        logger.error(f"Error previewing artifact: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool()
async def list_steps(
    context: Context,
    project_id: str,
    status: Optional[str] = None,
) -> dict[str, Any]:
    """
    Lists the step log of a project.

    Args:
        project_id: Identifier of the project.
        status: Only list steps with this status, 'pending' or 'completed'.

    Returns:
        A dictionary containing the steps.
    """
    logger.info(f"Listing steps of project '{project_id}'")
    try:
        session = get_session_manager().get_session(project_id)
        tool = get_artifact_tool_provider()
        args = {"command": "steps", "status": status, "_session": session}
        args = {k: v for k, v in args.items() if v is not None}
        result = await tool.execute(args)
        return to_response(result)

    except Exception as e:
        logger.error(f"Error listing steps: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool(name="project_file")
async def project_file_tool(
    context: Context,
    project_id: str,
    command: str,
    path: Optional[str] = None,
    content: Optional[str] = None,
    old_str: Optional[str] = None,
    new_str: Optional[str] = None,
    view_range: Optional[List[int]] = None,
) -> dict[str, Any]:
    """
    Views and edits single files of a project (view, write, str_replace, list).

    Args:
        project_id: Identifier of the project.
        command: The type of operation. Can be 'view', 'write', 'str_replace', or 'list'.
        path: The project path of the file, e.g. 'src/App.tsx'.
        content: The new file content for a 'write' operation.
        old_str: The string to search for in a 'str_replace' operation. Must be unique.
        new_str: The replacement string for 'str_replace'.
        view_range: The line range to view (e.g., [10, 25]).

    Returns:
        A dictionary containing the result of the operation.
    """
    logger.info(f"Executing project_file command '{command}' on path '{path}' in project '{project_id}'")
    try:
        session = get_session_manager().get_session(project_id)
        tool = get_project_file_tool_provider()
        args = {
            "command": command,
            "path": path,
            "content": content,
            "old_str": old_str,
            "new_str": new_str,
            "view_range": view_range,
        }
        # Filter out None values so we don't pass them to the tool
        args = {k: v for k, v in args.items() if v is not None}
        args["_session"] = session

        result = await tool.execute(args)
        return to_response(result)

    except Exception as e:
        logger.error(f"Error executing project_file command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool()
async def mount_descriptor(
    context: Context,
    project_id: str,
) -> dict[str, Any]:
    """
    Returns the nested directory/file structure handed to the sandbox runtime.

    Args:
        project_id: Identifier of the project.

    Returns:
        A dictionary containing the mount descriptor.
    """
    logger.info(f"Building mount descriptor for project '{project_id}'")
    try:
        session = get_session_manager().get_session(project_id)
        return {"status": "success", "descriptor": build_mount_descriptor(session), "exit_code": 0}

    except Exception as e:
        logger.error(f"Error building mount descriptor: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}
