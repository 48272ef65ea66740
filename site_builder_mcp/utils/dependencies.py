"""
Configuration and dependency management for the Site Builder MCP server.
"""

import logging
from functools import lru_cache

from site_builder_mcp.utils.config import ServiceConfig
from site_builder_mcp.utils.session_manager import ProjectSessionManager

logger = logging.getLogger(__name__)


@lru_cache
def get_base_config() -> ServiceConfig:
    """
    Retrieves the base server configuration from environment variables.

    This function is cached to avoid repeatedly reading and parsing environment
    variables and .env files, which improves performance.

    Returns:
        A cached instance of the ServiceConfig.
    """
    return ServiceConfig()


@lru_cache
def get_session_manager() -> ProjectSessionManager:
    """Returns the process-wide ProjectSessionManager."""
    logger.info("Initializing ProjectSessionManager singleton.")
    return ProjectSessionManager()


# --- Tool Providers ---

from ..tools.artifact_tool import ArtifactTool
from ..tools.project_file_tool import ProjectFileTool


@lru_cache
def get_artifact_tool_provider() -> ArtifactTool:
    """Returns a cached instance of the ArtifactTool."""
    logger.info("Initializing ArtifactTool singleton.")
    return ArtifactTool()


@lru_cache
def get_project_file_tool_provider() -> ProjectFileTool:
    """Returns a cached instance of the ProjectFileTool."""
    logger.info("Initializing ProjectFileTool singleton.")
    return ProjectFileTool()
