from site_builder_mcp.models.session import ProjectSession


class ProjectSessionManager:
    """Manages project states for all conversations."""

    def __init__(self) -> None:
        # Simple dict as an in-process session storage.
        # Sessions are lost when the process exits.
        self._storage: dict[str, ProjectSession] = {}

    def get_session(self, project_id: str = "default") -> ProjectSession:
        """Returns or creates the session for a given project."""
        if project_id not in self._storage:
            self._storage[project_id] = ProjectSession(project_id=project_id)
        return self._storage[project_id]

    def has_session(self, project_id: str) -> bool:
        return project_id in self._storage

    def reset_session(self, project_id: str) -> ProjectSession:
        """Drops any existing state for the project and returns a fresh session."""
        self._storage[project_id] = ProjectSession(project_id=project_id)
        return self._storage[project_id]
