"""Errors raised while folding steps into a project tree."""


class ProjectTreeError(Exception):
    """Base class for recoverable project tree errors."""

    def __init__(self, message: str, path: str | None = None, step_id: int | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.step_id = step_id


class PathCollisionError(ProjectTreeError):
    """A file and a folder were requested at the same path."""


class MalformedPathError(ProjectTreeError):
    """A path is empty or has no usable segments."""


class FileNotFoundInTreeError(ProjectTreeError):
    """No file exists at the requested path."""


class TemplateResolutionError(ValueError):
    """The template classifier answered something other than a known template."""


class SandboxMountError(RuntimeError):
    """The sandbox runtime rejected a mount descriptor."""
