import json

from site_builder_mcp.core.errors import ProjectTreeError
from site_builder_mcp.models.steps import Step, StepKind
from site_builder_mcp.models.tree import FileItem, FolderItem, ProjectTree

from .constants import MAX_RESPONSE_LEN, TRUNCATED_MESSAGE


def maybe_truncate(content: str, truncate_after: int | None = MAX_RESPONSE_LEN) -> str:
    """Truncate content and append a notice if content exceeds the specified length."""
    if not truncate_after or len(content) <= truncate_after:
        return content
    return content[:truncate_after] + TRUNCATED_MESSAGE


def format_project_tree(tree: ProjectTree, root_name: str) -> str:
    """
    Format the project tree as structured JSON for LLM consumption.

    Returns a JSON string with a flat, depth-annotated listing that LLMs can
    easily parse, in the same order as the tree.
    """
    if tree.is_empty():
        return json.dumps({
            "status": "empty",
            "root": root_name,
            "message": "Project is empty",
            "tree": []
        }, indent=2)

    tree_items = []
    for node in tree.walk():
        entry = {
            "name": node.name,
            "type": "directory" if isinstance(node, FolderItem) else "file",
            "depth": node.path.count("/") - 1,
            "path": node.path,
        }
        if isinstance(node, FileItem):
            entry["size"] = len(node.content)
        tree_items.append(entry)

    return json.dumps({
        "status": "success",
        "root": root_name,
        "count": len(tree_items),
        "tree": tree_items
    }, indent=2)


def format_steps(steps: list[Step]) -> list[dict]:
    """Serialize steps for tool output. File bodies are replaced by their length."""
    formatted = []
    for step in steps:
        entry = step.model_dump(mode="json")
        if step.kind is StepKind.CREATE_FILE:
            entry["content_length"] = len(entry.pop("content"))
        formatted.append(entry)
    return formatted


def format_errors(errors: list[ProjectTreeError]) -> list[dict]:
    return [
        {
            "step_id": error.step_id,
            "path": error.path,
            "type": type(error).__name__,
            "message": str(error),
        }
        for error in errors
    ]
