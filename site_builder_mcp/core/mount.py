"""Projection of a project tree into the sandbox mount format."""

from typing import Any

from site_builder_mcp.models.tree import FileItem, FolderItem, ProjectTree

MountDescriptor = dict[str, dict[str, Any]]


def to_mount_descriptor(tree: ProjectTree) -> MountDescriptor:
    """
    Builds the nested mount structure for a tree.

    Folders become `{"directory": {...}}` and files `{"file": {"contents": ...}}`,
    keyed by node name:

        {"src": {"directory": {"index.js": {"file": {"contents": "..."}}}}}
    """
    return _project(tree.children)


def _project(nodes: tuple[FileItem | FolderItem, ...]) -> MountDescriptor:
    structure: MountDescriptor = {}
    for node in nodes:
        if isinstance(node, FileItem):
            structure[node.name] = {"file": {"contents": node.content}}
        else:
            structure[node.name] = {"directory": _project(node.children)}
    return structure
