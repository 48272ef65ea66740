"""
Folds parsed steps into an immutable project tree.

The tree is never modified in place. Every write rebuilds the nodes along the
written path and keeps all other nodes as they were, so a tree value handed to
a reader before a fold stays consistent after it.
"""

import logging
from typing import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field

from site_builder_mcp.core.errors import (
    FileNotFoundInTreeError,
    PathCollisionError,
    ProjectTreeError,
)
from site_builder_mcp.models.steps import Step, StepKind
from site_builder_mcp.models.tree import FileItem, FolderItem, ProjectTree
from site_builder_mcp.utils.path_utils import normalize_path, split_path

logger = logging.getLogger(__name__)

Node = FileItem | FolderItem
Children = tuple[Node, ...]
# Builds the node for the last path segment from (name, path, existing node).
LeafFactory = Callable[[str, str, Node | None], Node]


class FoldResult(BaseModel):
    """The outcome of folding one batch of steps."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tree: ProjectTree
    steps: list[Step] = Field(default_factory=list)
    errors: list[ProjectTreeError] = Field(default_factory=list)


def apply_steps(tree: ProjectTree, steps: Iterable[Step]) -> ProjectTree:
    """Returns the tree obtained by applying the steps in order."""
    return fold_steps(tree, steps).tree


def fold_steps(tree: ProjectTree, steps: Iterable[Step]) -> FoldResult:
    """
    Applies a batch of steps to a tree.

    A step whose path is malformed or collides with a node of the other kind
    leaves the tree unchanged; its error is collected and the remaining steps
    are still applied. Every step of the batch is returned as completed.

    Args:
        tree: The current tree.
        steps: The steps to apply, in emission order.

    Returns:
        A FoldResult with the new tree, the completed steps and the errors.
    """
    errors: list[ProjectTreeError] = []
    completed: list[Step] = []

    for step in steps:
        try:
            tree = apply_step(tree, step)
        except ProjectTreeError as e:
            e.step_id = step.id
            logger.warning(f"Step {step.id} ({step.kind.value}) was not applied: {e}")
            errors.append(e)
        completed.append(step.completed())

    return FoldResult(tree=tree, steps=completed, errors=errors)


def apply_step(tree: ProjectTree, step: Step) -> ProjectTree:
    """
    Applies a single step.

    Raises:
        MalformedPathError: If a file or folder step has no usable path.
        PathCollisionError: If the step needs a folder where a file exists or
            the other way round.
    """
    match step.kind:
        case StepKind.CREATE_FILE:
            return write_file(tree, step.path, step.content)
        case StepKind.CREATE_FOLDER:
            return ensure_folder(tree, step.path)
        case StepKind.RUN_COMMAND:
            return tree
        case _:
            raise AssertionError(f"Unhandled step kind: {step.kind}")


def write_file(tree: ProjectTree, path: str | None, content: str) -> ProjectTree:
    """
    Creates or replaces the file at `path`, creating missing parent folders.

    An existing file is replaced by a new node at the same position; a new file
    is appended to its parent folder.
    """
    segments = split_path(path)

    def make_file(name: str, node_path: str, existing: Node | None) -> Node:
        if isinstance(existing, FolderItem):
            raise PathCollisionError(
                f"Cannot create file '{node_path}': a folder already exists there.", path=node_path
            )
        return FileItem(name=name, path=node_path, content=content)

    return tree.model_copy(update={"children": _insert(tree.children, segments, "", make_file)})


def ensure_folder(tree: ProjectTree, path: str | None) -> ProjectTree:
    """Creates the folder at `path` and any missing parents."""
    segments = split_path(path)

    def make_folder(name: str, node_path: str, existing: Node | None) -> Node:
        if isinstance(existing, FileItem):
            raise PathCollisionError(
                f"Cannot create folder '{node_path}': a file already exists there.", path=node_path
            )
        return existing if existing is not None else FolderItem(name=name, path=node_path)

    return tree.model_copy(update={"children": _insert(tree.children, segments, "", make_folder)})


def read_file(tree: ProjectTree, path: str | None) -> str:
    """
    Returns the content of the file at `path`.

    Raises:
        MalformedPathError: If the path is empty.
        FileNotFoundInTreeError: If there is no file at the path.
    """
    node_path = normalize_path(path)
    node = tree.find(node_path)
    if node is None:
        raise FileNotFoundInTreeError(f"No file exists at '{node_path}'.", path=node_path)
    if not isinstance(node, FileItem):
        raise FileNotFoundInTreeError(f"'{node_path}' is a folder, not a file.", path=node_path)
    return node.content


def _insert(children: Children, segments: list[str], prefix: str, make_leaf: LeafFactory) -> Children:
    name, rest = segments[0], segments[1:]
    node_path = f"{prefix}/{name}"

    index = next((i for i, child in enumerate(children) if child.name == name), None)
    existing = children[index] if index is not None else None

    if not rest:
        node = make_leaf(name, node_path, existing)
    else:
        if isinstance(existing, FileItem):
            raise PathCollisionError(
                f"Cannot create '{prefix}/{'/'.join(segments)}': '{node_path}' is a file, not a folder.",
                path=node_path,
            )
        folder = existing if existing is not None else FolderItem(name=name, path=node_path)
        node = folder.model_copy(
            update={"children": _insert(folder.children, rest, node_path, make_leaf)}
        )

    if index is None:
        return children + (node,)
    return children[:index] + (node,) + children[index + 1 :]
