"""Immutable file tree models.

Every node is a frozen pydantic model. Updates never mutate a node in place;
the tree builder returns new nodes along the changed path and shares the rest.
"""

from typing import Annotated, Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field


class FileItem(BaseModel):
    """A file leaf holding raw text content."""

    model_config = ConfigDict(frozen=True)

    type: Literal["file"] = "file"
    name: str
    path: str
    content: str = ""


class FolderItem(BaseModel):
    """A folder with ordered children; child names are unique."""

    model_config = ConfigDict(frozen=True)

    type: Literal["folder"] = "folder"
    name: str
    path: str
    children: tuple["FileNode", ...] = ()


FileNode = Annotated[FileItem | FolderItem, Field(discriminator="type")]

FolderItem.model_rebuild()


def _walk(nodes: tuple[FileItem | FolderItem, ...]) -> Iterator[FileItem | FolderItem]:
    for node in nodes:
        yield node
        if isinstance(node, FolderItem):
            yield from _walk(node.children)


class ProjectTree(BaseModel):
    """The root of a project: an ordered sequence of top-level nodes."""

    model_config = ConfigDict(frozen=True)

    children: tuple[FileNode, ...] = ()

    def walk(self) -> Iterator[FileItem | FolderItem]:
        """Yields every node depth-first, in tree order."""
        return _walk(self.children)

    def iter_files(self) -> Iterator[FileItem]:
        for node in self.walk():
            if isinstance(node, FileItem):
                yield node

    def find(self, path: str) -> FileItem | FolderItem | None:
        """Returns the node at an absolute virtual path, if any."""
        for node in self.walk():
            if node.path == path:
                return node
        return None

    def is_empty(self) -> bool:
        return not self.children
