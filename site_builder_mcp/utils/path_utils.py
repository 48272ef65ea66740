from site_builder_mcp.core.errors import MalformedPathError


def split_path(path_str: str | None) -> list[str]:
    """
    Splits a slash-separated virtual path into its non-empty segments.

    Leading, trailing and repeated slashes are ignored, as are `.` segments,
    so `src/index.js`, `/src/index.js` and `./src//index.js` are the same path.

    Args:
        path_str: The path string emitted by the model or the editor.

    Returns:
        The ordered list of segments.

    Raises:
        MalformedPathError: If the path is empty, yields no segments, or
            tries to climb above the project root with `..`.
    """
    if not path_str or not path_str.strip():
        raise MalformedPathError("Path is empty.", path=path_str)

    segments = [part for part in path_str.strip().split("/") if part and part != "."]
    if not segments:
        raise MalformedPathError(f"Path '{path_str}' has no segments.", path=path_str)
    if ".." in segments:
        raise MalformedPathError(f"Path '{path_str}' must not contain '..'.", path=path_str)
    return segments


def normalize_path(path_str: str | None) -> str:
    """Returns the absolute form of a virtual path, e.g. `src/a.js` -> `/src/a.js`."""
    return "/" + "/".join(split_path(path_str))
