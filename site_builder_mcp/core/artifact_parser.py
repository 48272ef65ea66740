"""
Parser for the artifact markup emitted by the model.

A response is free text that may contain one artifact block:

    <boltArtifact id="project" title="Project Files">
      <boltAction type="file" filePath="src/index.js">...</boltAction>
      <boltAction type="shell">npm install</boltAction>
    </boltArtifact>

Only the immediate children of the artifact are turned into steps. The parser
never raises on model output; anything it cannot understand is skipped.
"""

import logging
import re

from site_builder_mcp.core.errors import MalformedPathError
from site_builder_mcp.models.steps import ParsedArtifact, Step, StepKind
from site_builder_mcp.utils.path_utils import normalize_path

logger = logging.getLogger(__name__)

ARTIFACT_TAG = "boltArtifact"
ACTION_TAG = "boltAction"

ACTION_KINDS: dict[str, StepKind] = {
    "file": StepKind.CREATE_FILE,
    "shell": StepKind.RUN_COMMAND,
    "folder": StepKind.CREATE_FOLDER,
}

# Opening, closing or self-closing tag. Attribute values may be double quoted,
# single quoted or bare.
_TAG_RE = re.compile(
    r"""<(?P<closing>/)?(?P<name>[A-Za-z][\w:.-]*)
        (?P<attrs>(?:\s+[^\s=/>]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+))?)*)
        \s*(?P<self_closing>/)?>""",
    re.VERBOSE,
)
_ATTR_RE = re.compile(r"""([^\s=/>]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?""")
# Opening or closing action tag, used to balance action bodies.
_ACTION_BOUNDARY_RE = re.compile(
    rf"<(?P<closing>/)?{ACTION_TAG}(?=[\s/>])[^>]*?(?P<self_closing>/)?>", re.IGNORECASE
)


def parse_artifact(text: str | None, start_id: int = 0) -> list[Step]:
    """
    Extracts the ordered steps from a model response.

    Args:
        text: The raw model output.
        start_id: The id given to the first step; later steps count up from it.

    Returns:
        The steps in document order, all pending. Empty if no artifact is found.
    """
    return parse_artifact_document(text, start_id=start_id).steps


def parse_artifact_document(text: str | None, start_id: int = 0) -> ParsedArtifact:
    """
    Scans a model response for its artifact block and parses the actions in it.

    The block runs from the opening artifact tag to its closing tag, or to the
    end of the text when the response was cut off. An action whose closing tag
    never arrives is dropped and the result is marked as truncated.
    """
    if not text:
        return ParsedArtifact()

    opening = _find_opening_tag(text, ARTIFACT_TAG, 0)
    if opening is None:
        logger.debug("No <%s> block found in model output", ARTIFACT_TAG)
        return ParsedArtifact()

    attrs = _parse_attributes(opening.group("attrs"))
    result = ParsedArtifact(artifact_id=attrs.get("id"), title=attrs.get("title"))
    if opening.group("self_closing"):
        return result

    step_id = start_id
    pos = opening.end()
    while True:
        tag = _TAG_RE.search(text, pos)
        if tag is None:
            logger.debug("Artifact is not closed, keeping %d parsed steps", len(result.steps))
            result.truncated = True
            break

        name = tag.group("name").lower()
        if tag.group("closing"):
            if name == ARTIFACT_TAG.lower():
                break
            # Stray closing tag between actions.
            pos = tag.end()
            continue

        if name != ACTION_TAG.lower():
            closing = None if tag.group("self_closing") else _find_element_close(text, tag)
            # Void or unbalanced elements, e.g. <br>, are skipped tag-only.
            pos = closing.end() if closing is not None else tag.end()
            logger.debug("Skipping unrecognized tag <%s>", tag.group("name"))
            continue

        if tag.group("self_closing"):
            body = ""
            pos = tag.end()
        else:
            closing = _find_action_close(text, tag.end())
            if closing is None:
                logger.debug("Dropping unterminated <%s> at offset %d", tag.group("name"), tag.start())
                result.truncated = True
                break
            body = text[tag.end() : closing.start()]
            pos = closing.end()

        step = _build_step(step_id, _parse_attributes(tag.group("attrs")), body)
        if step is not None:
            result.steps.append(step)
            step_id += 1

    return result


def trim_boundary_newlines(body: str) -> str:
    """Removes exactly one leading and one trailing newline (LF or CRLF)."""
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]
    if body.endswith("\r\n"):
        body = body[:-2]
    elif body.endswith("\n"):
        body = body[:-1]
    return body


def _find_opening_tag(text: str, tag_name: str, pos: int) -> re.Match[str] | None:
    wanted = tag_name.lower()
    for match in _TAG_RE.finditer(text, pos):
        if not match.group("closing") and match.group("name").lower() == wanted:
            return match
    return None


def _find_action_close(text: str, pos: int) -> re.Match[str] | None:
    """
    Finds the closing tag of an action whose body starts at `pos`.

    Action tags inside the body are counted so that a complete example action
    embedded in file content stays part of that content. When the tags never
    balance, e.g. a lone opening tag quoted in a string, the first closing tag
    ends the body.
    """
    depth = 1
    first_close = None
    for boundary in _ACTION_BOUNDARY_RE.finditer(text, pos):
        if boundary.group("self_closing"):
            continue
        if boundary.group("closing"):
            if first_close is None:
                first_close = boundary
            depth -= 1
            if depth == 0:
                return boundary
        else:
            depth += 1
    return first_close


def _find_element_close(text: str, tag: re.Match[str]) -> re.Match[str] | None:
    # Actions are stepped over whole, so a closing tag inside an action body
    # never ends an unrecognized element opened before it.
    name = tag.group("name").lower()
    depth = 1
    pos = tag.end()
    while True:
        match = _TAG_RE.search(text, pos)
        if match is None:
            return None
        match_name = match.group("name").lower()
        pos = match.end()
        if match.group("self_closing"):
            continue
        if match.group("closing"):
            if match_name == ARTIFACT_TAG.lower():
                return None
            if match_name == name:
                depth -= 1
                if depth == 0:
                    return match
        elif match_name == ACTION_TAG.lower():
            closing = _find_action_close(text, match.end())
            if closing is None:
                return None
            pos = closing.end()
        elif match_name == name:
            depth += 1


def _parse_attributes(raw: str | None) -> dict[str, str]:
    """Parses tag attributes into a dict keyed by lower-cased attribute name."""
    attributes: dict[str, str] = {}
    if not raw:
        return attributes
    for match in _ATTR_RE.finditer(raw):
        key = match.group(1).lower()
        value = next((group for group in match.groups()[1:] if group is not None), "")
        attributes.setdefault(key, value)
    return attributes


def _build_step(step_id: int, attrs: dict[str, str], body: str) -> Step | None:
    action_type = attrs.get("type", "").strip().lower()
    kind = ACTION_KINDS.get(action_type)
    if kind is None:
        logger.debug("Skipping action with unsupported type '%s'", action_type)
        return None

    description = attrs.get("description") or None

    if kind is StepKind.RUN_COMMAND:
        return Step(
            id=step_id,
            kind=kind,
            title="Run command",
            description=description,
            content=body.strip(),
        )

    raw_path = attrs.get("filepath", attrs.get("path"))
    path = _normalize_or_keep(raw_path)

    if kind is StepKind.CREATE_FOLDER:
        return Step(
            id=step_id,
            kind=kind,
            title=f"Create folder {raw_path or ''}".rstrip(),
            description=description,
            path=path,
        )

    return Step(
        id=step_id,
        kind=kind,
        title=f"Create {raw_path or ''}".rstrip(),
        description=description,
        path=path,
        content=trim_boundary_newlines(body),
    )


def _normalize_or_keep(raw_path: str | None) -> str | None:
    # Malformed paths are kept as emitted; the tree builder rejects them.
    if raw_path is None:
        return None
    try:
        return normalize_path(raw_path)
    except MalformedPathError:
        return raw_path
