"""
Operations on a project session.

These functions tie the parser and the tree builder to the session state and
to the external collaborators. A session must not be used by two operations at
the same time; the caller is responsible for serializing access.
"""

import logging

from site_builder_mcp.core.artifact_parser import parse_artifact_document
from site_builder_mcp.core.errors import SandboxMountError
from site_builder_mcp.core.interfaces import ChatMessage, ChatModel, SandboxRuntime, TemplateClassifier
from site_builder_mcp.core.mount import MountDescriptor, to_mount_descriptor
from site_builder_mcp.core.project_tree import FoldResult, fold_steps, read_file as read_tree_file, write_file
from site_builder_mcp.models.session import ProjectSession
from site_builder_mcp.prompts.templates import ProjectTemplate, resolve_template

logger = logging.getLogger(__name__)


def ingest_artifact(session: ProjectSession, text: str | None) -> FoldResult:
    """
    Parses a model response and folds its steps into the session tree.

    New steps are numbered after the last step already in the log, appended to
    the log as pending and then folded together with any other pending steps.

    Args:
        session: The session to update.
        text: The raw model output.

    Returns:
        The FoldResult of the pending batch.
    """
    parsed = parse_artifact_document(text, start_id=session.next_step_id)
    if parsed.truncated:
        logger.info(
            f"Artifact for project '{session.project_id}' was truncated; "
            f"keeping {len(parsed.steps)} complete steps"
        )

    session.steps.extend(parsed.steps)
    if parsed.steps:
        session.next_step_id = parsed.steps[-1].id + 1

    pending = session.steps_with_status("pending")
    result = fold_steps(session.tree, pending)

    completed = {step.id: step for step in result.steps}
    session.steps = [completed.get(step.id, step) for step in session.steps]
    session.tree = result.tree

    logger.info(
        f"Applied {len(result.steps)} steps to project '{session.project_id}' "
        f"({len(result.errors)} rejected)"
    )
    return result


def read_file(session: ProjectSession, path: str) -> str:
    """Returns the content of a file in the session tree."""
    return read_tree_file(session.tree, path)


def edit_file(session: ProjectSession, path: str, content: str) -> None:
    """
    Replaces a file's content from the editor.

    Uses the same whole-node replacement as a file step, but no step is
    recorded and no step id is consumed.
    """
    session.tree = write_file(session.tree, path, content)
    logger.debug(f"Edited '{path}' in project '{session.project_id}'")


def build_mount_descriptor(session: ProjectSession) -> MountDescriptor:
    return to_mount_descriptor(session.tree)


async def mount_project(session: ProjectSession, sandbox: SandboxRuntime) -> MountDescriptor:
    """
    Hands the current tree to the sandbox runtime.

    Raises:
        SandboxMountError: If the sandbox fails to mount the descriptor.
    """
    descriptor = to_mount_descriptor(session.tree)
    try:
        await sandbox.mount(descriptor)
    except Exception as e:
        logger.error(f"Failed to mount project '{session.project_id}': {e}", exc_info=True)
        raise SandboxMountError(f"Failed to mount files: {e}") from e
    return descriptor


def start_project(session: ProjectSession, template: ProjectTemplate | str) -> FoldResult:
    """
    Records the starter template and folds its initial artifact into the tree.

    The template's context prompts are put in front of the chat history, so the
    first `converse` call already shows the model the starter files.
    """
    if isinstance(template, str):
        template = resolve_template(template)
    session.template = template.template_id
    context: list[ChatMessage] = [{"role": "user", "content": prompt} for prompt in template.context_prompts]
    session.messages = [*context, *session.messages]
    logger.info(f"Starting project '{session.project_id}' from the '{template.template_id}' template")
    return ingest_artifact(session, template.artifact)


async def classify_and_start(
    session: ProjectSession, classifier: TemplateClassifier, prompt: str
) -> FoldResult:
    """Asks the classifier which template fits the prompt and starts the project from it."""
    answer = await classifier.classify(prompt.strip())
    return start_project(session, resolve_template(answer))


async def converse(session: ProjectSession, chat_model: ChatModel, prompt: str) -> FoldResult:
    """
    Sends a user message to the chat collaborator and applies its reply.

    The conversation history is only extended once the model has answered, so a
    failed request leaves the session unchanged.
    """
    user_message = {"role": "user", "content": prompt}
    reply = await chat_model.complete([*session.messages, user_message])
    session.messages.extend([user_message, {"role": "assistant", "content": reply}])
    return ingest_artifact(session, reply)
