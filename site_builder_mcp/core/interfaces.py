"""
Interfaces of the collaborators around the project core.

The core never talks to the model service or the sandbox directly. Callers
pass objects implementing these protocols into the session operations.
"""

from typing import Any, Literal, Protocol, runtime_checkable

from typing_extensions import TypedDict


class ChatMessage(TypedDict):
    role: Literal["user", "assistant"]
    content: str


@runtime_checkable
class ChatModel(Protocol):
    """Produces the model's reply to a conversation."""

    async def complete(self, messages: list[ChatMessage]) -> str: ...


@runtime_checkable
class TemplateClassifier(Protocol):
    """Answers which starter template (`node` or `react`) fits a prompt."""

    async def classify(self, prompt: str) -> str: ...


@runtime_checkable
class SandboxRuntime(Protocol):
    """Materializes a mount descriptor inside the execution sandbox."""

    async def mount(self, descriptor: dict[str, Any]) -> None: ...
