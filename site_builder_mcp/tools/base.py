# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Base classes for tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

ParamSchemaValue = str | list[str] | bool | dict[str, object]
Property = dict[str, ParamSchemaValue]

# Arguments passed to a tool call. Keys starting with `_` are injected by the
# server (e.g. `_session`) and are never part of the public schema.
ToolCallArguments = dict[str, Any]


class ToolError(Exception):
    """Base class for tool errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


@dataclass
class ToolExecResult:
    """Intermediate result of a tool execution."""

    output: str | None = None
    error: str | None = None
    error_code: int = 0
    data: dict[str, Any] | None = None


@dataclass
class ToolParameter:
    """Tool parameter definition."""

    name: str
    type: str | list[str]
    description: str
    enum: list[str] | None = None
    items: dict[str, object] | None = None
    required: bool = False
    extra: dict[str, object] = field(default_factory=dict)


class Tool(ABC):
    """Base class for all tools."""

    @abstractmethod
    def get_name(self) -> str:
        """Get the tool name."""
        pass

    @abstractmethod
    def get_description(self) -> str:
        """Get the tool description."""
        pass

    @abstractmethod
    def get_parameters(self) -> list[ToolParameter]:
        """Get the tool parameters."""
        pass

    @abstractmethod
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        """Execute the tool with given parameters."""
        pass

    def get_input_schema(self) -> dict[str, object]:
        """Get the input schema for the tool."""
        properties: dict[str, Property] = {}
        required: list[str] = []

        for param in self.get_parameters():
            param_schema: Property = {
                "type": param.type,
                "description": param.description,
            }
            if param.enum:
                param_schema["enum"] = param.enum
            if param.items:
                param_schema["items"] = param.items
            param_schema.update(param.extra)  # pyright: ignore[reportArgumentType]
            properties[param.name] = param_schema
            if param.required:
                required.append(param.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required,
        }
