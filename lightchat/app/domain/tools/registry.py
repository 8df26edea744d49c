"""Per-request tool registry."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError


class ToolInputError(Exception):
    """Tool arguments produced by the model do not match the tool schema."""


@dataclass
class ToolSpec:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[..., Awaitable[Any]]

    def schema(self) -> dict[str, Any]:
        """OpenAI function-calling schema for this tool."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }

    def parse_input(self, arguments: str | dict | None) -> BaseModel:
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments) if arguments.strip() else {}
            except json.JSONDecodeError as exc:
                raise ToolInputError(f"Invalid JSON arguments for {self.name}: {exc.msg}") from exc
        try:
            return self.input_model.model_validate(arguments or {})
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(loc) for loc in first.get("loc", ())) or "input"
            raise ToolInputError(f"Invalid input for {self.name}: {field}: {first.get('msg')}") from exc


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def __bool__(self) -> bool:
        return bool(self._tools)

    def register(self, tool: ToolSpec) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def list_tools(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def schemas(self) -> list[dict[str, Any]]:
        return [tool.schema() for tool in self._tools.values()]

    def prepare(self, name: str, arguments: str | dict | None) -> tuple[ToolSpec, dict[str, Any]]:
        """Look up a tool and validate the model's arguments for it."""
        tool = self.get(name)
        if tool is None:
            raise ToolInputError(f"Unknown tool: {name}")
        return tool, tool.parse_input(arguments).model_dump()
