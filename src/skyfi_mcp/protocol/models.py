"""
Tool definitions, registry entries and tool call responses.
"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from mcp.types import TextContent, Tool
from pydantic import BaseModel

from .errors import invalid_params
from .validation import validate_arguments


@dataclass(frozen=True)
class ToolDefinition:
    """
    Self-describing tool metadata exposed to MCP clients.

    Parameters
    ----------
    name : str
        Unique tool identifier
    description : str
        Human/LLM readable description
    input_schema : dict[str, Any]
        JSON Schema of the tool arguments (``type: "object"``)
    input_model : type[BaseModel] or None, optional
        Pydantic model used to validate arguments before the handler runs
    """

    name: str
    description: str
    input_schema: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}},
    )
    input_model: type[BaseModel] | None = field(default=None, compare=False)

    @classmethod
    def from_model(
        cls, name: str, description: str, model: type[BaseModel]
    ) -> "ToolDefinition":
        """
        Build a definition whose schema is generated from a pydantic model.

        Parameters
        ----------
        name : str
            Unique tool identifier
        description : str
            Tool description
        model : type[BaseModel]
            Argument model

        Returns
        -------
        ToolDefinition
            Definition carrying both the schema and the model
        """
        schema = model.model_json_schema()
        schema.pop("title", None)
        return cls(name=name, description=description, input_schema=schema, input_model=model)

    def validate(self, arguments: dict[str, Any] | None) -> Any:
        """Validate raw arguments, returning the model instance or the raw dict."""
        if self.input_model is None:
            if arguments is None:
                return {}
            if not isinstance(arguments, dict):
                raise invalid_params("Tool arguments must be an object")
            return dict(arguments)
        return validate_arguments(self.input_model, arguments)

    def to_tool(self) -> Tool:
        """Convert to the MCP SDK tool listing type."""
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


@dataclass
class ToolCallResponse:
    """Ordered content blocks returned for a single tool call."""

    content: list[TextContent]
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)


ToolHandler = Callable[[Any], Awaitable[ToolCallResponse]]


@dataclass(frozen=True)
class ToolEntry:
    """A registered definition together with its handler."""

    definition: ToolDefinition
    handler: ToolHandler


def text_response(text: str, is_error: bool = False) -> ToolCallResponse:
    return ToolCallResponse(content=[TextContent(type="text", text=text)], is_error=is_error)


def json_response(payload: Any, is_error: bool = False) -> ToolCallResponse:
    """Wrap a JSON-serializable payload as a single pretty-printed text block."""
    return text_response(json.dumps(payload, indent=2, default=str), is_error=is_error)
