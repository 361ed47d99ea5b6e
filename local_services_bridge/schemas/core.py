from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field

from .base import BaseSchema

ToolExecute = Callable[[str, Optional[Dict[str, Any]]], Awaitable[Dict[str, Any]]]

OPEN_OBJECT_SCHEMA: Dict[str, Any] = {"type": "object", "additionalProperties": True}


class RemoteToolDescriptor(BaseSchema):
    """A tool advertised by the MCP endpoint's ``tools/list``."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str = Field(..., min_length=1, description="Remote tool name.")
    description: Optional[str] = Field(None, description="Short description of what the tool does.")
    input_schema: Optional[Any] = Field(None, description="JSON schema for the tool arguments.")
    parameters: Optional[Any] = Field(None, description="Legacy location of the argument schema.")

    def parameters_schema(self) -> Any:
        if self.input_schema is not None:
            return self.input_schema
        if self.parameters is not None:
            return self.parameters
        return dict(OPEN_OBJECT_SCHEMA)


class EndpointDescriptor(BaseSchema):
    """Path template and HTTP method of one REST operation."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Path template, may contain {param} placeholders.")
    method: str = Field(default="GET", min_length=1, description="HTTP method.")


class RegisteredTool(BaseSchema):
    """The unit handed to the host's tool registry."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    parameters: Any = Field(default_factory=lambda: dict(OPEN_OBJECT_SCHEMA))
    execute: ToolExecute


class TextContent(BaseSchema):
    type: Literal["text"] = "text"
    text: str = ""


class ToolResult(BaseSchema):
    model_config = ConfigDict(extra="allow")

    content: List[TextContent] = Field(default_factory=list)


def stringify_result(value: Any) -> str:
    """Render a tool result as text: strings verbatim, None as "", else pretty JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def text_result(value: Any, **extra: Any) -> Dict[str, Any]:
    result = ToolResult(content=[TextContent(text=stringify_result(value))], **extra)
    return result.model_dump(by_alias=True)
