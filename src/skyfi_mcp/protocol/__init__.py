"""
MCP protocol core: registry, error model, validation and dispatch.
"""

from skyfi_mcp.protocol.dispatcher import dispatch, error_response
from skyfi_mcp.protocol.errors import (
    MCPErrorCode,
    MCPException,
    auth_invalid,
    format_error_response,
    internal_error,
    invalid_params,
    invalid_request,
    rate_limited,
    tool_not_found,
)
from skyfi_mcp.protocol.models import (
    ToolCallResponse,
    ToolDefinition,
    ToolEntry,
    ToolHandler,
    json_response,
    text_response,
)
from skyfi_mcp.protocol.registry import ToolRegistrationError, ToolRegistry
from skyfi_mcp.protocol.validation import validate_arguments

__all__ = [
    "MCPErrorCode",
    "MCPException",
    "ToolCallResponse",
    "ToolDefinition",
    "ToolEntry",
    "ToolHandler",
    "ToolRegistrationError",
    "ToolRegistry",
    "auth_invalid",
    "dispatch",
    "error_response",
    "format_error_response",
    "internal_error",
    "invalid_params",
    "invalid_request",
    "json_response",
    "rate_limited",
    "text_response",
    "tool_not_found",
    "validate_arguments",
]
