"""
Ping tool for checking that the server answers tool calls.
"""

from pydantic import BaseModel, Field

from ..protocol import ToolCallResponse, ToolDefinition, ToolRegistry, text_response


class PingInput(BaseModel):
    message: str | None = Field(None, description="Optional message to echo back")


PING_DEFINITION = ToolDefinition.from_model(
    "ping",
    "Test tool that returns a pong response. Use this to verify the MCP server is working.",
    PingInput,
)


async def ping(params: PingInput) -> ToolCallResponse:
    return text_response(f"Pong: {params.message}" if params.message else "Pong!")


def register_ping_tool(registry: ToolRegistry) -> None:
    registry.register(PING_DEFINITION, ping)
