"""
Tests for tool call dispatch and argument validation.
"""

import json

import pytest
from pydantic import BaseModel, Field

from skyfi_mcp.protocol import (
    ToolDefinition,
    ToolRegistry,
    auth_invalid,
    dispatch,
    json_response,
    validate_arguments,
)
from skyfi_mcp.protocol.errors import MCPException


class EchoInput(BaseModel):
    value: int = Field(..., ge=0, le=10)


ECHO = ToolDefinition.from_model("echo", "Echo a number", EchoInput)


@pytest.fixture
def echo_calls() -> list[EchoInput]:
    return []


@pytest.fixture
def echo_registry(registry: ToolRegistry, echo_calls: list[EchoInput]) -> ToolRegistry:

    async def echo(params: EchoInput):
        echo_calls.append(params)
        return json_response({"value": params.value})

    registry.register(ECHO, echo)
    return registry


def test_from_model_builds_object_schema() -> None:
    schema = ECHO.input_schema

    assert schema["type"] == "object"
    assert schema["required"] == ["value"]
    assert schema["properties"]["value"]["maximum"] == 10
    assert ECHO.to_tool().inputSchema == schema


def test_validate_arguments_rejects_with_violations() -> None:
    with pytest.raises(MCPException) as exc_info:
        validate_arguments(EchoInput, {"value": 11})

    assert exc_info.value.code == "INVALID_PARAMS"
    assert exc_info.value.data["violations"][0].startswith("value:")


def test_validate_arguments_treats_none_as_empty() -> None:
    with pytest.raises(MCPException, match="value"):
        validate_arguments(EchoInput, None)


def test_validate_arguments_rejects_non_object() -> None:
    with pytest.raises(MCPException, match="must be an object"):
        validate_arguments(EchoInput, ["value", 1])


@pytest.mark.asyncio
async def test_dispatch_success(echo_registry: ToolRegistry) -> None:
    response = await dispatch(echo_registry, "echo", {"value": 3})

    assert response.is_error is False
    assert json.loads(response.text) == {"value": 3}


@pytest.mark.asyncio
async def test_dispatch_unknown_tool(echo_registry: ToolRegistry) -> None:
    response = await dispatch(echo_registry, "nope", {})

    envelope = json.loads(response.text)
    assert response.is_error is True
    assert envelope["status_code"] == 404
    assert envelope["error"]["code"] == "TOOL_NOT_FOUND"
    assert "nope" in envelope["error"]["message"]


@pytest.mark.asyncio
async def test_dispatch_validates_before_handler(
    echo_registry: ToolRegistry, echo_calls: list[EchoInput]
) -> None:
    response = await dispatch(echo_registry, "echo", {"value": 99})

    envelope = json.loads(response.text)
    assert response.is_error is True
    assert envelope["error"]["code"] == "INVALID_PARAMS"
    assert envelope["status_code"] == 400
    assert echo_calls == []


@pytest.mark.asyncio
async def test_dispatch_passes_mcp_exceptions_through(registry: ToolRegistry) -> None:
    async def locked(params):
        raise auth_invalid()

    registry.register(ToolDefinition(name="locked", description="needs a key"), locked)

    envelope = json.loads((await dispatch(registry, "locked", None)).text)

    assert envelope["error"]["code"] == "AUTH_INVALID"
    assert envelope["status_code"] == 401


@pytest.mark.asyncio
async def test_dispatch_wraps_unexpected_exceptions(registry: ToolRegistry) -> None:
    async def broken(params):
        raise RuntimeError("disk on fire")

    registry.register(ToolDefinition(name="broken", description="always fails"), broken)

    response = await dispatch(registry, "broken", {})
    envelope = json.loads(response.text)

    assert response.is_error is True
    assert envelope["status_code"] == 500
    assert envelope["error"]["code"] == "INTERNAL_ERROR"
    assert envelope["error"]["message"] == 'Tool "broken" failed: disk on fire'


@pytest.mark.asyncio
async def test_definition_without_model_passes_raw_arguments(registry: ToolRegistry) -> None:
    seen = []

    async def raw(params):
        seen.append(params)
        return json_response({})

    registry.register(ToolDefinition(name="raw", description="no model"), raw)
    await dispatch(registry, "raw", {"anything": 1})

    assert seen == [{"anything": 1}]


@pytest.mark.asyncio
async def test_definition_without_model_rejects_non_object(registry: ToolRegistry) -> None:
    seen = []

    async def raw(params):
        seen.append(params)
        return json_response({})

    registry.register(ToolDefinition(name="raw", description="no model"), raw)
    response = await dispatch(registry, "raw", ["not", "an", "object"])

    envelope = json.loads(response.text)
    assert response.is_error is True
    assert envelope["status_code"] == 400
    assert envelope["error"]["code"] == "INVALID_PARAMS"
    assert envelope["error"]["message"] == "Tool arguments must be an object"
    assert seen == []
