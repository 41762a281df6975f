"""
Tests for server assembly: tool registration, configuration and SDK wiring.
"""

import json

import pytest
from mcp import types

from skyfi_mcp.config import Settings
from skyfi_mcp.protocol import ToolRegistry
from skyfi_mcp.server import build_geocoder, build_skyfi_client, create_server
from skyfi_mcp.tools import register_all_tools

EXPECTED_TOOLS = [
    "ping",
    "geocode_location",
    "reverse_geocode",
    "search_archives",
    "get_archives_page",
    "get_archive",
    "get_pricing",
    "place_archive_order",
    "get_order_status",
    "list_orders",
]


@pytest.fixture
def full_registry(geocoder) -> ToolRegistry:
    return register_all_tools(ToolRegistry(), geocoder, None)


def test_register_all_tools(full_registry: ToolRegistry) -> None:
    assert [definition.name for definition in full_registry.list_tools()] == EXPECTED_TOOLS


def test_every_schema_is_an_object(full_registry: ToolRegistry) -> None:
    for definition in full_registry.list_tools():
        assert definition.input_schema["type"] == "object", definition.name
        assert "title" not in definition.input_schema
        assert definition.description


def test_register_all_tools_twice_fails(full_registry: ToolRegistry, geocoder) -> None:
    with pytest.raises(ValueError, match="already registered"):
        register_all_tools(full_registry, geocoder, None)


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("SKYFI_API_KEY", "env-key")
    monkeypatch.setenv("GEOCODE_CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.skyfi_api_key == "env-key"
    assert settings.geocode_cache_ttl_seconds == 60
    assert settings.log_level == "debug"


def test_skyfi_client_needs_api_key() -> None:
    assert build_skyfi_client(Settings(_env_file=None, skyfi_api_key=None)) is None

    client = build_skyfi_client(
        Settings(_env_file=None, skyfi_api_key="k", skyfi_base_url="https://skyfi.test/api/")
    )
    assert client is not None
    assert client.api_key == "k"
    assert client.base_url == "https://skyfi.test/api"


def test_build_geocoder_uses_cache_ttl() -> None:
    geocoder = build_geocoder(Settings(_env_file=None, geocode_cache_ttl_seconds=5))

    assert geocoder.cache.default_ttl == 5


@pytest.mark.asyncio
async def test_server_lists_tools(full_registry: ToolRegistry) -> None:
    server = create_server(full_registry)
    handler = server.request_handlers[types.ListToolsRequest]

    result = await handler(types.ListToolsRequest(method="tools/list"))

    tools = result.root.tools
    assert [tool.name for tool in tools] == EXPECTED_TOOLS
    ping = next(tool for tool in tools if tool.name == "ping")
    assert ping.inputSchema["properties"]["message"]


@pytest.mark.asyncio
async def test_server_calls_tool(full_registry: ToolRegistry) -> None:
    server = create_server(full_registry)
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="ping", arguments={"message": "hi"}),
        )
    )

    assert result.root.isError is False
    assert result.root.content[0].text == "Pong: hi"


@pytest.mark.asyncio
async def test_server_flags_error_envelope(full_registry: ToolRegistry) -> None:
    server = create_server(full_registry)
    handler = server.request_handlers[types.CallToolRequest]

    result = await handler(
        types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="find_warehouses", arguments={}),
        )
    )

    assert result.root.isError is True
    envelope = json.loads(result.root.content[0].text)
    assert envelope["error"]["code"] == "TOOL_NOT_FOUND"
    assert envelope["status_code"] == 404
