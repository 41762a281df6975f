"""
MCP server entry point for SkyFi geocoding and imagery tools.
"""

import asyncio
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from skyfi_mcp.config import Settings, get_settings
from skyfi_mcp.core import NominatimGeocoder, SkyFiClient, TTLCache
from skyfi_mcp.protocol import ToolRegistry, dispatch
from skyfi_mcp.tools import register_all_tools

LOGGER = logging.getLogger(__name__)

SERVER_NAME = "skyfi-mcp"


class ToolCallError(Exception):
    """Carries an error envelope out of the SDK call handler so it is flagged ``isError``."""


def build_geocoder(settings: Settings) -> NominatimGeocoder:
    return NominatimGeocoder(
        user_agent=settings.nominatim_user_agent,
        domain=settings.nominatim_domain,
        timeout=settings.nominatim_timeout_seconds,
        min_delay_seconds=settings.nominatim_min_delay_seconds,
        cache=TTLCache(settings.geocode_cache_ttl_seconds),
    )


def build_skyfi_client(settings: Settings) -> SkyFiClient | None:
    """Return a SkyFi client, or ``None`` when no API key is configured."""
    if not settings.skyfi_api_key:
        LOGGER.warning("SKYFI_API_KEY is not set; imagery tools will report AUTH_INVALID")
        return None
    return SkyFiClient(
        api_key=settings.skyfi_api_key,
        base_url=settings.skyfi_base_url,
        timeout=settings.skyfi_timeout_seconds,
        retries=settings.skyfi_transport_retries,
    )


def create_server(registry: ToolRegistry) -> Server:
    """
    Create the MCP SDK server bound to a populated registry.

    Parameters
    ----------
    registry : ToolRegistry
        Registry holding every tool; not modified afterwards

    Returns
    -------
    Server
        Low-level MCP server with ``tools/list`` and ``tools/call`` handlers
    """
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [definition.to_tool() for definition in registry.list_tools()]

    # Arguments are validated by the registry's own models.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        response = await dispatch(registry, name, arguments)
        if response.is_error:
            raise ToolCallError(response.text)
        return response.content

    return server


async def serve(settings: Settings | None = None) -> None:
    """
    Build the registry and providers, then serve MCP over stdio.

    Parameters
    ----------
    settings : Settings or None, optional
        Configuration; read from the environment when omitted
    """
    settings = settings or get_settings()
    skyfi_client = build_skyfi_client(settings)
    registry = register_all_tools(ToolRegistry(), build_geocoder(settings), skyfi_client)
    server = create_server(registry)

    LOGGER.info("SkyFi MCP Server (stdio) started with %d tools", registry.size)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        if skyfi_client is not None:
            await skyfi_client.aclose()


def configure_logging(level: str) -> None:
    # stdout carries the MCP protocol
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """
    Main server entry point.

    Configures logging on stderr and runs the stdio server until the
    client disconnects.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
