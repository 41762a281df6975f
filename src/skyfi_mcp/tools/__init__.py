"""
MCP tools and their registration.
"""

from skyfi_mcp.core.geocoding import NominatimGeocoder
from skyfi_mcp.core.skyfi_client import SkyFiClient
from skyfi_mcp.protocol import ToolRegistry
from skyfi_mcp.tools.archives import register_archive_tools
from skyfi_mcp.tools.geocode import register_geocode_tools
from skyfi_mcp.tools.orders import register_order_tools
from skyfi_mcp.tools.ping import register_ping_tool
from skyfi_mcp.tools.pricing import register_pricing_tools


def register_all_tools(
    registry: ToolRegistry,
    geocoder: NominatimGeocoder,
    skyfi_client: SkyFiClient | None,
) -> ToolRegistry:
    """
    Register every tool with ``registry``.

    Parameters
    ----------
    registry : ToolRegistry
        Registry to populate (normally empty)
    geocoder : NominatimGeocoder
        Provider for the geocoding tools
    skyfi_client : SkyFiClient or None
        Provider for the imagery tools; ``None`` when no API key is configured

    Returns
    -------
    ToolRegistry
        The populated registry
    """
    register_ping_tool(registry)
    register_geocode_tools(registry, geocoder)
    register_archive_tools(registry, skyfi_client)
    register_pricing_tools(registry, skyfi_client)
    register_order_tools(registry, skyfi_client)
    return registry


__all__ = ["register_all_tools"]
