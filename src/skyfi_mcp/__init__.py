"""
SkyFi MCP Server.

A Model Context Protocol (MCP) server exposing OpenStreetMap geocoding and
SkyFi satellite imagery search, pricing and ordering tools.
"""

from skyfi_mcp import core, protocol, tools

__all__ = ["core", "protocol", "tools"]
