"""
Core utilities for the SkyFi MCP server.
"""

from skyfi_mcp.core.aoi import (
    bbox_to_wkt,
    calculate_area_km2,
    parse_location_to_wkt,
    point_to_wkt,
    validate_bbox,
    validate_date,
)
from skyfi_mcp.core.cache import TTLCache
from skyfi_mcp.core.geocoding import (
    DEFAULT_REVERSE_ZOOM,
    GeocodingError,
    NominatimGeocoder,
    parse_bounding_box,
)
from skyfi_mcp.core.skyfi_client import SkyFiApiError, SkyFiClient

__all__ = [
    "DEFAULT_REVERSE_ZOOM",
    "GeocodingError",
    "NominatimGeocoder",
    "SkyFiApiError",
    "SkyFiClient",
    "TTLCache",
    "bbox_to_wkt",
    "calculate_area_km2",
    "parse_bounding_box",
    "parse_location_to_wkt",
    "point_to_wkt",
    "validate_bbox",
    "validate_date",
]
