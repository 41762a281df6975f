"""
Geocoding tools: address to coordinates and coordinates to address.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.geocoding import NominatimGeocoder, parse_bounding_box
from ..protocol import ToolCallResponse, ToolDefinition, ToolRegistry, json_response

LOGGER = logging.getLogger(__name__)

ADDRESS_FIELDS = (
    "house_number",
    "road",
    "suburb",
    "city",
    "county",
    "state",
    "country",
    "country_code",
    "postcode",
)


class GeocodeLocationInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(..., min_length=1, description="Address or place name to geocode")
    limit: int = Field(1, ge=1, le=10, description="Maximum number of results (default: 1)")
    country: str | None = Field(
        None,
        min_length=2,
        max_length=2,
        description='ISO 3166-1 alpha-2 country code to limit results (e.g., "us", "gb")',
    )


class ReverseGeocodeInput(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude coordinate")
    zoom: int | None = Field(
        None,
        ge=3,
        le=18,
        description="Zoom level for detail (3-18, default: 18)",
    )


def _error_message(error: Exception) -> str:
    return str(error) or "Unknown error occurred"


def _format_geocode_result(raw: dict[str, Any]) -> dict[str, Any]:
    result = {
        "display_name": raw.get("display_name"),
        "latitude": float(raw["lat"]),
        "longitude": float(raw["lon"]),
        "type": raw.get("type"),
        "importance": raw.get("importance"),
        "address": raw.get("address"),
    }
    if raw.get("boundingbox"):
        result["bounding_box"] = parse_bounding_box(raw["boundingbox"])
    return result


async def geocode_location(
    params: GeocodeLocationInput, geocoder: NominatimGeocoder
) -> dict[str, Any]:
    """
    Geocode an address.

    "Found nothing" is reported as ``success: False`` rather than an empty
    success list, and provider failures never escape as exceptions.

    Parameters
    ----------
    params : GeocodeLocationInput
        Validated arguments
    geocoder : NominatimGeocoder
        Provider client

    Returns
    -------
    dict[str, Any]
        ``{success, results, count}`` or ``{success: False, error}``
    """
    try:
        results = await geocoder.geocode(params.address, limit=params.limit, country=params.country)
        if not results:
            return {
                "success": False,
                "error": f"No results found for address: {params.address}",
            }

        formatted = [_format_geocode_result(result) for result in results]
        return {"success": True, "results": formatted, "count": len(formatted)}
    except Exception as e:
        LOGGER.warning("Geocoding failed for %r: %s", params.address, e)
        return {"success": False, "error": _error_message(e)}


async def reverse_geocode(
    params: ReverseGeocodeInput, geocoder: NominatimGeocoder
) -> dict[str, Any]:
    """
    Resolve coordinates to a structured address.

    Parameters
    ----------
    params : ReverseGeocodeInput
        Validated arguments
    geocoder : NominatimGeocoder
        Provider client

    Returns
    -------
    dict[str, Any]
        Place name, coordinates and address breakdown, or
        ``{success: False, error}``
    """
    try:
        result = await geocoder.reverse_geocode(params.latitude, params.longitude, zoom=params.zoom)
        address = result.get("address") or {}
        return {
            "success": True,
            "display_name": result.get("display_name"),
            "latitude": float(result["lat"]),
            "longitude": float(result["lon"]),
            "type": result.get("type"),
            "address": {field: address.get(field) for field in ADDRESS_FIELDS},
        }
    except Exception as e:
        LOGGER.warning(
            "Reverse geocoding failed for %s,%s: %s", params.latitude, params.longitude, e
        )
        return {"success": False, "error": _error_message(e)}


GEOCODE_LOCATION_DEFINITION = ToolDefinition.from_model(
    "geocode_location",
    "Convert an address or place name into coordinates, a bounding box and a "
    "structured address using OpenStreetMap Nominatim.",
    GeocodeLocationInput,
)

REVERSE_GEOCODE_DEFINITION = ToolDefinition.from_model(
    "reverse_geocode",
    "Convert latitude/longitude coordinates into the nearest address using "
    "OpenStreetMap Nominatim.",
    ReverseGeocodeInput,
)


def register_geocode_tools(registry: ToolRegistry, geocoder: NominatimGeocoder) -> None:
    """Register the geocoding tools bound to ``geocoder``."""

    async def geocode_handler(params: GeocodeLocationInput) -> ToolCallResponse:
        return json_response(await geocode_location(params, geocoder))

    async def reverse_handler(params: ReverseGeocodeInput) -> ToolCallResponse:
        return json_response(await reverse_geocode(params, geocoder))

    registry.register(GEOCODE_LOCATION_DEFINITION, geocode_handler)
    registry.register(REVERSE_GEOCODE_DEFINITION, reverse_handler)
