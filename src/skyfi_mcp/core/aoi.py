"""
Area-of-interest helpers: location parsing, WKT conversion and area.
"""

import json
import re
from datetime import date

from pyproj import Geod
from shapely import wkt
from shapely.errors import GEOSException
from shapely.geometry import Polygon, box, shape

# Half-width of the square built around a bare point (~100 m at the equator)
POINT_BUFFER_DEGREES = 0.001

_COORDINATE_PATTERN = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_GEOD = Geod(ellps="WGS84")


def validate_bbox(bbox: list[float]) -> list[float]:
    """
    Validate and normalize a bounding box.

    Args:
        bbox: [west, south, east, north]

    Returns:
        Normalized bbox

    Raises:
        ValueError: If bbox is invalid
    """
    if len(bbox) != 4:
        raise ValueError("Bbox must have 4 elements [west, south, east, north]")

    west, south, east, north = (float(value) for value in bbox)

    if west >= east:
        raise ValueError("West must be less than east")
    if south >= north:
        raise ValueError("South must be less than north")

    if not (-180 <= west <= 180 and -180 <= east <= 180):
        raise ValueError("Longitude must be between -180 and 180")
    if not (-90 <= south <= 90 and -90 <= north <= 90):
        raise ValueError("Latitude must be between -90 and 90")

    return [west, south, east, north]


def bbox_to_wkt(bbox: list[float]) -> str:
    """Convert ``[west, south, east, north]`` to a WKT POLYGON."""
    return box(*validate_bbox(bbox)).wkt


def _check_coordinates(lat: float, lon: float) -> None:
    if not -90 <= lat <= 90:
        raise ValueError(f"Invalid latitude: {lat}. Must be between -90 and 90.")
    if not -180 <= lon <= 180:
        raise ValueError(f"Invalid longitude: {lon}. Must be between -180 and 180.")


def point_to_wkt(lat: float, lon: float, buffer: float = POINT_BUFFER_DEGREES) -> str:
    """Square WKT POLYGON centred on a point."""
    _check_coordinates(lat, lon)
    return box(lon - buffer, lat - buffer, lon + buffer, lat + buffer).wkt


def _polygon_from_wkt(text: str) -> Polygon:
    try:
        geometry = wkt.loads(text)
    except GEOSException as e:
        raise ValueError(f"Invalid WKT POLYGON: {e}") from e
    if not isinstance(geometry, Polygon) or geometry.is_empty:
        raise ValueError("WKT geometry must be a non-empty POLYGON")
    return geometry


def parse_location_to_wkt(location: str) -> str:
    """
    Convert a user supplied location into a WKT POLYGON.

    Accepted forms:
        "37.7749,-122.4194"               -> ~100 m square around the point
        '{"type": "Point", ...}'           -> ~100 m square around the point
        '{"type": "Polygon", ...}'         -> the polygon
        "POLYGON ((...))"                  -> validated and returned as WKT

    Args:
        location: Coordinates, GeoJSON string or WKT POLYGON

    Returns:
        WKT POLYGON string

    Raises:
        ValueError: If the location cannot be parsed or is out of range
    """
    text = location.strip()
    if not text:
        raise ValueError("Location is required")

    if text.upper().startswith("POLYGON"):
        return _polygon_from_wkt(text).wkt

    match = _COORDINATE_PATTERN.match(text)
    if match:
        return point_to_wkt(float(match.group(1)), float(match.group(2)))

    if text.startswith("{"):
        try:
            geojson = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid GeoJSON format: {e}") from e

        if not isinstance(geojson, dict) or "coordinates" not in geojson:
            raise ValueError("GeoJSON geometry must be an object with type and coordinates")

        geometry_type = geojson.get("type")
        try:
            if geometry_type == "Point":
                lon, lat = geojson["coordinates"][:2]
                return point_to_wkt(float(lat), float(lon))
            if geometry_type == "Polygon":
                polygon = shape(geojson)
                if polygon.is_empty:
                    raise ValueError("GeoJSON Polygon has no coordinates")
                return polygon.wkt
        except (KeyError, TypeError, IndexError, GEOSException) as e:
            raise ValueError(f"Invalid GeoJSON {geometry_type} coordinates: {e}") from e
        raise ValueError(f"Invalid GeoJSON type: {geometry_type}. Must be Point or Polygon.")

    raise ValueError(
        f'Invalid location format: "{location}". '
        "Please provide coordinates (lat,lng), GeoJSON, or WKT POLYGON."
    )


def calculate_area_km2(polygon_wkt: str) -> float:
    """
    Geodesic area of a WKT POLYGON on the WGS84 ellipsoid.

    Args:
        polygon_wkt: WKT POLYGON in lon/lat degrees

    Returns:
        Area in square kilometres
    """
    area, _ = _GEOD.geometry_area_perimeter(_polygon_from_wkt(polygon_wkt))
    return abs(area) / 1_000_000


def validate_date(value: str, field_name: str) -> str:
    """
    Check an ISO 8601 calendar date (``YYYY-MM-DD``).

    Raises:
        ValueError: If the value is malformed or not a real date
    """
    if not _DATE_PATTERN.match(value):
        raise ValueError(
            f'Invalid {field_name} format: "{value}". Expected ISO 8601 date format (YYYY-MM-DD).'
        )
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f'Invalid {field_name}: "{value}" is not a valid date.') from e
    return value
