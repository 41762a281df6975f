"""
Shared helpers for the SkyFi imagery tools.
"""

from typing import Any

from ..core.aoi import parse_location_to_wkt
from ..core.skyfi_client import SkyFiApiError, SkyFiClient
from ..protocol import auth_invalid, rate_limited

DEFAULT_RETRY_AFTER_SECONDS = 60

# SkyFi response key -> tool output key
ARCHIVE_FIELDS = {
    "archiveId": "archive_id",
    "provider": "provider",
    "constellation": "constellation",
    "productType": "product_type",
    "resolution": "resolution",
    "platformResolution": "platform_resolution",
    "gsd": "gsd",
    "captureTimestamp": "capture_timestamp",
    "cloudCoveragePercent": "cloud_coverage_percent",
    "offNadirAngle": "off_nadir_angle",
    "footprint": "footprint",
    "minSquareKms": "min_square_kms",
    "maxSquareKms": "max_square_kms",
    "priceForOneSquareKm": "price_for_one_square_km",
    "deliveryTimeHours": "delivery_time_hours",
    "thumbnailUrls": "thumbnail_urls",
}

ORDER_FIELDS = {
    "orderType": "order_type",
    "status": "status",
    "archiveId": "archive_id",
    "aoi": "aoi",
    "aoiSqkm": "aoi_sqkm",
    "orderCost": "order_cost",
    "price": "price",
    "currency": "currency",
    "deliveryDriver": "delivery_driver",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "estimatedDelivery": "estimated_delivery",
    "progress": "progress",
    "deliverables": "deliverables",
    "errorMessage": "error_message",
}


def require_client(client: SkyFiClient | None) -> SkyFiClient:
    """Return the configured client, or fail with ``AUTH_INVALID``."""
    if client is None:
        raise auth_invalid("SKYFI_API_KEY environment variable is not set on the server")
    return client


def handle_skyfi_error(error: SkyFiApiError) -> dict[str, Any]:
    """
    Map a SkyFi failure onto the right error channel.

    Rejected credentials and throttling are protocol-level and raised as
    ``MCPException``; everything else becomes a ``success: False`` result.
    """
    if error.is_auth_error:
        raise auth_invalid(f"SkyFi rejected the API key: {error.message}") from error
    if error.is_rate_limited:
        raise rate_limited(error.retry_after or DEFAULT_RETRY_AFTER_SECONDS) from error
    result: dict[str, Any] = {
        "success": False,
        "error": error.message,
        "error_code": error.code,
        "status_code": error.status_code,
    }
    if error.details:
        result["details"] = error.details
    return result


def _pick(raw: dict[str, Any], fields: dict[str, str]) -> dict[str, Any]:
    return {target: raw[source] for source, target in fields.items() if source in raw}


def normalize_archive(raw: dict[str, Any]) -> dict[str, Any]:
    return _pick(raw, ARCHIVE_FIELDS)


def normalize_order(raw: dict[str, Any]) -> dict[str, Any]:
    order = {"id": raw.get("orderId") or raw.get("id")}
    order.update(_pick(raw, ORDER_FIELDS))
    return order


def location_to_wkt(value: str | None) -> str | None:
    """Field validator body: turn a location string into WKT (``None`` passes)."""
    if value is None:
        return None
    return parse_location_to_wkt(value)


LOCATION_DESCRIPTION = (
    'Location as coordinates "lat,lng" (e.g., "37.7749,-122.4194"), a GeoJSON '
    "Point/Polygon as a JSON string, or a WKT POLYGON."
)
