"""
Order tools: place archive orders, check status and list orders.
"""

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.aoi import calculate_area_km2
from ..core.skyfi_client import SkyFiApiError, SkyFiClient
from ..protocol import ToolCallResponse, ToolDefinition, ToolRegistry, json_response
from .common import (
    LOCATION_DESCRIPTION,
    handle_skyfi_error,
    location_to_wkt,
    normalize_archive,
    normalize_order,
    require_client,
)

LOGGER = logging.getLogger(__name__)

DeliveryDriver = Literal["S3", "GS", "AZURE", "NONE"]
OrderType = Literal["ARCHIVE", "TASKING"]


class PlaceArchiveOrderInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    archive_id: str = Field(
        ..., min_length=1, description="Archive to order (from search_archives results)"
    )
    location: str = Field(
        ..., min_length=1, description=f"Area to clip the order to. {LOCATION_DESCRIPTION}"
    )
    delivery_driver: DeliveryDriver = Field(
        "NONE",
        description="Cloud storage driver for delivery; NONE keeps the order on the SkyFi platform",
    )
    delivery_bucket: str | None = Field(None, description="Bucket for S3/GS/AZURE delivery")
    delivery_path: str | None = Field(None, description="Path within the delivery bucket")
    webhook_url: str | None = Field(None, description="URL notified on order status changes")

    @field_validator("location")
    @classmethod
    def location_as_wkt(cls, value: str) -> str:
        return location_to_wkt(value)

    @model_validator(mode="after")
    def check_delivery(self) -> "PlaceArchiveOrderInput":
        if self.delivery_driver != "NONE" and not self.delivery_bucket:
            raise ValueError(f"delivery_bucket is required for {self.delivery_driver} delivery")
        return self

    def to_request(self) -> dict[str, Any]:
        request: dict[str, Any] = {
            "aoi": self.location,
            "archiveId": self.archive_id,
            "deliveryDriver": self.delivery_driver,
        }
        if self.delivery_bucket:
            delivery_params = {"bucket": self.delivery_bucket}
            if self.delivery_path:
                delivery_params["path"] = self.delivery_path
            request["deliveryParams"] = delivery_params
        if self.webhook_url:
            request["webhookUrl"] = self.webhook_url
        return request


class GetOrderStatusInput(BaseModel):
    order_id: str = Field(..., min_length=1, description="Order identifier")


class ListOrdersInput(BaseModel):
    order_type: OrderType | None = Field(None, description="Filter by ARCHIVE or TASKING")
    page_number: int = Field(0, ge=0, description="Zero-based page number")
    page_size: int = Field(10, ge=1, le=100, description="Orders per page (default: 10)")


def check_order_area(archive: dict[str, Any], area_km2: float) -> str | None:
    """
    Check an AOI area against the archive's orderable size range.

    Returns
    -------
    str or None
        Reason the order is not possible, ``None`` when it is
    """
    minimum = archive.get("min_square_kms")
    maximum = archive.get("max_square_kms")
    if maximum is not None and area_km2 > maximum:
        return (
            f"AOI area {area_km2:.2f} km2 exceeds the maximum of {maximum} km2 "
            f"for archive {archive.get('archive_id')}"
        )
    if minimum is not None and area_km2 < minimum:
        return (
            f"AOI area {area_km2:.2f} km2 is below the minimum of {minimum} km2 "
            f"for archive {archive.get('archive_id')}"
        )
    return None


def estimate_order_cost(archive: dict[str, Any], area_km2: float) -> float | None:
    """Price of the order, billed on at least the archive's minimum area."""
    price = archive.get("price_for_one_square_km")
    if price is None:
        return None
    billable_area = max(area_km2, archive.get("min_square_kms") or 0)
    return round(billable_area * price, 2)


async def place_archive_order(
    params: PlaceArchiveOrderInput, client: SkyFiClient
) -> dict[str, Any]:
    """
    Order existing archive imagery clipped to an AOI.

    The archive is fetched first so that out-of-range AOIs are refused
    before anything is billed.

    Parameters
    ----------
    params : PlaceArchiveOrderInput
        Validated arguments; ``location`` already holds WKT
    client : SkyFiClient
        SkyFi API client

    Returns
    -------
    dict[str, Any]
        ``{success, order, area_km2, estimated_cost}`` or a failure result
    """
    try:
        archive = normalize_archive(await client.get_archive(params.archive_id))
        area_km2 = calculate_area_km2(params.location)

        problem = check_order_area(archive, area_km2)
        if problem:
            return {"success": False, "error": problem, "area_km2": round(area_km2, 4)}

        LOGGER.info("Placing archive order for %s (%.2f km2)", params.archive_id, area_km2)
        order = normalize_order(await client.place_archive_order(params.to_request()))
    except SkyFiApiError as e:
        return handle_skyfi_error(e)

    return {
        "success": True,
        "order": order,
        "area_km2": round(area_km2, 4),
        "estimated_cost": estimate_order_cost(archive, area_km2),
        "message": f"Archive order {order['id']} has been placed successfully",
    }


async def get_order_status(params: GetOrderStatusInput, client: SkyFiClient) -> dict[str, Any]:
    try:
        order = await client.get_order(params.order_id)
    except SkyFiApiError as e:
        return handle_skyfi_error(e)
    return {"success": True, "order": normalize_order(order)}


async def list_orders(params: ListOrdersInput, client: SkyFiClient) -> dict[str, Any]:
    try:
        response = await client.list_orders(
            order_type=params.order_type,
            page_number=params.page_number,
            page_size=params.page_size,
        )
    except SkyFiApiError as e:
        return handle_skyfi_error(e)

    orders = [normalize_order(order) for order in response.get("orders") or []]
    return {
        "success": True,
        "orders": orders,
        "count": len(orders),
        "total": response.get("total", len(orders)),
    }


PLACE_ARCHIVE_ORDER_DEFINITION = ToolDefinition.from_model(
    "place_archive_order",
    "Place an order for existing archive imagery clipped to an area of interest. "
    "Use search_archives first to find an archive_id. This places a billable order.",
    PlaceArchiveOrderInput,
)

GET_ORDER_STATUS_DEFINITION = ToolDefinition.from_model(
    "get_order_status",
    "Get the current status and details of an order.",
    GetOrderStatusInput,
)

LIST_ORDERS_DEFINITION = ToolDefinition.from_model(
    "list_orders",
    "List previously placed orders, optionally filtered by order type.",
    ListOrdersInput,
)


def register_order_tools(registry: ToolRegistry, client: SkyFiClient | None) -> None:
    async def order_handler(params: PlaceArchiveOrderInput) -> ToolCallResponse:
        return json_response(await place_archive_order(params, require_client(client)))

    async def status_handler(params: GetOrderStatusInput) -> ToolCallResponse:
        return json_response(await get_order_status(params, require_client(client)))

    async def list_handler(params: ListOrdersInput) -> ToolCallResponse:
        return json_response(await list_orders(params, require_client(client)))

    registry.register(PLACE_ARCHIVE_ORDER_DEFINITION, order_handler)
    registry.register(GET_ORDER_STATUS_DEFINITION, status_handler)
    registry.register(LIST_ORDERS_DEFINITION, list_handler)
