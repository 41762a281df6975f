"""
Pricing tool.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.aoi import calculate_area_km2
from ..core.skyfi_client import SkyFiApiError, SkyFiClient
from ..protocol import ToolCallResponse, ToolDefinition, ToolRegistry, json_response
from .common import LOCATION_DESCRIPTION, handle_skyfi_error, location_to_wkt, require_client


class GetPricingInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    location: str | None = Field(
        None,
        description=f"Optional area of interest. {LOCATION_DESCRIPTION}",
    )

    @field_validator("location")
    @classmethod
    def location_as_wkt(cls, value: str | None) -> str | None:
        return location_to_wkt(value or None)


async def get_pricing(params: GetPricingInput, client: SkyFiClient) -> dict[str, Any]:
    """
    Fetch SkyFi pricing, scoped to an AOI when one is given.

    Parameters
    ----------
    params : GetPricingInput
        Validated arguments
    client : SkyFiClient
        SkyFi API client

    Returns
    -------
    dict[str, Any]
        ``{success, pricing}`` plus ``aoi`` and ``area_km2`` for AOI queries
    """
    try:
        pricing = await client.get_pricing(params.location)
    except SkyFiApiError as e:
        return handle_skyfi_error(e)

    result: dict[str, Any] = {"success": True, "pricing": pricing}
    if params.location:
        result["aoi"] = params.location
        result["area_km2"] = round(calculate_area_km2(params.location), 4)
    return result


GET_PRICING_DEFINITION = ToolDefinition.from_model(
    "get_pricing",
    "Get SkyFi pricing options per product type, resolution and provider. "
    "Pass a location to get pricing and the area in km2 for that AOI.",
    GetPricingInput,
)


def register_pricing_tools(registry: ToolRegistry, client: SkyFiClient | None) -> None:
    async def pricing_handler(params: GetPricingInput) -> ToolCallResponse:
        return json_response(await get_pricing(params, require_client(client)))

    registry.register(GET_PRICING_DEFINITION, pricing_handler)
