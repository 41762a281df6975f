"""
Archive imagery tools: search, pagination and archive details.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.aoi import validate_date
from ..core.skyfi_client import SkyFiApiError, SkyFiClient
from ..protocol import ToolCallResponse, ToolDefinition, ToolRegistry, json_response
from .common import (
    LOCATION_DESCRIPTION,
    handle_skyfi_error,
    location_to_wkt,
    normalize_archive,
    require_client,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class SearchArchivesInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    location: str = Field(..., min_length=1, description=LOCATION_DESCRIPTION)
    start_date: str | None = Field(None, description="Start date (YYYY-MM-DD)")
    end_date: str | None = Field(None, description="End date (YYYY-MM-DD)")
    max_cloud_coverage: float | None = Field(
        None, ge=0, le=100, description="Maximum cloud coverage percentage (0-100)"
    )
    max_off_nadir_angle: float | None = Field(
        None, ge=0, le=90, description="Maximum off-nadir angle in degrees"
    )
    resolutions: list[str] | None = Field(
        None, description='Resolution classes, e.g. ["HIGH", "VERY HIGH"]'
    )
    product_types: list[str] | None = Field(
        None, description='Product types, e.g. ["DAY", "SAR"]'
    )
    providers: list[str] | None = Field(None, description="Restrict to these providers")
    open_data: bool | None = Field(None, description="Only return free/open data imagery")
    page_size: int = Field(
        DEFAULT_PAGE_SIZE, ge=1, le=100, description="Results per page (default: 10)"
    )

    @field_validator("location")
    @classmethod
    def location_as_wkt(cls, value: str) -> str:
        return location_to_wkt(value)

    @field_validator("start_date")
    @classmethod
    def check_start_date(cls, value: str | None) -> str | None:
        return validate_date(value, "start_date") if value else None

    @field_validator("end_date")
    @classmethod
    def check_end_date(cls, value: str | None) -> str | None:
        return validate_date(value, "end_date") if value else None

    @model_validator(mode="after")
    def check_date_range(self) -> "SearchArchivesInput":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def to_request(self) -> dict[str, Any]:
        """Build the SkyFi ``/archives`` request body."""
        request: dict[str, Any] = {"aoi": self.location, "pageSize": self.page_size}
        if self.start_date:
            request["fromDate"] = f"{self.start_date}T00:00:00Z"
        if self.end_date:
            request["toDate"] = f"{self.end_date}T23:59:59Z"
        optional = {
            "maxCloudCoveragePercent": self.max_cloud_coverage,
            "maxOffNadirAngle": self.max_off_nadir_angle,
            "resolutions": self.resolutions,
            "productTypes": self.product_types,
            "providers": self.providers,
            "openData": self.open_data,
        }
        request.update({key: value for key, value in optional.items() if value is not None})
        return request


class GetArchivesPageInput(BaseModel):
    page: str = Field(
        ..., min_length=1, description="next_page value from a previous search_archives result"
    )


class GetArchiveInput(BaseModel):
    archive_id: str = Field(
        ..., min_length=1, description="Archive identifier from search results"
    )


def _format_search(response: dict[str, Any]) -> dict[str, Any]:
    archives = [normalize_archive(archive) for archive in response.get("archives") or []]
    return {
        "success": True,
        "archives": archives,
        "count": len(archives),
        "total": response.get("total", len(archives)),
        "next_page": response.get("nextPage"),
    }


async def search_archives(params: SearchArchivesInput, client: SkyFiClient) -> dict[str, Any]:
    """
    Search the SkyFi archive for existing imagery over an AOI.

    Parameters
    ----------
    params : SearchArchivesInput
        Validated arguments; ``location`` already holds WKT
    client : SkyFiClient
        SkyFi API client

    Returns
    -------
    dict[str, Any]
        ``{success, archives, count, total, next_page}`` or a failure result
    """
    try:
        response = await client.search_archives(params.to_request())
    except SkyFiApiError as e:
        return handle_skyfi_error(e)

    result = _format_search(response)
    if not result["archives"]:
        return {
            "success": False,
            "error": f"No archive imagery found for location: {params.location}",
        }
    return result


async def get_archives_page(params: GetArchivesPageInput, client: SkyFiClient) -> dict[str, Any]:
    try:
        response = await client.get_archives_page(params.page)
    except SkyFiApiError as e:
        return handle_skyfi_error(e)
    return _format_search(response)


async def get_archive(params: GetArchiveInput, client: SkyFiClient) -> dict[str, Any]:
    try:
        archive = await client.get_archive(params.archive_id)
    except SkyFiApiError as e:
        return handle_skyfi_error(e)
    return {"success": True, "archive": normalize_archive(archive)}


SEARCH_ARCHIVES_DEFINITION = ToolDefinition.from_model(
    "search_archives",
    "Search the SkyFi satellite imagery archive by location, date range, cloud "
    "coverage, off-nadir angle, resolution, product type and provider.",
    SearchArchivesInput,
)

GET_ARCHIVES_PAGE_DEFINITION = ToolDefinition.from_model(
    "get_archives_page",
    "Fetch the next page of a previous search_archives call using its next_page value.",
    GetArchivesPageInput,
)

GET_ARCHIVE_DEFINITION = ToolDefinition.from_model(
    "get_archive",
    "Get full details (capture metadata, footprint, pricing, delivery time) "
    "for one archive image by its archive_id.",
    GetArchiveInput,
)


def register_archive_tools(registry: ToolRegistry, client: SkyFiClient | None) -> None:
    """Register archive tools; calls fail with AUTH_INVALID when ``client`` is None."""

    async def search_handler(params: SearchArchivesInput) -> ToolCallResponse:
        return json_response(await search_archives(params, require_client(client)))

    async def page_handler(params: GetArchivesPageInput) -> ToolCallResponse:
        return json_response(await get_archives_page(params, require_client(client)))

    async def archive_handler(params: GetArchiveInput) -> ToolCallResponse:
        return json_response(await get_archive(params, require_client(client)))

    registry.register(SEARCH_ARCHIVES_DEFINITION, search_handler)
    registry.register(GET_ARCHIVES_PAGE_DEFINITION, page_handler)
    registry.register(GET_ARCHIVE_DEFINITION, archive_handler)
