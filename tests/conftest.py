"""
Test configuration and fixtures.

Provider doubles: ``FakeGeolocator`` stands in for geopy's Nominatim and
``make_skyfi_client`` builds a SkyFi client backed by ``httpx.MockTransport``.
"""

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from skyfi_mcp.core import NominatimGeocoder, SkyFiClient
from skyfi_mcp.protocol import ToolRegistry

SAN_FRANCISCO = {
    "place_id": "123",
    "display_name": "San Francisco, California, United States",
    "lat": "37.7792588",
    "lon": "-122.4193286",
    "type": "city",
    "importance": 0.92,
    "boundingbox": ["37.6403143", "37.9298443", "-123.1738530", "-122.2817730"],
    "address": {
        "city": "San Francisco",
        "state": "California",
        "country": "United States",
        "country_code": "us",
    },
}

FERRY_BUILDING = {
    "place_id": "456",
    "display_name": "Ferry Building, 1 Ferry Plaza, San Francisco, CA 94111, United States",
    "lat": "37.7955",
    "lon": "-122.3937",
    "type": "building",
    "address": {
        "house_number": "1",
        "road": "Ferry Plaza",
        "suburb": "Financial District",
        "city": "San Francisco",
        "county": "San Francisco",
        "state": "California",
        "country": "United States",
        "country_code": "us",
        "postcode": "94111",
    },
}


class FakeGeolocator:
    """Records calls and answers like geopy's ``Nominatim``."""

    def __init__(
        self,
        search_results: list[dict[str, Any]] | None = None,
        reverse_result: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.search_results = search_results or []
        self.reverse_result = reverse_result
        self.error = error
        self.calls: list[tuple[str, Any, dict[str, Any]]] = []

    def geocode(self, query, **kwargs):
        self.calls.append(("geocode", query, kwargs))
        if self.error is not None:
            raise self.error
        if not self.search_results:
            return None
        return [SimpleNamespace(raw=raw) for raw in self.search_results]

    def reverse(self, query, **kwargs):
        self.calls.append(("reverse", query, kwargs))
        if self.error is not None:
            raise self.error
        if self.reverse_result is None:
            return None
        return SimpleNamespace(raw=self.reverse_result)


def make_geocoder(geolocator: FakeGeolocator, **kwargs: Any) -> NominatimGeocoder:
    return NominatimGeocoder(min_delay_seconds=0, max_retries=0, geolocator=geolocator, **kwargs)


def make_skyfi_client(
    handler: Callable[[httpx.Request], httpx.Response],
    api_key: str = "test-key",
) -> SkyFiClient:
    base_url = "https://skyfi.test/platform-api"
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)
    return SkyFiClient(api_key=api_key, base_url=base_url, client=client)


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry()


@pytest.fixture
def geolocator() -> FakeGeolocator:
    return FakeGeolocator(search_results=[SAN_FRANCISCO], reverse_result=FERRY_BUILDING)


@pytest.fixture
def geocoder(geolocator: FakeGeolocator) -> NominatimGeocoder:
    return make_geocoder(geolocator)
