"""
Tests for the SkyFi API client against ``httpx.MockTransport``.
"""

import json

import httpx
import pytest

from skyfi_mcp.core import SkyFiApiError
from skyfi_mcp.core.skyfi_client import API_KEY_HEADER

from .conftest import make_skyfi_client


@pytest.mark.asyncio
async def test_requests_carry_api_key_and_json_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"archives": [], "total": 0})

    client = make_skyfi_client(handler, api_key="secret")
    response = await client.search_archives({"aoi": "POLYGON ((0 0, 1 0, 1 1, 0 1, 0 0))"})

    assert response == {"archives": [], "total": 0}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/platform-api/archives"
    assert request.headers[API_KEY_HEADER] == "secret"
    assert json.loads(request.content)["aoi"].startswith("POLYGON")
    await client.aclose()


@pytest.mark.asyncio
async def test_paths_and_query_parameters() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = make_skyfi_client(handler)
    await client.get_archives_page("abc123")
    await client.get_archive("arch-1")
    await client.get_order("order-9")
    await client.list_orders(order_type="ARCHIVE", page_number=2, page_size=5)
    await client.list_orders()

    assert [(r.method, r.url.path) for r in seen] == [
        ("GET", "/platform-api/archives"),
        ("GET", "/platform-api/archives/arch-1"),
        ("GET", "/platform-api/orders/order-9"),
        ("GET", "/platform-api/orders"),
        ("GET", "/platform-api/orders"),
    ]
    assert seen[0].url.params["page"] == "abc123"
    assert dict(seen[3].url.params) == {"pageNumber": "2", "pageSize": "5", "orderType": "ARCHIVE"}
    assert "orderType" not in seen[4].url.params


@pytest.mark.asyncio
async def test_pricing_body_with_and_without_aoi() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"productTypes": []})

    client = make_skyfi_client(handler)
    await client.get_pricing()
    await client.get_pricing("POLYGON ((0 0, 1 0, 1 1, 0 1, 0 0))")

    assert bodies[0] == {}
    assert bodies[1] == {"aoi": "POLYGON ((0 0, 1 0, 1 1, 0 1, 0 0))"}


@pytest.mark.asyncio
async def test_empty_body_returns_empty_dict() -> None:
    client = make_skyfi_client(lambda request: httpx.Response(204))

    assert await client.get_order("order-1") == {}


@pytest.mark.asyncio
async def test_non_json_success_body_is_api_error() -> None:
    client = make_skyfi_client(
        lambda request: httpx.Response(200, text="<html>maintenance</html>")
    )

    with pytest.raises(SkyFiApiError) as exc_info:
        await client.get_archive("a")

    assert exc_info.value.code == "INVALID_RESPONSE"
    assert exc_info.value.status_code == 200
    assert exc_info.value.is_auth_error is False


@pytest.mark.asyncio
async def test_error_body_is_mapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422,
            json={
                "code": "INVALID_AOI",
                "message": "AOI is too large",
                "details": {"max_sqkm": 500},
            },
        )

    client = make_skyfi_client(handler)

    with pytest.raises(SkyFiApiError) as exc_info:
        await client.place_archive_order({"archiveId": "a"})

    error = exc_info.value
    assert error.code == "INVALID_AOI"
    assert error.message == "AOI is too large"
    assert error.status_code == 422
    assert error.details == {"max_sqkm": 500}
    assert error.is_auth_error is False


@pytest.mark.asyncio
async def test_error_without_json_body_uses_reason_phrase() -> None:
    client = make_skyfi_client(lambda request: httpx.Response(502, text="<html>bad</html>"))

    with pytest.raises(SkyFiApiError) as exc_info:
        await client.get_archive("a")

    assert exc_info.value.code == "API_ERROR"
    assert exc_info.value.message == "Bad Gateway"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_detail_field_used_as_message() -> None:
    client = make_skyfi_client(
        lambda request: httpx.Response(401, json={"detail": "Invalid API key"})
    )

    with pytest.raises(SkyFiApiError) as exc_info:
        await client.get_order("a")

    assert exc_info.value.message == "Invalid API key"
    assert exc_info.value.is_auth_error is True


@pytest.mark.parametrize(("header", "expected"), [("30", 30), ("1.5", 1), ("soon", None)])
@pytest.mark.asyncio
async def test_rate_limit_parses_retry_after(header: str, expected: int | None) -> None:
    client = make_skyfi_client(
        lambda request: httpx.Response(429, headers={"Retry-After": header}, json={})
    )

    with pytest.raises(SkyFiApiError) as exc_info:
        await client.list_orders()

    assert exc_info.value.is_rate_limited is True
    assert exc_info.value.retry_after == expected


@pytest.mark.asyncio
async def test_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_skyfi_client(handler)

    with pytest.raises(SkyFiApiError) as exc_info:
        await client.get_archive("a")

    assert exc_info.value.code == "NETWORK_ERROR"
    assert exc_info.value.status_code == 0
    assert "connection refused" in exc_info.value.message
