"""
Async client for the SkyFi Platform API.
"""

import logging
from typing import Any

import httpx

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.skyfi.com/platform-api"
API_KEY_HEADER = "X-Skyfi-Api-Key"


class SkyFiApiError(Exception):
    """
    Raised for failed SkyFi API calls.

    Parameters
    ----------
    code : str
        Error code from the response body, or a client-side code
        (``API_ERROR``, ``NETWORK_ERROR``, ``INVALID_RESPONSE``)
    message : str
        Error message
    status_code : int
        HTTP status, 0 when no response was received
    details : dict or None
        Extra details from the response body
    retry_after : int or None
        Parsed ``Retry-After`` header on 429 responses
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.retry_after = retry_after

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


def _parse_retry_after(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return max(int(float(value)), 0)
    except ValueError:
        return None


def _error_from_response(response: httpx.Response) -> SkyFiApiError:
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    message = body.get("message") or body.get("detail") or response.reason_phrase
    if not isinstance(message, str):
        message = str(message)
    return SkyFiApiError(
        code=body.get("code") or "API_ERROR",
        message=message or f"SkyFi API returned HTTP {response.status_code}",
        status_code=response.status_code,
        details=body.get("details"),
        retry_after=_parse_retry_after(response.headers.get("Retry-After")),
    )


class SkyFiClient:
    """
    Thin wrapper over the SkyFi REST endpoints used by the imagery tools.

    Connection failures are retried by the httpx transport; HTTP errors
    are not retried.

    Parameters
    ----------
    api_key : str
        SkyFi API key
    base_url : str, optional
        API root
    timeout : float, optional
        Request timeout in seconds
    retries : int, optional
        Connection retries performed by the transport
    client : httpx.AsyncClient or None, optional
        Pre-built client (tests pass one backed by ``httpx.MockTransport``)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retries: int = 3,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=httpx.AsyncHTTPTransport(retries=retries),
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {
            API_KEY_HEADER: self.api_key,
            "Accept": "application/json",
        }
        LOGGER.debug("SkyFi API %s %s", method, path)
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            LOGGER.warning("SkyFi API network error on %s %s: %s", method, path, e)
            raise SkyFiApiError(
                "NETWORK_ERROR", f"Network error: Unable to reach SkyFi API ({e})", 0
            ) from e

        if response.is_error:
            error = _error_from_response(response)
            LOGGER.warning(
                "SkyFi API error %s on %s %s: %s",
                response.status_code,
                method,
                path,
                error.message,
            )
            raise error

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            LOGGER.warning("SkyFi API returned non-JSON body on %s %s", method, path)
            raise SkyFiApiError(
                "INVALID_RESPONSE",
                f"SkyFi API returned an invalid JSON response ({e})",
                response.status_code,
            ) from e

    # ==================== Archives ====================

    async def search_archives(self, request: dict[str, Any]) -> dict[str, Any]:
        """
        Search the imagery archive.

        Parameters
        ----------
        request : dict[str, Any]
            Search body (``aoi`` WKT plus optional filters)

        Returns
        -------
        dict[str, Any]
            ``archives``, ``total`` and optional ``nextPage``
        """
        return await self._request("POST", "/archives", json=request)

    async def get_archives_page(self, page: str) -> dict[str, Any]:
        """Fetch the next page of a previous search by its page hash."""
        return await self._request("GET", "/archives", params={"page": page})

    async def get_archive(self, archive_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/archives/{archive_id}")

    # ==================== Pricing ====================

    async def get_pricing(self, aoi: str | None = None) -> dict[str, Any]:
        """Fetch the product/provider pricing matrix, optionally for an AOI."""
        body = {"aoi": aoi} if aoi else {}
        return await self._request("POST", "/pricing", json=body)

    # ==================== Orders ====================

    async def place_archive_order(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/order-archive", json=request)

    async def get_order(self, order_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/orders/{order_id}")

    async def list_orders(
        self,
        order_type: str | None = None,
        page_number: int = 0,
        page_size: int = 10,
    ) -> dict[str, Any]:
        """
        List orders, newest first.

        Parameters
        ----------
        order_type : str or None, optional
            ``ARCHIVE`` or ``TASKING``
        page_number : int, optional
            Zero-based page
        page_size : int, optional
            Orders per page

        Returns
        -------
        dict[str, Any]
            ``orders`` and ``total``
        """
        params: dict[str, Any] = {"pageNumber": page_number, "pageSize": page_size}
        if order_type:
            params["orderType"] = order_type
        return await self._request("GET", "/orders", params=params)

    async def aclose(self) -> None:
        await self._client.aclose()
