"""
Nominatim geocoding client (address <-> coordinates).
"""

import asyncio
import logging
from typing import Any

from geopy.exc import GeopyError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

from .cache import DEFAULT_TTL_SECONDS, TTLCache

LOGGER = logging.getLogger(__name__)

DEFAULT_GEOCODE_LIMIT = 1
DEFAULT_REVERSE_ZOOM = 18
DEFAULT_LANGUAGE = "en"


class GeocodingError(Exception):
    """Raised when Nominatim fails or has no answer for a coordinate."""


def parse_bounding_box(boundingbox: list[str]) -> dict[str, float]:
    """
    Convert a Nominatim bounding box to named float edges.

    Parameters
    ----------
    boundingbox : list[str]
        ``[south, north, west, east]`` as numeric strings

    Returns
    -------
    dict[str, float]
        ``south``, ``north``, ``west`` and ``east``
    """
    south, north, west, east = (float(value) for value in boundingbox)
    return {"south": south, "north": north, "west": west, "east": east}


class NominatimGeocoder:
    """
    Rate limited, cached wrapper around geopy's Nominatim geocoder.

    geopy is blocking, so each lookup runs in a worker thread.

    Parameters
    ----------
    user_agent : str, optional
        User agent required by the Nominatim usage policy
    domain : str, optional
        Nominatim host
    timeout : float, optional
        Per-request timeout in seconds
    min_delay_seconds : float, optional
        Minimum delay between requests
    max_retries : int, optional
        Retries geopy performs on provider service errors
    cache : TTLCache or None, optional
        Response cache; ``None`` creates a 24h cache
    use_cache : bool, optional
        Disable to always hit the provider
    geolocator : object or None, optional
        Pre-built geopy geocoder (tests inject fakes here)
    """

    def __init__(
        self,
        user_agent: str = "skyfi-mcp",
        domain: str = "nominatim.openstreetmap.org",
        timeout: float = 10.0,
        min_delay_seconds: float = 1.0,
        max_retries: int = 2,
        cache: TTLCache | None = None,
        use_cache: bool = True,
        geolocator: Any | None = None,
    ) -> None:
        self.geolocator = geolocator or Nominatim(
            user_agent=user_agent,
            domain=domain,
            timeout=timeout,
        )
        self._geocode = RateLimiter(
            self.geolocator.geocode,
            min_delay_seconds=min_delay_seconds,
            max_retries=max_retries,
            swallow_exceptions=False,
        )
        self._reverse = RateLimiter(
            self.geolocator.reverse,
            min_delay_seconds=min_delay_seconds,
            max_retries=max_retries,
            swallow_exceptions=False,
        )
        self.cache = cache if cache is not None else TTLCache(DEFAULT_TTL_SECONDS)
        self.use_cache = use_cache

    async def geocode(
        self,
        query: str,
        limit: int | None = None,
        country: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Geocode a free-text address.

        Parameters
        ----------
        query : str
            Address or place name
        limit : int or None, optional
            Maximum number of results (default 1)
        country : str or None, optional
            ISO 3166-1 alpha-2 country filter

        Returns
        -------
        list[dict[str, Any]]
            Raw Nominatim records, possibly empty

        Raises
        ------
        GeocodingError
            If the Nominatim request fails
        """
        params = {"query": query, "limit": limit or DEFAULT_GEOCODE_LIMIT, "country": country}
        if self.use_cache:
            cached = self.cache.get("geocode", params)
            if cached is not None:
                LOGGER.debug("Geocode cache hit: %s", query)
                return cached

        LOGGER.debug("Nominatim search: %s", query)
        try:
            locations = await asyncio.to_thread(
                self._geocode,
                query,
                exactly_one=False,
                limit=params["limit"],
                addressdetails=True,
                country_codes=country,
                language=DEFAULT_LANGUAGE,
            )
        except GeopyError as e:
            raise GeocodingError(f"Nominatim geocoding failed: {e}") from e

        results = [location.raw for location in locations or []]
        if self.use_cache:
            self.cache.set("geocode", params, results)
        return results

    async def reverse_geocode(
        self,
        lat: float,
        lon: float,
        zoom: int | None = None,
    ) -> dict[str, Any]:
        """
        Resolve coordinates to an address.

        Parameters
        ----------
        lat : float
            Latitude in degrees
        lon : float
            Longitude in degrees
        zoom : int or None, optional
            Detail level 3-18; ``DEFAULT_REVERSE_ZOOM`` when omitted

        Returns
        -------
        dict[str, Any]
            Raw Nominatim record

        Raises
        ------
        GeocodingError
            If the request fails or no address exists at the coordinate
        """
        params = {"lat": lat, "lon": lon, "zoom": zoom or DEFAULT_REVERSE_ZOOM}
        if self.use_cache:
            cached = self.cache.get("reverse", params)
            if cached is not None:
                return cached

        LOGGER.debug("Nominatim reverse: %s,%s zoom=%s", lat, lon, params["zoom"])
        try:
            location = await asyncio.to_thread(
                self._reverse,
                (lat, lon),
                exactly_one=True,
                addressdetails=True,
                zoom=params["zoom"],
                language=DEFAULT_LANGUAGE,
            )
        except GeopyError as e:
            raise GeocodingError(f"Nominatim reverse geocoding failed: {e}") from e

        if location is None:
            raise GeocodingError(f"No address found at coordinates {lat}, {lon}")

        if self.use_cache:
            self.cache.set("reverse", params, location.raw)
        return location.raw

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> dict[str, int]:
        return self.cache.stats()
