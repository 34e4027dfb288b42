"""AMC Theatres vendor API client."""

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from amcmcp.config import settings
from amcmcp.exceptions import AMCAPIError, AMCClientError, AMCNetworkError
from amcmcp.schemas import Movie, Showtime, Theater
from amcmcp.services.envelopes import unwrap
from amcmcp.services.normalize import (
    movie_from_vendor,
    showtime_from_vendor,
    theater_from_location,
    theater_from_vendor,
)

logger = logging.getLogger(__name__)

LOCATIONS_REL = "https://api.amctheatres.com/rels/v2/locations"

RecordT = TypeVar("RecordT", Movie, Showtime, Theater)


def build_records(
    entries: Iterable[dict[str, Any]],
    build: Callable[[dict[str, Any]], RecordT],
    kind: str,
) -> list[RecordT]:
    """Normalise each vendor record, skipping (and logging) the ones that do not fit."""
    records: list[RecordT] = []
    for entry in entries:
        try:
            records.append(build(entry))
        except (ValidationError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed {kind} record: {e}")
    return records


class AMCClient:
    """
    Client for the AMC Theatres REST API.

    Every call is authenticated with the vendor key header. Non-2xx answers
    raise AMCAPIError, transport failures raise AMCNetworkError. Nothing is
    retried here; retry policy belongs to the caller.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the AMC client.

        Args:
            api_key: AMC vendor key (uses settings if not provided)
            base_url: API root (uses settings if not provided)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.api_key = api_key or settings.amc_api_key
        if not self.api_key:
            raise ValueError("AMC API key is required")

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.amc_api_base_url,
            timeout=timeout or settings.amc_api_timeout,
            headers={
                "X-AMC-Vendor-Key": self.api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.RequestError as e:
            raise AMCNetworkError(f"AMC API request to {path} failed: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text or None
            message = "AMC API request failed"
            if isinstance(body, dict) and body.get("message"):
                message = str(body["message"])
            raise AMCAPIError(response.status_code, message, details=body)

        try:
            return response.json()
        except ValueError as e:
            raise AMCAPIError(
                response.status_code, "AMC API returned a body that is not JSON"
            ) from e

    # ------------------------------------------------------------------
    # Movies
    # ------------------------------------------------------------------

    async def _fetch_movie_view(self, view: str) -> list[Movie]:
        payload = await self._get(f"/movies/views/{view}")
        return build_records(unwrap(payload, "movies"), movie_from_vendor, "movie")

    async def fetch_now_playing(self) -> list[Movie]:
        """Movies currently playing, whichever envelope the API wraps them in."""
        return await self._fetch_movie_view("now-playing")

    async def fetch_coming_soon(self) -> list[Movie]:
        return await self._fetch_movie_view("coming-soon")

    async def fetch_advance(self) -> list[Movie]:
        """Movies with advance ticket sales open."""
        return await self._fetch_movie_view("advance")

    async def fetch_all_active(self) -> list[Movie]:
        return await self._fetch_movie_view("all/active")

    async def fetch_movie_by_id(self, movie_id: str) -> Movie:
        raw = await self._get(f"/movies/{movie_id}")
        return movie_from_vendor(raw)

    # ------------------------------------------------------------------
    # Theaters
    # ------------------------------------------------------------------

    async def fetch_theaters_by_zip(self, zip_code: str, radius: int = 25) -> list[Theater]:
        """
        Find theaters near a ZIP code.

        The current API has no direct ZIP search, so the ZIP is resolved to
        coordinates through the location-suggestions endpoint first. When no
        coordinates come back, the legacy ``/theatres?zipCode=`` search is used.

        Args:
            zip_code: 5-digit or ZIP+4 code
            radius: Search radius in miles for the legacy endpoint

        Returns:
            Theaters ordered as the API ranks them
        """
        coordinates = await self._resolve_zip(zip_code)
        if coordinates is not None:
            latitude, longitude = coordinates
            return await self.fetch_theaters_by_coordinates(latitude, longitude)

        logger.warning(f"Could not get coordinates for ZIP {zip_code}, trying fallback endpoint")
        payload = await self._get("/theatres", params={"zipCode": zip_code, "radius": radius})
        return build_records(unwrap(payload, "theatres", "theaters"), theater_from_vendor, "theater")

    async def _resolve_zip(self, zip_code: str) -> tuple[float, float] | None:
        payload = await self._get(
            "/location-suggestions",
            params={"query": zip_code, "page-size": 10, "page-number": 1},
        )
        suggestions = unwrap(payload, "suggestions")
        if not suggestions:
            return None

        link = (suggestions[0].get("_links") or {}).get(LOCATIONS_REL) or {}
        href = link.get("href")
        if not href:
            return None

        params = httpx.URL(href).params
        try:
            return float(params["latitude"]), float(params["longitude"])
        except (KeyError, ValueError):
            logger.debug(f"Location suggestion for {zip_code} has no usable coordinates: {href}")
            return None

    async def fetch_theaters_by_coordinates(
        self, latitude: float, longitude: float, page_size: int = 50
    ) -> list[Theater]:
        payload = await self._get(
            "/locations",
            params={
                "latitude": latitude,
                "longitude": longitude,
                "page-size": page_size,
                "page-number": 1,
            },
        )
        return build_records(unwrap(payload, "locations"), theater_from_location, "theater")

    async def fetch_theater_by_id(self, theater_id: str) -> Theater:
        raw = await self._get(f"/theatres/{theater_id}")
        try:
            return theater_from_vendor(raw)
        except ValidationError as e:
            raise AMCClientError(f"Theater {theater_id} returned malformed data: {e}") from e

    # ------------------------------------------------------------------
    # Showtimes
    # ------------------------------------------------------------------

    async def fetch_showtimes(self, theater_id: str, date: str) -> list[Showtime]:
        """
        Get showtimes for a theater on a date.

        Args:
            theater_id: AMC theatre id
            date: YYYY-MM-DD; part of the URL path, not a query parameter

        Returns:
            Showtimes, or an empty list when the API embeds none
        """
        payload = await self._get(f"/theatres/{theater_id}/showtimes/{date}")
        return build_records(unwrap(payload, "showtimes"), showtime_from_vendor, "showtime")

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    async def validate_key(self) -> bool:
        """Make the smallest possible authenticated call and report whether it worked."""
        try:
            await self._get("/movies/views/now-playing", params={"limit": 1})
            return True
        except AMCClientError as e:
            logger.error(f"API key validation failed: {e}")
            return False
