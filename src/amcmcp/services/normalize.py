"""Reshape raw AMC API records into the stable Movie/Theater/Showtime schemas."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from amcmcp.schemas import Address, Movie, Showtime, Theater

logger = logging.getLogger(__name__)


def first_present(raw: dict[str, Any], *keys: str) -> Any:
    """Return the first value under ``keys`` that is neither missing, None nor empty."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, "", []):
            return value
    return None


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _genre_name(value: Any) -> str | None:
    """Genres arrive as plain strings or as ``{"name": ...}`` objects."""
    if isinstance(value, dict):
        return _as_str(value.get("name"))
    return _as_str(value)


def parse_utc(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive timestamps are taken to be UTC, matching the vendor's ``*Utc`` fields.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable timestamp from AMC API: {value!r}")
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def movie_from_vendor(raw: dict[str, Any]) -> Movie:
    """
    Normalise a vendor movie record.

    Newer field names win over the older ones when both are present:
    name/title, runTime/runtime, releaseDateUtc/releaseDate,
    posterDynamic/posterUrl, mpaaRating/rating, genre/genres.
    """
    media = raw.get("media") if isinstance(raw.get("media"), dict) else {}

    genre = first_present(raw, "genre", "genres")
    if isinstance(genre, str):
        genres: list[str] | None = [genre]
    elif isinstance(genre, list):
        genres = [_genre_name(g) for g in genre if _genre_name(g)] or None
    else:
        genres = None

    return Movie(
        id=_as_str(raw.get("id")) or "",
        title=first_present(raw, "name", "title", "sortableName") or "",
        runtime=first_present(raw, "runTime", "runtime"),
        release_date=first_present(raw, "releaseDateUtc", "releaseDate"),
        poster_url=(
            first_present(raw, "posterDynamic")
            or first_present(media, "posterDynamic")
            or first_present(raw, "posterUrl")
        ),
        synopsis=first_present(raw, "synopsis"),
        rating=first_present(raw, "mpaaRating", "rating"),
        genres=genres,
    )


def theater_from_vendor(raw: dict[str, Any], distance: float | None = None) -> Theater:
    """
    Normalise a vendor theatre record.

    Current records nest the address under ``location`` and amenities under
    ``attributes``; legacy records already carry ``address``/``amenities``.
    """
    location = raw.get("location")
    if isinstance(location, dict):
        address = Address(
            street=location.get("addressLine1"),
            city=location.get("city"),
            state=location.get("state"),
            zip_code=_as_str(location.get("postalCode")),
            country=location.get("country"),
        )
    else:
        legacy = raw.get("address") or {}
        address = Address(
            street=legacy.get("street"),
            city=legacy.get("city"),
            state=legacy.get("state"),
            zip_code=_as_str(first_present(legacy, "zipCode", "postalCode")),
            country=legacy.get("country"),
        )

    attributes = raw.get("attributes")
    if isinstance(attributes, list):
        amenities = [attr["name"] for attr in attributes if isinstance(attr, dict) and attr.get("name")]
    else:
        amenities = raw.get("amenities")

    if distance is None:
        distance = raw.get("distance")

    return Theater(
        id=_as_str(raw.get("id")) or "",
        name=first_present(raw, "name", "longName") or "",
        address=address,
        phone=first_present(raw, "guestServicesPhoneNumber", "phone"),
        amenities=amenities,
        distance=distance,
    )


def theater_from_location(entry: dict[str, Any]) -> Theater:
    """Normalise one ``_embedded.locations[]`` entry of a coordinate search."""
    theatre = (entry.get("_embedded") or {}).get("theatre") or {}
    return theater_from_vendor(theatre, distance=entry.get("distance"))


def showtime_from_vendor(raw: dict[str, Any]) -> Showtime:
    """
    Normalise a vendor showtime record.

    The end time is derived from the start plus the film's runtime. An end
    time that does not fall after the start is dropped.
    """
    start = parse_utc(first_present(raw, "showDateTimeUtc", "startDateTime"))
    end = parse_utc(raw.get("endDateTime"))
    runtime = first_present(raw, "runTime", "runtime")
    if end is None and start is not None and runtime:
        try:
            end = start + timedelta(minutes=int(runtime))
        except (TypeError, ValueError):
            logger.warning(f"Showtime {raw.get('id')} has unusable runtime {runtime!r}; no end time")
    if start is not None and end is not None and end <= start:
        logger.warning(f"Showtime {raw.get('id')} ends at {end} before it starts at {start}; dropping end time")
        end = None

    prices = raw.get("ticketPrices")
    if isinstance(prices, list) and prices:
        ticket_price = prices[0].get("price")
    else:
        ticket_price = raw.get("ticketPrice")

    return Showtime(
        id=_as_str(raw.get("id")) or "",
        movie_id=_as_str(raw.get("movieId")),
        movie_title=first_present(raw, "movieName", "movieTitle"),
        start_date_time=start,
        end_date_time=end,
        auditorium=_as_str(raw.get("auditorium")),
        format=first_present(raw, "premiumFormat", "format"),
        ticket_price=ticket_price,
        available_seats=raw.get("availableSeats"),
    )
