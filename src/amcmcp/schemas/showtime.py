"""Pydantic schemas for showtime data."""

from datetime import datetime

from amcmcp.schemas.base import CamelModel


class Showtime(CamelModel):
    """Individual showtime response."""

    id: str
    movie_id: str | None = None
    movie_title: str | None = None
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    auditorium: str | None = None
    format: str | None = None  # e.g. "IMAX", "Dolby Cinema"
    ticket_price: float | None = None
    available_seats: int | None = None  # not exposed by the basic API tier
