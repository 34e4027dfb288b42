"""Pydantic schemas for tool inputs and outputs."""

from datetime import date as date_type
from typing import Literal

from pydantic import Field, field_validator

from amcmcp.schemas.base import CamelModel
from amcmcp.schemas.movie import Movie
from amcmcp.schemas.showtime import Showtime
from amcmcp.schemas.theater import Theater

ZIP_PATTERN = r"^\d{5}(-\d{4})?$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"
MAX_TICKETS = 10


class ListTheatersInput(CamelModel):
    zip: str = Field(pattern=ZIP_PATTERN, description="ZIP code to search for theaters near")


class ListTheatersOutput(CamelModel):
    theaters: list[Theater]
    total_count: int


class ListMoviesInput(CamelModel):
    """list_movies takes no parameters."""


class ListMoviesOutput(CamelModel):
    movies: list[Movie]
    total_count: int


class ListShowtimesInput(CamelModel):
    theater_id: str = Field(min_length=1, description="Theater ID to get showtimes for")
    date: str = Field(pattern=DATE_PATTERN, description="Date in YYYY-MM-DD format")

    @field_validator("date")
    @classmethod
    def _real_calendar_date(cls, value: str) -> str:
        date_type.fromisoformat(value)
        return value


class ListShowtimesOutput(CamelModel):
    showtimes: list[Showtime]
    total_count: int
    theater: Theater


class ReserveTicketsInput(CamelModel):
    showtime_id: str = Field(min_length=1, description="Showtime ID to reserve tickets for")
    quantity: int = Field(
        ge=1,
        le=MAX_TICKETS,
        strict=True,
        description=f"Number of tickets to reserve (max {MAX_TICKETS})",
    )


class SeatPreferences(CamelModel):
    row: Literal["front", "middle", "back"] | None = None
    position: Literal["aisle", "center"] | None = None


class BookTicketsInput(CamelModel):
    email: str = Field(pattern=EMAIL_PATTERN, description="AMC account email")
    password: str = Field(min_length=1, description="AMC account password")
    theater_id: str = Field(min_length=1, description="Theater ID the showtime belongs to")
    showtime_id: str = Field(min_length=1, description="Showtime ID to book")
    seat_count: int = Field(
        ge=1,
        le=MAX_TICKETS,
        strict=True,
        description=f"Number of seats to book (max {MAX_TICKETS})",
    )
    seat_preferences: SeatPreferences | None = None
    use_a_list: bool = Field(
        default=False,
        description="Reserve with an AMC Stubs A-List benefit instead of paying",
    )
