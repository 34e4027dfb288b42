"""Pydantic schemas for tool requests, responses and vendor entities."""

from amcmcp.schemas.booking import (
    BookingDetails,
    BookingResult,
    Reservation,
    UserSession,
)
from amcmcp.schemas.movie import Movie
from amcmcp.schemas.showtime import Showtime
from amcmcp.schemas.theater import Address, Theater
from amcmcp.schemas.tools import (
    BookTicketsInput,
    ListMoviesInput,
    ListMoviesOutput,
    ListShowtimesInput,
    ListShowtimesOutput,
    ListTheatersInput,
    ListTheatersOutput,
    ReserveTicketsInput,
    SeatPreferences,
)

__all__ = [
    "Address",
    "BookingDetails",
    "BookingResult",
    "BookTicketsInput",
    "ListMoviesInput",
    "ListMoviesOutput",
    "ListShowtimesInput",
    "ListShowtimesOutput",
    "ListTheatersInput",
    "ListTheatersOutput",
    "Movie",
    "Reservation",
    "ReserveTicketsInput",
    "SeatPreferences",
    "Showtime",
    "Theater",
    "UserSession",
]
