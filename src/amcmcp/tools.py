"""Tool layer: validate input, call the AMC client or booking driver, shape output."""

import asyncio
import logging
import time
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from amcmcp.booking import BookingDriver, SessionStore
from amcmcp.exceptions import (
    AMC_API_ERROR,
    BOOKING_ERROR,
    RESERVATION_ERROR,
    VALIDATION_ERROR,
    ToolError,
)
from amcmcp.schemas import (
    BookingResult,
    BookTicketsInput,
    ListMoviesInput,
    ListMoviesOutput,
    ListShowtimesInput,
    ListShowtimesOutput,
    ListTheatersInput,
    ListTheatersOutput,
    Reservation,
    ReserveTicketsInput,
    UserSession,
)
from amcmcp.services.amc_client import AMCClient

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

STUB_RESERVATION_MESSAGE = (
    "Ticket reservation is not yet implemented. This is a stub response for testing purposes."
)

TOOL_DESCRIPTIONS: dict[str, tuple[str, type[BaseModel]]] = {
    "list_theaters": ("Find AMC theaters near a specific ZIP code", ListTheatersInput),
    "list_movies": ("List currently playing movies at AMC theaters", ListMoviesInput),
    "list_showtimes": (
        "Get showtimes for a specific theater on a given date",
        ListShowtimesInput,
    ),
    "reserve_tickets": (
        "Reserve tickets for a showtime (stub implementation)",
        ReserveTicketsInput,
    ),
    "book_tickets": (
        "Book tickets on amctheatres.com by automating the website checkout",
        BookTicketsInput,
    ),
}


def validate_input(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a raw tool payload, raising VALIDATION_ERROR with per-field details."""
    try:
        return model.model_validate(payload if payload is not None else {})
    except ValidationError as e:
        details = [
            {"field": ".".join(str(part) for part in err["loc"]) or "body", "message": err["msg"]}
            for err in e.errors()
        ]
        raise ToolError(VALIDATION_ERROR, "Invalid input parameters", details) from e


class AMCTools:
    """The tools exposed over HTTP."""

    def __init__(
        self,
        client: AMCClient,
        driver: BookingDriver | None = None,
        sessions: SessionStore | None = None,
    ) -> None:
        self.client = client
        self.driver = driver
        if sessions is None:
            sessions = driver.sessions if driver is not None else SessionStore()
        self.sessions = sessions

    async def list_theaters(self, payload: Any) -> ListTheatersOutput:
        request = validate_input(ListTheatersInput, payload)
        try:
            theaters = await self.client.fetch_theaters_by_zip(request.zip)
        except Exception as e:
            raise ToolError(AMC_API_ERROR, "Failed to fetch theaters", str(e)) from e
        return ListTheatersOutput(theaters=theaters, total_count=len(theaters))

    async def list_movies(self, payload: Any = None) -> ListMoviesOutput:
        validate_input(ListMoviesInput, payload)
        try:
            movies = await self.client.fetch_now_playing()
        except Exception as e:
            raise ToolError(AMC_API_ERROR, "Failed to fetch movies", str(e)) from e
        return ListMoviesOutput(movies=movies, total_count=len(movies))

    async def list_showtimes(self, payload: Any) -> ListShowtimesOutput:
        """Showtimes and the theater record are read concurrently."""
        request = validate_input(ListShowtimesInput, payload)
        try:
            showtimes, theater = await asyncio.gather(
                self.client.fetch_showtimes(request.theater_id, request.date),
                self.client.fetch_theater_by_id(request.theater_id),
            )
        except Exception as e:
            raise ToolError(AMC_API_ERROR, "Failed to fetch showtimes", str(e)) from e

        if theater.id != request.theater_id:
            logger.warning(
                f"Theater lookup for {request.theater_id!r} returned id {theater.id!r}; "
                "reporting the requested id"
            )
            theater = theater.model_copy(update={"id": request.theater_id})
        return ListShowtimesOutput(showtimes=showtimes, total_count=len(showtimes), theater=theater)

    async def reserve_tickets(self, payload: Any) -> Reservation:
        """Stub: validates the request and returns a placeholder pending reservation."""
        request = validate_input(ReserveTicketsInput, payload)
        try:
            reservation = Reservation(
                reservation_id=f"stub_{int(time.time() * 1000)}",
                status="pending",
                message=STUB_RESERVATION_MESSAGE,
            )
        except Exception as e:
            raise ToolError(RESERVATION_ERROR, "Failed to reserve tickets", str(e)) from e
        logger.info(
            f"Stub reservation {reservation.reservation_id} for showtime "
            f"{request.showtime_id} x{request.quantity}"
        )
        return reservation

    async def book_tickets(self, payload: Any) -> BookingResult:
        request = validate_input(BookTicketsInput, payload)
        if self.driver is None:
            raise ToolError(BOOKING_ERROR, "Failed to book tickets", "Booking automation is not configured")
        try:
            return await self.driver.book_tickets(request)
        except Exception as e:
            raise ToolError(BOOKING_ERROR, "Failed to book tickets", str(e)) from e

    def list_sessions(self) -> list[UserSession]:
        return self.sessions.active()

    def get_tool_definitions(self) -> list[dict[str, Any]]:
        """Tool name, description and JSON schema of the input, for the manifest."""
        return [
            {
                "name": name,
                "description": description,
                "inputSchema": model.model_json_schema(by_alias=True),
            }
            for name, (description, model) in TOOL_DESCRIPTIONS.items()
        ]
