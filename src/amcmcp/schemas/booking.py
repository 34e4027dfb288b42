"""Pydantic schemas for reservations, bookings and automation sessions."""

from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator

from amcmcp.schemas.base import CamelModel

ReservationStatus = Literal["pending", "confirmed", "failed"]


class Reservation(CamelModel):
    """Placeholder reservation returned by the stub reserve tool."""

    reservation_id: str
    status: ReservationStatus
    message: str


class BookingDetails(CamelModel):
    """Best-effort snapshot scraped from the confirmation page."""

    movie_title: str = "Unknown"
    theater_name: str = "Unknown"
    showtime: str = "Unknown"
    seats: list[str] = Field(default_factory=list)
    total_price: float = 0.0


class BookingResult(CamelModel):
    """
    Outcome of a browser-driven booking.

    A booking is successful if and only if it carries a confirmation number.
    """

    success: bool
    confirmation_number: str | None = None
    error_message: str | None = None
    booking_details: BookingDetails | None = None

    @model_validator(mode="after")
    def _check_confirmation(self) -> "BookingResult":
        if self.success and not self.confirmation_number:
            raise ValueError("a successful booking requires a confirmation number")
        if not self.success and self.confirmation_number:
            raise ValueError("a failed booking cannot carry a confirmation number")
        return self

    @classmethod
    def succeeded(
        cls, confirmation_number: str, booking_details: BookingDetails | None = None
    ) -> "BookingResult":
        return cls(
            success=True,
            confirmation_number=confirmation_number,
            booking_details=booking_details,
        )

    @classmethod
    def failed(cls, error_message: str) -> "BookingResult":
        return cls(success=False, error_message=error_message)


class UserSession(CamelModel):
    """In-memory record of a user who completed a booking in this process."""

    user_id: str
    email: str
    last_login: datetime
    is_active: bool = True
