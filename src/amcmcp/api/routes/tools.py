"""Tool endpoints: one POST per tool, JSON body in, JSON out."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from amcmcp.api.deps import get_tools
from amcmcp.schemas import (
    BookingResult,
    ListMoviesOutput,
    ListShowtimesOutput,
    ListTheatersOutput,
    Reservation,
)
from amcmcp.tools import AMCTools

router = APIRouter(prefix="/tools", tags=["tools"])

Payload = dict[str, Any] | None


@router.post("/list_theaters", response_model=ListTheatersOutput, response_model_exclude_none=True)
async def list_theaters(
    payload: Payload = Body(default=None),
    tools: AMCTools = Depends(get_tools),
) -> ListTheatersOutput:
    """Find theaters near a ZIP code."""
    return await tools.list_theaters(payload)


@router.post("/list_movies", response_model=ListMoviesOutput, response_model_exclude_none=True)
async def list_movies(
    payload: Payload = Body(default=None),
    tools: AMCTools = Depends(get_tools),
) -> ListMoviesOutput:
    """List now-playing movies."""
    return await tools.list_movies(payload)


@router.post("/list_showtimes", response_model=ListShowtimesOutput, response_model_exclude_none=True)
async def list_showtimes(
    payload: Payload = Body(default=None),
    tools: AMCTools = Depends(get_tools),
) -> ListShowtimesOutput:
    """Showtimes for a theater on a date, together with the theater record."""
    return await tools.list_showtimes(payload)


@router.post("/reserve_tickets", response_model=Reservation)
async def reserve_tickets(
    payload: Payload = Body(default=None),
    tools: AMCTools = Depends(get_tools),
) -> Reservation:
    """Stub reservation; always pending."""
    return await tools.reserve_tickets(payload)


@router.post("/book_tickets", response_model=BookingResult, response_model_exclude_none=True)
async def book_tickets(
    payload: Payload = Body(default=None),
    tools: AMCTools = Depends(get_tools),
) -> BookingResult:
    """Book tickets by driving the AMC website in a headless browser."""
    return await tools.book_tickets(payload)
