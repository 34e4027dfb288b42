"""Pydantic schemas for movie data."""

from amcmcp.schemas.base import CamelModel


class Movie(CamelModel):
    """Movie as returned by the tool layer, vendor naming already normalised."""

    id: str
    title: str
    runtime: int | None = None
    release_date: str | None = None
    poster_url: str | None = None
    synopsis: str | None = None
    rating: str | None = None
    genres: list[str] | None = None
