"""Pydantic schemas for theater data."""

from pydantic import Field

from amcmcp.schemas.base import CamelModel


class Address(CamelModel):
    """Postal address of a theater."""

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class Theater(CamelModel):
    """Theater response schema."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    address: Address = Field(default_factory=Address)
    phone: str | None = None
    amenities: list[str] | None = None

    # Only present when the theater came from a coordinate search
    distance: float | None = None
