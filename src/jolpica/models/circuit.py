"""Circuit models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """Circuit location; coordinates are kept as the API's strings."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    lat: str | None = None
    long: str | None = None
    locality: str | None = None
    country: str | None = None


class Circuit(BaseModel):
    """Circuit as listed by the API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    circuit_id: str = Field(alias="circuitId")
    url: str | None = None
    circuit_name: str = Field(default="", alias="circuitName")
    location: Location | None = Field(default=None, alias="Location")
