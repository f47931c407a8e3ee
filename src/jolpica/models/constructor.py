"""Constructor model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Constructor(BaseModel):
    """Constructor (team) as listed by the API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    constructor_id: str = Field(alias="constructorId")
    url: str | None = None
    name: str = ""
    nationality: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.constructor_id
