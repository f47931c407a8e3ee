"""Driver model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Driver(BaseModel):
    """Driver as listed by the API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    driver_id: str = Field(alias="driverId")
    permanent_number: str | None = Field(default=None, alias="permanentNumber")
    code: str | None = None
    url: str | None = None
    given_name: str = Field(default="", alias="givenName")
    family_name: str = Field(default="", alias="familyName")
    date_of_birth: str | None = Field(default=None, alias="dateOfBirth")
    nationality: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.family_name}".strip() or self.driver_id
