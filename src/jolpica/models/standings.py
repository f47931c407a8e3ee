"""Championship standings models (drivers and constructors)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from jolpica.models.constructor import Constructor
from jolpica.models.driver import Driver


class DriverStanding(BaseModel):
    """Driver championship standing entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    position: str | None = None
    position_text: str | None = Field(default=None, alias="positionText")
    points: str = "0"
    wins: str = "0"
    driver: Driver = Field(alias="Driver")
    constructors: list[Constructor] = Field(default_factory=list, alias="Constructors")


class ConstructorStanding(BaseModel):
    """Constructor championship standing entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    position: str | None = None
    position_text: str | None = Field(default=None, alias="positionText")
    points: str = "0"
    wins: str = "0"
    constructor: Constructor = Field(alias="Constructor")
