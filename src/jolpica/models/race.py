"""Race, result and qualifying models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from jolpica.models.circuit import Circuit
from jolpica.models.constructor import Constructor
from jolpica.models.driver import Driver
from jolpica.models.pit_stop import PitStop
from jolpica.parsing import classify_status, parse_int, parse_points, parse_position


class ResultEntry(BaseModel):
    """One classified participant of a race."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    number: str | None = None
    position: str | None = None
    position_text: str | None = Field(default=None, alias="positionText")
    points: str | None = None
    driver: Driver | None = Field(default=None, alias="Driver")
    constructor: Constructor | None = Field(default=None, alias="Constructor")
    grid: str | None = None
    laps: str | None = None
    status: str | None = None

    @property
    def position_value(self) -> int | None:
        return parse_position(self.position)

    @property
    def points_value(self) -> float | None:
        return parse_points(self.points)

    @property
    def laps_value(self) -> int | None:
        return parse_int(self.laps)

    @property
    def status_kind(self) -> str:
        return classify_status(self.status)


class QualifyingEntry(BaseModel):
    """One participant of a qualifying session."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    number: str | None = None
    position: str | None = None
    driver: Driver | None = Field(default=None, alias="Driver")
    constructor: Constructor | None = Field(default=None, alias="Constructor")
    q1: str | None = Field(default=None, alias="Q1")
    q2: str | None = Field(default=None, alias="Q2")
    q3: str | None = Field(default=None, alias="Q3")

    @property
    def position_value(self) -> int | None:
        return parse_position(self.position)


class Race(BaseModel):
    """A race weekend keyed by (season, round), with whatever child rows were requested."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    season: str
    round: str
    url: str | None = None
    race_name: str = Field(default="", alias="raceName")
    circuit: Circuit | None = Field(default=None, alias="Circuit")
    date: str | None = None
    time: str | None = None
    results: list[ResultEntry] = Field(default_factory=list, alias="Results")
    qualifying_results: list[QualifyingEntry] = Field(default_factory=list, alias="QualifyingResults")
    pit_stops: list[PitStop] = Field(default_factory=list, alias="PitStops")

    @property
    def season_number(self) -> int | None:
        return parse_int(self.season)

    @property
    def round_number(self) -> int | None:
        return parse_int(self.round)

    @property
    def is_complete(self) -> bool:
        return len(self.results) > 0

    @property
    def display_name(self) -> str:
        return self.race_name or f"Round {self.round}"
