"""Derived statistics bundles. Always rebuilt from a fresh fold, never patched."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from jolpica.models.constructor import Constructor
from jolpica.models.driver import Driver
from jolpica.models.race import Race
from jolpica.models.standings import ConstructorStanding, DriverStanding


class ConstructorBreakdown(BaseModel):
    """Per-constructor slice of a driver's career."""

    model_config = ConfigDict(frozen=True)

    constructor_id: str
    name: str
    races: int
    wins: int
    points: float
    first_season: int
    first_round: int


class CareerStats(BaseModel):
    """Driver career rollup."""

    model_config = ConfigDict(frozen=True)

    driver_id: str
    races_started: int
    wins: int
    poles: int
    seasons: int
    average_finish: float | None
    average_qualifying: float | None
    points_by_season: dict[str, float]
    constructor_breakdown: list[ConstructorBreakdown]

    @property
    def total_points(self) -> float:
        return sum(self.points_by_season.values())


class DriverRaceCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    driver_id: str
    name: str
    races: int


class ConstructorStats(BaseModel):
    """Constructor history rollup."""

    model_config = ConfigDict(frozen=True)

    constructor_id: str
    seasons: int
    first_season: int | None
    races: int
    wins: int
    points_by_season: dict[str, float]
    average_finish: float | None
    driver_count: int
    top_driver_name: str | None
    top_driver_races: int
    driver_breakdown: list[DriverRaceCount]


class CircuitWinner(BaseModel):
    model_config = ConfigDict(frozen=True)

    driver_id: str
    name: str
    wins: int


class CircuitStats(BaseModel):
    """Race history at one circuit."""

    model_config = ConfigDict(frozen=True)

    circuit_id: str
    race_count: int
    first_date: str | None
    top_winners: list[CircuitWinner]
    latest_race: Race | None


class PitStopRecord(BaseModel):
    """A single parsed pit stop, located in time."""

    model_config = ConfigDict(frozen=True)

    season: int
    round: str
    race_name: str
    driver_id: str
    lap: str
    stop: str
    duration_text: str
    duration_seconds: float


class DriverStopRank(BaseModel):
    model_config = ConfigDict(frozen=True)

    driver_id: str
    name: str
    stops: int
    average_seconds: float


class PitStopSummary(BaseModel):
    """Pit-stop extremes and per-driver ranking over a season range."""

    model_config = ConfigDict(frozen=True)

    from_season: int
    to_season: int
    total_stops: int
    races_with_stops: int
    unparsed_stops: int
    fastest: PitStopRecord | None
    slowest: PitStopRecord | None
    ranking: list[DriverStopRank]


class ActiveDrivers(BaseModel):
    """Drivers classified in the most recent race."""

    model_config = ConfigDict(frozen=True)

    season: str
    driver_ids: list[str]
    constructor_by_driver: dict[str, str]

    def is_active(self, driver_id: str) -> bool:
        return driver_id in self.driver_ids


class LatestRace(BaseModel):
    model_config = ConfigDict(frozen=True)

    season: str | None
    race: Race | None
    total_rounds: int | None


class ReconcileState(str, Enum):
    """Lifecycle of a composite season fetch."""

    ASSEMBLING = "assembling"
    PARTIALLY_COMPLETE = "partially_complete"
    RETRYING = "retrying"
    COMPLETE = "complete"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class SeasonResults(BaseModel):
    """Every round of a season with its results, plus the final standings."""

    model_config = ConfigDict(frozen=True)

    season: int
    state: ReconcileState
    races: list[Race]
    driver_standings: list[DriverStanding] = Field(default_factory=list)
    constructor_standings: list[ConstructorStanding] = Field(default_factory=list)
    # Scheduled rounds that have not been run yet; never counted as missing.
    pending_rounds: list[str] = Field(default_factory=list)

    @property
    def missing_rounds(self) -> list[str]:
        return [
            race.round for race in self.races
            if not race.is_complete and race.round not in self.pending_rounds
        ]

    @property
    def fetched_rounds(self) -> int:
        return sum(1 for race in self.races if race.is_complete)


class DriverRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    driver: Driver
    position: str
    points: str
    per_race: list[str]


class ConstructorRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    constructor: Constructor
    position: str
    points: str
    per_race: list[str]


class SeasonTable(BaseModel):
    """Season grid: one row per driver/constructor, one column per round."""

    model_config = ConfigDict(frozen=True)

    rounds: list[str]
    drivers: list[DriverRow]
    constructors: list[ConstructorRow]
    driver_champion_wins: int
    constructor_champion_wins: int
