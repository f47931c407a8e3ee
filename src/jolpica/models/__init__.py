"""Jolpica data models."""

from jolpica.models.circuit import Circuit, Location
from jolpica.models.constructor import Constructor
from jolpica.models.driver import Driver
from jolpica.models.pit_stop import PitStop
from jolpica.models.race import QualifyingEntry, Race, ResultEntry
from jolpica.models.standings import ConstructorStanding, DriverStanding
from jolpica.models.stats import (
    ActiveDrivers,
    CareerStats,
    CircuitStats,
    CircuitWinner,
    ConstructorBreakdown,
    ConstructorRow,
    ConstructorStats,
    DriverRaceCount,
    DriverRow,
    DriverStopRank,
    LatestRace,
    PitStopRecord,
    PitStopSummary,
    ReconcileState,
    SeasonResults,
    SeasonTable,
)

__all__ = [
    "ActiveDrivers",
    "CareerStats",
    "Circuit",
    "CircuitStats",
    "CircuitWinner",
    "Constructor",
    "ConstructorBreakdown",
    "ConstructorRow",
    "ConstructorStanding",
    "ConstructorStats",
    "Driver",
    "DriverRaceCount",
    "DriverRow",
    "DriverStanding",
    "DriverStopRank",
    "LatestRace",
    "Location",
    "PitStop",
    "PitStopRecord",
    "PitStopSummary",
    "QualifyingEntry",
    "Race",
    "ReconcileState",
    "ResultEntry",
    "SeasonResults",
    "SeasonTable",
]
