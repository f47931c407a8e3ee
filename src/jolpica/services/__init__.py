"""Service layer: cache-backed composite operations over the client."""

from .circuits import CircuitService
from .common import F1Service, gather_settled, load_cached, season_freshness, within_deadline
from .constructors import ConstructorService
from .drivers import DriverService
from .entities import EntityService
from .pitstops import FIRST_PIT_STOP_SEASON, PitStopService, clamp_seasons
from .seasons import SeasonService

__all__ = [
    "CircuitService",
    "ConstructorService",
    "DriverService",
    "EntityService",
    "F1Service",
    "gather_settled",
    "FIRST_PIT_STOP_SEASON",
    "PitStopService",
    "SeasonService",
    "clamp_seasons",
    "load_cached",
    "season_freshness",
    "within_deadline",
]
