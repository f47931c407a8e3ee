"""Jolpica: rate-limit-aware async client and statistics engine for the Jolpica F1 API."""

from jolpica.cache import Freshness, ResultCache, SessionCache, cache_key
from jolpica.client import JolpicaClient
from jolpica.config import EngineConfig
from jolpica.exceptions import (
    CacheCorruptError,
    ClientError,
    DeadlineExceededError,
    FetchCancelledError,
    JolpicaAPIError,
    JolpicaConnectionError,
    JolpicaError,
    JolpicaTimeoutError,
    JolpicaValidationError,
    NetworkError,
    RateLimitedError,
    ServerError,
    user_message,
)
from jolpica.reconcile import SeasonReconciler
from jolpica.services import (
    CircuitService,
    ConstructorService,
    DriverService,
    EntityService,
    PitStopService,
    SeasonService,
)
from jolpica.state import LoadStatus, LoadTracker, Progress

__all__ = [
    "CacheCorruptError",
    "CircuitService",
    "ClientError",
    "ConstructorService",
    "DeadlineExceededError",
    "DriverService",
    "EngineConfig",
    "EntityService",
    "FetchCancelledError",
    "Freshness",
    "JolpicaAPIError",
    "JolpicaClient",
    "JolpicaConnectionError",
    "JolpicaError",
    "JolpicaTimeoutError",
    "JolpicaValidationError",
    "LoadStatus",
    "LoadTracker",
    "NetworkError",
    "PitStopService",
    "Progress",
    "RateLimitedError",
    "ResultCache",
    "SeasonReconciler",
    "SeasonService",
    "ServerError",
    "SessionCache",
    "cache_key",
    "user_message",
]

__version__ = "0.1.0"
