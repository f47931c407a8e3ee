"""Shared cache-or-load plumbing for the service layer."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..cache import Freshness, ResultCache
from ..client import JolpicaClient
from ..config import EngineConfig
from ..exceptions import DeadlineExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def load_cached(
    cache: ResultCache,
    key: str,
    freshness: Freshness,
    adapter: TypeAdapter[T],
    load: Callable[[], Awaitable[T]],
) -> T:
    """Return the cached value for *key*, or run *load* and cache what it returns.

    A cached payload that no longer validates is treated as a miss. Nothing is
    written when *load* raises.
    """
    payload = cache.get(key)
    if payload is not None:
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            logger.warning("Discarding unreadable cache entry %s: %s", key, exc)

    value = await load()
    cache.put(key, adapter.dump_python(value, mode="json", by_alias=True), freshness)
    return value


@asynccontextmanager
async def within_deadline(seconds: float | None, what: str) -> AsyncIterator[None]:
    """Bound a composite operation; ``None`` means no deadline."""
    try:
        async with asyncio.timeout(seconds):
            yield
    except TimeoutError as exc:
        raise DeadlineExceededError(f"{what} did not finish within {seconds}s") from exc


def season_freshness(season: int, today: date) -> Freshness:
    """Finished seasons never change; the current one changes every race weekend."""
    return Freshness.PERMANENT if season < today.year else Freshness.DAILY


class F1Service:
    """Base for cache-backed services."""

    def __init__(
        self,
        client: JolpicaClient,
        cache: ResultCache,
        config: EngineConfig | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._client = client
        self._cache = cache
        self._config = config or client.config
        self._today = today


async def gather_settled(*aws: Awaitable[Any]) -> list[Any]:
    """Like ``asyncio.gather`` but lets every fetch finish before raising the first error."""
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return outcomes
