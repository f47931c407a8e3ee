"""Pit-stop extremes and rankings across a range of seasons."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from pydantic import TypeAdapter

from .._logging import log_service_call
from ..aggregators import pit_stop_summary, sort_by_round
from ..cache import cache_key
from ..exceptions import FetchCancelledError, JolpicaError
from ..models.pit_stop import PitStop
from ..models.race import Race
from ..models.stats import PitStopSummary
from ..reconcile import is_pending
from ..state import Progress, ProgressListener, emit
from .common import F1Service, load_cached, season_freshness, within_deadline
from .entities import EntityService
from .seasons import season_calendar_key

logger = logging.getLogger(__name__)

# Pit-stop timing is only published from this season on.
FIRST_PIT_STOP_SEASON = 2011


def pit_stops_key(season: int, round_: str) -> str:
    return cache_key("pitstops", 1, season, round_)


def clamp_seasons(from_season: int, to_season: int, current_year: int) -> tuple[int, int]:
    """Order the range and clamp both ends to FIRST_PIT_STOP_SEASON..current_year."""
    low, high = sorted((from_season, to_season))

    def clamp(season: int) -> int:
        return max(FIRST_PIT_STOP_SEASON, min(season, current_year))

    return clamp(low), clamp(high)


class PitStopService(F1Service):

    @log_service_call
    async def pit_stop_summary(
        self,
        from_season: int,
        to_season: int,
        cancelled: asyncio.Event | None = None,
        listeners: Iterable[ProgressListener] = (),
    ) -> PitStopSummary:
        """Scan every run round in the range and fold its pit stops.

        Each round's stops are cached on their own, so widening the range
        only fetches the new rounds. Raises ``FetchCancelledError`` once
        *cancelled* is set.
        """
        today = self._today()
        first, last = clamp_seasons(from_season, to_season, today.year)
        listeners = list(listeners)

        async with within_deadline(self._config.deadline, f"pit stops {first}-{last}"):
            rounds: list[tuple[int, Race]] = []
            for season in range(first, last + 1):
                self._check(cancelled)
                calendar = await self._calendar(season, cancelled)
                rounds += [(season, race) for race in calendar if not is_pending(race, today)]

            races: list[Race] = []
            for season, race in rounds:
                self._check(cancelled)
                stops = await self._round_stops(season, race.round, cancelled)
                races.append(race.model_copy(update={"pit_stops": stops}))
                emit(listeners, Progress(
                    fetched=len(races),
                    total=len(rounds),
                    message=f"Loaded pit stops: {season} round {race.round}",
                ))

        self._check(cancelled)
        names = await self._driver_names()
        self._check(cancelled)
        return pit_stop_summary(first, last, races, names)

    async def _calendar(self, season: int, cancelled: asyncio.Event | None) -> list[Race]:
        async def load() -> list[Race]:
            races = await self._client.season_races(season)
            self._check(cancelled)
            return sort_by_round(races)

        return await load_cached(
            self._cache,
            season_calendar_key(season),
            season_freshness(season, self._today()),
            TypeAdapter(list[Race]),
            load,
        )

    async def _round_stops(
        self, season: int, round_: str, cancelled: asyncio.Event | None,
    ) -> list[PitStop]:
        async def load() -> list[PitStop]:
            race = await self._client.pit_stops(season, round_, cancelled=cancelled)
            # A response that lands after cancellation is never cached.
            self._check(cancelled)
            return list(race.pit_stops) if race is not None else []

        return await load_cached(
            self._cache,
            pit_stops_key(season, round_),
            season_freshness(season, self._today()),
            TypeAdapter(list[PitStop]),
            load,
        )

    async def _driver_names(self) -> dict[str, str]:
        entities = EntityService(self._client, self._cache, self._config, self._today)
        try:
            return await entities.driver_names()
        except JolpicaError as exc:
            logger.warning("Showing driver ids instead of names: %s", exc)
            return {}

    @staticmethod
    def _check(cancelled: asyncio.Event | None) -> None:
        if cancelled is not None and cancelled.is_set():
            raise FetchCancelledError("pit-stop scan cancelled")
