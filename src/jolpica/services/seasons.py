"""Season-level operations: full results, the results grid, the calendar and the latest race."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, Iterable

from pydantic import TypeAdapter

from .._http import Sleep
from .._logging import log_service_call
from ..aggregators import season_table, sort_by_round
from ..cache import Freshness, ResultCache, cache_key
from ..client import JolpicaClient
from ..config import EngineConfig
from ..models.race import Race
from ..models.stats import LatestRace, SeasonResults, SeasonTable
from ..reconcile import SeasonReconciler
from ..state import ProgressListener
from .common import F1Service, gather_settled, load_cached, season_freshness, within_deadline

logger = logging.getLogger(__name__)

LATEST_RACE_KEY = cache_key("latest_race", 1, "current")


def season_calendar_key(season: int) -> str:
    return cache_key("season_calendar", 1, season)


class SeasonService(F1Service):
    """Season results with background reconciliation, plus calendar lookups.

    Usage:
        seasons = SeasonService(client, SessionCache())
        results = await seasons.season_results(2021, listeners=[print])
        table = seasons.table_for(results)
    """

    def __init__(
        self,
        client: JolpicaClient,
        cache: ResultCache,
        config: EngineConfig | None = None,
        today: Callable[[], date] = date.today,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        super().__init__(client, cache, config, today)
        self._sleep = sleep

    def reconciler(
        self,
        cancelled: asyncio.Event | None = None,
        listeners: Iterable[ProgressListener] = (),
    ) -> SeasonReconciler:
        return SeasonReconciler(
            self._client,
            self._cache,
            self._config,
            sleep=self._sleep,
            cancelled=cancelled,
            listeners=listeners,
            today=self._today,
        )

    @log_service_call
    async def season_results(
        self,
        season: int,
        cancelled: asyncio.Event | None = None,
        listeners: Iterable[ProgressListener] = (),
    ) -> SeasonResults:
        """Assemble every round of *season*; only a COMPLETE result is cached.

        Check ``state`` on the returned value: EXHAUSTED and CANCELLED results
        carry whatever rounds were fetched before the loop stopped.
        """
        reconciler = self.reconciler(cancelled, listeners)
        async with within_deadline(self._config.deadline, f"season {season} results"):
            return await reconciler.run(season)

    @log_service_call
    async def season_table(
        self,
        season: int,
        cancelled: asyncio.Event | None = None,
        listeners: Iterable[ProgressListener] = (),
    ) -> SeasonTable:
        return self.table_for(await self.season_results(season, cancelled, listeners))

    @staticmethod
    def table_for(results: SeasonResults) -> SeasonTable:
        return season_table(results)

    @log_service_call
    async def season_calendar(self, season: int) -> list[Race]:
        """Scheduled races of *season* ordered by round."""

        async def load() -> list[Race]:
            return sort_by_round(await self._client.season_races(season))

        return await load_cached(
            self._cache,
            season_calendar_key(season),
            season_freshness(season, self._today()),
            TypeAdapter(list[Race]),
            load,
        )

    @log_service_call
    async def latest_race(self) -> LatestRace:
        """Last race results and round count, from the previous season before the opener."""

        async def load() -> LatestRace:
            schedule, race = await gather_settled(
                self._client.season_races("current"),
                self._client.last_results("current"),
            )
            if race is None:
                current = schedule[0].season_number if schedule else None
                previous = (current or self._today().year) - 1
                logger.info("No results yet for the current season; falling back to %d", previous)
                schedule, race = await gather_settled(
                    self._client.season_races(previous),
                    self._client.last_results(previous),
                )
            return LatestRace(
                season=race.season if race is not None else None,
                race=race,
                total_rounds=len(schedule) if schedule else None,
            )

        return await load_cached(
            self._cache, LATEST_RACE_KEY, Freshness.DAILY, TypeAdapter(LatestRace), load,
        )
