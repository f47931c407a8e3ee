"""Background reconciliation of partially fetched seasons."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, Iterable

from pydantic import ValidationError

from jolpica._http import Sleep
from jolpica.aggregators import attach_results
from jolpica.cache import Freshness, ResultCache, cache_key
from jolpica.client import JolpicaClient
from jolpica.config import EngineConfig
from jolpica.exceptions import FetchCancelledError, JolpicaError
from jolpica.models.race import Race
from jolpica.models.standings import ConstructorStanding, DriverStanding
from jolpica.models.stats import ReconcileState, SeasonResults
from jolpica.state import Progress, ProgressListener, emit

logger = logging.getLogger(__name__)


def season_results_key(season: int) -> str:
    return cache_key("season_results", 1, season)


def is_pending(race: Race, today: date) -> bool:
    """A round dated after today cannot have results yet."""
    if not race.date:
        return False
    try:
        return date.fromisoformat(race.date) > today
    except ValueError:
        return False


class SeasonReconciler:
    """Assembles every round of a season and keeps retrying rounds without results.

    States run ASSEMBLING -> PARTIALLY_COMPLETE -> RETRYING -> COMPLETE, with
    EXHAUSTED after ``max_sweeps`` unsuccessful sweeps and CANCELLED once the
    ``cancelled`` event is set. The cache is written exactly once, on COMPLETE.
    After cancellation no request is issued and nothing is written or emitted.
    """

    def __init__(
        self,
        client: JolpicaClient,
        cache: ResultCache,
        config: EngineConfig | None = None,
        sleep: Sleep = asyncio.sleep,
        cancelled: asyncio.Event | None = None,
        listeners: Iterable[ProgressListener] = (),
        today: Callable[[], date] = date.today,
    ) -> None:
        self._client = client
        self._cache = cache
        self._config = config or client.config
        self._sleep = sleep
        self._cancelled = cancelled or asyncio.Event()
        self._listeners = list(listeners)
        self._today = today
        self.state = ReconcileState.ASSEMBLING

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    async def run(self, season: int) -> SeasonResults:
        cached = self._from_cache(season)
        if cached is not None:
            self._enter(ReconcileState.COMPLETE, cached)
            return cached

        if self.is_cancelled:
            return self._cancel_result(season, [], [], [])

        self.state = ReconcileState.ASSEMBLING
        drivers, teams, schedule = await asyncio.gather(
            self._client.driver_standings(season),
            self._client.constructor_standings(season),
            self._client.season_races(season),
        )
        if self.is_cancelled:
            return self._cancel_result(season, [], drivers, teams)
        try:
            merged = await self._client.season_results(season, cancelled=self._cancelled)
        except FetchCancelledError:
            return self._cancel_result(season, [], drivers, teams)
        if self.is_cancelled:
            return self._cancel_result(season, [], drivers, teams)

        today = self._today()
        races = attach_results(schedule, merged)
        result = SeasonResults(
            season=season,
            state=ReconcileState.ASSEMBLING,
            races=races,
            driver_standings=drivers,
            constructor_standings=teams,
            pending_rounds=[race.round for race in races if is_pending(race, today)],
        )
        self._enter(ReconcileState.ASSEMBLING, result)
        if result.missing_rounds:
            result = await self._reconcile(result)
        else:
            result = result.model_copy(update={"state": ReconcileState.COMPLETE})

        if result.state is ReconcileState.COMPLETE:
            if self.is_cancelled:
                return self._cancel_result(
                    season, list(result.races), result.driver_standings, result.constructor_standings,
                )
            self._write(result)
            self._enter(ReconcileState.COMPLETE, result)
        return result

    async def _reconcile(self, result: SeasonResults) -> SeasonResults:
        self._enter(ReconcileState.PARTIALLY_COMPLETE, result)
        races = list(result.races)
        sweeps = 0
        while True:
            if self.is_cancelled:
                return self._cancel_result(result.season, races, result.driver_standings, result.constructor_standings)
            if sweeps >= self._config.max_sweeps:
                logger.warning(
                    "Giving up on season %s after %d sweeps; missing rounds %s",
                    result.season, sweeps, result.missing_rounds,
                )
                result = result.model_copy(update={"races": races, "state": ReconcileState.EXHAUSTED})
                self._enter(ReconcileState.EXHAUSTED, result)
                return result

            self._enter(ReconcileState.RETRYING, result)
            for index, race in enumerate(races):
                if race.is_complete or race.round in result.pending_rounds:
                    continue
                if self.is_cancelled:
                    return self._cancel_result(
                        result.season, races, result.driver_standings, result.constructor_standings,
                    )
                found = await self._fetch_round(result.season, race.round)
                if self.is_cancelled:
                    # In-flight result is discarded.
                    return self._cancel_result(
                        result.season, races, result.driver_standings, result.constructor_standings,
                    )
                if found is not None:
                    races[index] = race.model_copy(update={"results": found.results})
                    result = result.model_copy(update={"races": list(races)})
                    self._emit(result)

            sweeps += 1
            result = result.model_copy(update={"races": list(races)})
            if not result.missing_rounds:
                return result.model_copy(update={"state": ReconcileState.COMPLETE})
            logger.info(
                "Season %s sweep %d left %d rounds missing",
                result.season, sweeps, len(result.missing_rounds),
            )
            if sweeps < self._config.max_sweeps:
                await self._sleep(self._config.sweep_interval)

    async def _fetch_round(self, season: int, round_: str) -> Race | None:
        """Direct fetch first, then a paginated fetch for oversized classifications."""
        try:
            race = await self._client.round_results(season, round_)
        except JolpicaError as exc:
            logger.info("Direct fetch of %s round %s failed: %s", season, round_, exc)
            race = None
        if race is not None and race.is_complete:
            return race
        if self.is_cancelled:
            return None

        try:
            race = await self._client.round_results_paginated(season, round_, cancelled=self._cancelled)
        except FetchCancelledError:
            return None
        except JolpicaError as exc:
            logger.info("Paginated fetch of %s round %s failed: %s", season, round_, exc)
            return None
        return race if race is not None and race.is_complete else None

    def _from_cache(self, season: int) -> SeasonResults | None:
        payload = self._cache.get(season_results_key(season))
        if payload is None:
            return None
        try:
            result = SeasonResults.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Ignoring unreadable cached season %s: %s", season, exc)
            return None
        return result if result.state is ReconcileState.COMPLETE else None

    def _write(self, result: SeasonResults) -> None:
        freshness = Freshness.DAILY if result.pending_rounds else Freshness.PERMANENT
        self._cache.put(
            season_results_key(result.season),
            result.model_dump(mode="json", by_alias=True),
            freshness,
        )

    def _cancel_result(
        self,
        season: int,
        races: list[Race],
        drivers: list[DriverStanding],
        teams: list[ConstructorStanding],
    ) -> SeasonResults:
        self.state = ReconcileState.CANCELLED
        logger.info("Season %s fetch cancelled", season)
        return SeasonResults(
            season=season,
            state=ReconcileState.CANCELLED,
            races=races,
            driver_standings=drivers,
            constructor_standings=teams,
        )

    def _enter(self, state: ReconcileState, result: SeasonResults) -> None:
        self.state = state
        self._emit(result)

    def _emit(self, result: SeasonResults) -> None:
        held = len(result.races) - len(result.pending_rounds)
        emit(
            self._listeners,
            Progress(
                fetched=result.fetched_rounds,
                total=held,
                state=self.state,
                message=f"{result.fetched_rounds}/{held} rounds fetched",
                snapshot=result.model_copy(update={"state": self.state}),
            ),
        )
