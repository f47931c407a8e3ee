"""Driver career, head-to-head comparison and active-grid lookups."""

from __future__ import annotations

import asyncio
import logging

from pydantic import TypeAdapter

from .._logging import log_service_call
from ..aggregators import driver_career_stats
from ..cache import Freshness, cache_key
from ..exceptions import JolpicaError
from ..models.stats import ActiveDrivers, CareerStats
from .common import F1Service, gather_settled, load_cached, within_deadline

logger = logging.getLogger(__name__)

ACTIVE_DRIVERS_KEY = cache_key("active_drivers", 1, "current")


def driver_stats_key(driver_id: str) -> str:
    return cache_key("driver_stats", 3, driver_id)


class DriverService(F1Service):
    """Career rollups for single drivers and driver pairs."""

    @log_service_call
    async def driver_career(self, driver_id: str) -> CareerStats:
        async def load() -> CareerStats:
            async with within_deadline(self._config.deadline, f"career of {driver_id}"):
                results, qualifying = await gather_settled(
                    self._client.driver_results(driver_id),
                    self._client.driver_qualifying(driver_id),
                )
            return driver_career_stats(driver_id, results, qualifying)

        return await load_cached(
            self._cache, driver_stats_key(driver_id), Freshness.DAILY, TypeAdapter(CareerStats), load,
        )

    @log_service_call
    async def compare_drivers(
        self, first_id: str, second_id: str,
    ) -> tuple[CareerStats | JolpicaError, CareerStats | JolpicaError]:
        """Load two careers concurrently.

        Each side succeeds or fails on its own: a failure comes back in place
        of that driver's stats instead of cancelling the other load.
        """
        first, second = await asyncio.gather(
            self.driver_career(first_id),
            self.driver_career(second_id),
            return_exceptions=True,
        )
        for outcome in (first, second):
            if isinstance(outcome, BaseException) and not isinstance(outcome, JolpicaError):
                raise outcome
        return first, second

    @log_service_call
    async def active_drivers(self) -> ActiveDrivers:
        """Drivers classified in the latest race, falling back to last season before the opener."""

        async def load() -> ActiveDrivers:
            race = await self._client.last_results("current")
            if race is None or not race.results:
                previous = self._today().year - 1
                logger.info("No race run yet this season; using %d for the active grid", previous)
                race = await self._client.last_results(previous)
            if race is None:
                return ActiveDrivers(season="", driver_ids=[], constructor_by_driver={})

            constructor_by_driver = {
                entry.driver.driver_id: entry.constructor.constructor_id
                for entry in race.results
                if entry.driver is not None and entry.constructor is not None
            }
            driver_ids = [entry.driver.driver_id for entry in race.results if entry.driver is not None]
            return ActiveDrivers(
                season=race.season,
                driver_ids=driver_ids,
                constructor_by_driver=constructor_by_driver,
            )

        return await load_cached(
            self._cache, ACTIVE_DRIVERS_KEY, Freshness.DAILY, TypeAdapter(ActiveDrivers), load,
        )
