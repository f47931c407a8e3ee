"""Constructor history rollups."""

from __future__ import annotations

from pydantic import TypeAdapter

from .._logging import log_service_call
from ..aggregators import constructor_stats
from ..cache import Freshness, cache_key
from ..models.stats import ConstructorStats
from .common import F1Service, load_cached, within_deadline


def constructor_stats_key(constructor_id: str) -> str:
    return cache_key("constructor_stats", 1, constructor_id)


class ConstructorService(F1Service):

    @log_service_call
    async def constructor_stats(self, constructor_id: str) -> ConstructorStats:
        async def load() -> ConstructorStats:
            async with within_deadline(self._config.deadline, f"history of {constructor_id}"):
                races = await self._client.constructor_results(constructor_id)
            return constructor_stats(constructor_id, races)

        return await load_cached(
            self._cache,
            constructor_stats_key(constructor_id),
            Freshness.DAILY,
            TypeAdapter(ConstructorStats),
            load,
        )
