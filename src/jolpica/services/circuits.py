"""Circuit history: how often a track has been raced and who wins there."""

from __future__ import annotations

from pydantic import TypeAdapter

from .._logging import log_service_call
from ..aggregators import circuit_stats
from ..cache import Freshness, cache_key
from ..models.stats import CircuitStats
from .common import F1Service, gather_settled, load_cached, within_deadline


def circuit_stats_key(circuit_id: str, top: int = 3) -> str:
    return cache_key("circuit_stats", 1, circuit_id, top)


class CircuitService(F1Service):

    @log_service_call
    async def circuit_stats(self, circuit_id: str, top: int = 3) -> CircuitStats:
        """Race count, first race date, the *top* winners and the latest classification."""

        async def load() -> CircuitStats:
            async with within_deadline(self._config.deadline, f"history of {circuit_id}"):
                races, results = await gather_settled(
                    self._client.circuit_races(circuit_id),
                    self._client.circuit_results(circuit_id),
                )
            return circuit_stats(circuit_id, races, results, top=top)

        return await load_cached(
            self._cache,
            circuit_stats_key(circuit_id, top),
            Freshness.DAILY,
            TypeAdapter(CircuitStats),
            load,
        )
