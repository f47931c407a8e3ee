"""Driver, constructor and circuit lists for selection inputs."""

from __future__ import annotations

from pydantic import TypeAdapter

from .._logging import log_service_call
from ..cache import Freshness, cache_key
from ..models.circuit import Circuit
from ..models.constructor import Constructor
from ..models.driver import Driver
from .common import F1Service, load_cached

DRIVERS_KEY = cache_key("drivers", 3, "all")
CONSTRUCTORS_KEY = cache_key("constructors", 1, "all")
CIRCUITS_KEY = cache_key("circuits", 1, "all")


class EntityService(F1Service):
    """Full entity lists, sorted by display name, cached for the day."""

    @log_service_call
    async def list_drivers(self) -> list[Driver]:
        drivers = await load_cached(
            self._cache, DRIVERS_KEY, Freshness.DAILY, TypeAdapter(list[Driver]), self._client.drivers,
        )
        return sorted(drivers, key=lambda d: (d.full_name.lower(), d.driver_id))

    @log_service_call
    async def list_constructors(self) -> list[Constructor]:
        teams = await load_cached(
            self._cache, CONSTRUCTORS_KEY, Freshness.DAILY, TypeAdapter(list[Constructor]),
            self._client.constructors,
        )
        return sorted(teams, key=lambda c: (c.display_name.lower(), c.constructor_id))

    @log_service_call
    async def list_circuits(self) -> list[Circuit]:
        circuits = await load_cached(
            self._cache, CIRCUITS_KEY, Freshness.DAILY, TypeAdapter(list[Circuit]), self._client.circuits,
        )
        return sorted(circuits, key=lambda c: (c.circuit_name.lower(), c.circuit_id))

    async def find_driver_by_name(self, name: str) -> Driver | None:
        """Case-insensitive full-name lookup, as typed into a search box."""
        target = name.strip().lower()
        if not target:
            return None
        return next((d for d in await self.list_drivers() if d.full_name.lower() == target), None)

    async def find_constructor_by_name(self, name: str) -> Constructor | None:
        target = name.strip().lower()
        if not target:
            return None
        return next((c for c in await self.list_constructors() if c.display_name.lower() == target), None)

    async def find_circuit_by_name(self, name: str) -> Circuit | None:
        target = name.strip().lower()
        if not target:
            return None
        return next((c for c in await self.list_circuits() if c.circuit_name.lower() == target), None)

    async def driver_names(self) -> dict[str, str]:
        return {d.driver_id: d.full_name for d in await self.list_drivers()}
