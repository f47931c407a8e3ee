"""Public async client for the Jolpica (Ergast-compatible) F1 API."""

from __future__ import annotations

import asyncio
from typing import Any, TypeVar

from pydantic import TypeAdapter

from jolpica._http import AsyncTransport, ResilientFetcher, Sleep
from jolpica._logging import log_api_call
from jolpica._paginate import (
    Extract,
    Paginator,
    circuit_items,
    constructor_items,
    driver_items,
    envelope,
    merge_race_pages,
    race_items,
    standings_lists,
)
from jolpica._paths import build_path, page_params
from jolpica.config import EngineConfig
from jolpica.exceptions import JolpicaValidationError
from jolpica.models.circuit import Circuit
from jolpica.models.constructor import Constructor
from jolpica.models.driver import Driver
from jolpica.models.race import Race
from jolpica.models.standings import ConstructorStanding, DriverStanding

Season = int | str

T = TypeVar("T")


def _validate_list(model_type: type[T], data: list[dict[str, Any]]) -> list[T]:
    """Validate a list of dicts against a Pydantic model."""
    try:
        adapter = TypeAdapter(list[model_type])
        return adapter.validate_python(data)
    except Exception as exc:
        raise JolpicaValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


def _first_standings(key: str) -> Extract:
    def extract(mrdata: dict[str, Any]) -> list[dict[str, Any]]:
        lists = standings_lists(mrdata)
        return list(lists[0].get(key) or []) if lists else []

    return extract


class JolpicaClient:
    """Asynchronous client for the Jolpica F1 API.

    Every list endpoint is paginated to completion; every request goes
    through the retrying fetcher.

    Usage:
        async with JolpicaClient() as f1:
            drivers = await f1.drivers()
            results = await f1.driver_results("alonso")
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        sleep: Sleep = asyncio.sleep,
        transport: AsyncTransport | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self._fetcher = ResilientFetcher(
            transport or AsyncTransport(base_url=self.config.base_url, timeout=self.config.timeout),
            max_attempts=self.config.max_attempts,
            base_delay=self.config.base_delay,
            sleep=sleep,
        )
        self._paginator = Paginator(
            self._fetcher,
            page_size=self.config.page_size,
            page_delay=self.config.page_delay,
            sleep=sleep,
        )

    async def __aenter__(self) -> JolpicaClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connection."""
        await self._fetcher.close()

    async def _collect(
        self,
        endpoint: str,
        model: type[T],
        extract: Extract,
        merge: bool = False,
        cancelled: asyncio.Event | None = None,
    ) -> list[T]:
        items = await self._paginator.collect(endpoint, extract, cancelled=cancelled)
        if merge:
            items = merge_race_pages(items)
        return _validate_list(model, items)

    async def _single(
        self,
        endpoint: str,
        model: type[T],
        extract: Extract,
        params: list[tuple[str, str]] | None = None,
    ) -> list[T]:
        mrdata = envelope(await self._fetcher.get_json(endpoint, params))
        return _validate_list(model, extract(mrdata))

    # ── Entity lists ───────────────────────────────────────────

    @log_api_call
    async def drivers(self) -> list[Driver]:
        """Get every driver in the archive."""
        return await self._collect(build_path("drivers"), Driver, driver_items)

    @log_api_call
    async def constructors(self) -> list[Constructor]:
        """Get every constructor in the archive."""
        return await self._collect(build_path("constructors"), Constructor, constructor_items)

    @log_api_call
    async def circuits(self) -> list[Circuit]:
        """Get every circuit in the archive."""
        return await self._collect(build_path("circuits"), Circuit, circuit_items)

    # ── Seasons and rounds ─────────────────────────────────────

    @log_api_call
    async def season_races(self, season: Season) -> list[Race]:
        """Get a season's schedule (race metadata, no results)."""
        return await self._collect(build_path(season, "races"), Race, race_items)

    @log_api_call
    async def season_results(self, season: Season, cancelled: asyncio.Event | None = None) -> list[Race]:
        """Get every result of a season, merged into one entry per round."""
        return await self._collect(build_path(season, "results"), Race, race_items, merge=True, cancelled=cancelled)

    @log_api_call
    async def round_results(self, season: Season, round_: int | str) -> Race | None:
        """Get one round's results with a single request."""
        found = await self._single(build_path(season, round_, "results"), Race, race_items)
        return found[0] if found else None

    @log_api_call
    async def round_results_paginated(
        self,
        season: Season,
        round_: int | str,
        cancelled: asyncio.Event | None = None,
    ) -> Race | None:
        """Get one round's results, paging and merging when the grid exceeds a page."""
        found = await self._collect(
            build_path(season, round_, "results"), Race, race_items, merge=True, cancelled=cancelled,
        )
        return found[0] if found else None

    @log_api_call
    async def last_results(self, season: Season = "current") -> Race | None:
        """Get the results of the most recent race of a season."""
        found = await self._single(build_path(season, "last", "results"), Race, race_items)
        return found[0] if found else None

    @log_api_call
    async def pit_stops(
        self,
        season: Season,
        round_: int | str,
        cancelled: asyncio.Event | None = None,
    ) -> Race | None:
        """Get every pit stop of one round."""
        found = await self._collect(
            build_path(season, round_, "pitstops"), Race, race_items, merge=True, cancelled=cancelled,
        )
        return found[0] if found else None

    # ── Standings ──────────────────────────────────────────────

    @log_api_call
    async def driver_standings(self, season: Season) -> list[DriverStanding]:
        """Get the driver championship standings of a season."""
        return await self._single(
            build_path(season, "driverstandings"),
            DriverStanding,
            _first_standings("DriverStandings"),
            params=page_params(self.config.page_size, 0),
        )

    @log_api_call
    async def constructor_standings(self, season: Season) -> list[ConstructorStanding]:
        """Get the constructor championship standings of a season."""
        return await self._single(
            build_path(season, "constructorstandings"),
            ConstructorStanding,
            _first_standings("ConstructorStandings"),
            params=page_params(self.config.page_size, 0),
        )

    # ── Per-entity histories ───────────────────────────────────

    @log_api_call
    async def driver_results(self, driver_id: str) -> list[Race]:
        """Get every race result of one driver."""
        return await self._collect(build_path("drivers", driver_id, "results"), Race, race_items, merge=True)

    @log_api_call
    async def driver_qualifying(self, driver_id: str) -> list[Race]:
        """Get every qualifying result of one driver."""
        return await self._collect(build_path("drivers", driver_id, "qualifying"), Race, race_items, merge=True)

    @log_api_call
    async def constructor_results(self, constructor_id: str) -> list[Race]:
        """Get every race result of one constructor."""
        return await self._collect(
            build_path("constructors", constructor_id, "results"), Race, race_items, merge=True,
        )

    @log_api_call
    async def circuit_races(self, circuit_id: str) -> list[Race]:
        """Get every race held at one circuit (metadata only)."""
        return await self._collect(build_path("circuits", circuit_id, "races"), Race, race_items)

    @log_api_call
    async def circuit_results(self, circuit_id: str) -> list[Race]:
        """Get every race result at one circuit."""
        return await self._collect(
            build_path("circuits", circuit_id, "results"), Race, race_items, merge=True,
        )
