"""Offset/limit pagination over Ergast ``MRData`` envelopes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from jolpica._http import ResilientFetcher, Sleep
from jolpica._paths import page_params
from jolpica.exceptions import FetchCancelledError, JolpicaValidationError

Extract = Callable[[dict[str, Any]], list[dict[str, Any]]]

# Child lists that upstream may split across page boundaries.
_MERGEABLE_CHILDREN = ("Results", "QualifyingResults", "SprintResults", "PitStops", "Laps")

logger = logging.getLogger(__name__)


def table_items(table: str, key: str) -> Extract:
    """Return an extractor for ``MRData[table][key]``."""

    def extract(mrdata: dict[str, Any]) -> list[dict[str, Any]]:
        items = (mrdata.get(table) or {}).get(key) or []
        return list(items)

    return extract


race_items = table_items("RaceTable", "Races")
driver_items = table_items("DriverTable", "Drivers")
constructor_items = table_items("ConstructorTable", "Constructors")
circuit_items = table_items("CircuitTable", "Circuits")


def standings_lists(mrdata: dict[str, Any]) -> list[dict[str, Any]]:
    return list((mrdata.get("StandingsTable") or {}).get("StandingsLists") or [])


def _int_field(mrdata: dict[str, Any], name: str, default: int) -> int:
    try:
        return int(mrdata.get(name, default))
    except (TypeError, ValueError):
        return default


def envelope(payload: dict[str, Any]) -> dict[str, Any]:
    """Return the ``MRData`` envelope of a payload or raise on a malformed one."""
    mrdata = payload.get("MRData")
    if not isinstance(mrdata, dict):
        raise JolpicaValidationError("Response is missing the MRData envelope")
    return mrdata


def merge_race_pages(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Fold race entries split across pages into one entry per (season, round).

    Order of first appearance is kept, and child lists are concatenated in
    page order.
    """
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for race in items:
        key = (str(race.get("season", "")), str(race.get("round", race.get("raceName", ""))))
        existing = merged.get(key)
        if existing is None:
            merged[key] = dict(race)
            continue
        for child in _MERGEABLE_CHILDREN:
            if child in race:
                existing[child] = list(existing.get(child) or []) + list(race[child] or [])
    return list(merged.values())


class Paginator:
    """Drives a fetcher across an upstream collection until ``total`` is reached.

    Pages are requested in increasing offset order with ``page_delay`` between
    consecutive requests. A first page reporting ``total == 0`` ends the run.
    """

    def __init__(
        self,
        fetcher: ResilientFetcher,
        page_size: int = 100,
        page_delay: float = 0.5,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._page_size = page_size
        self._page_delay = page_delay
        self._sleep = sleep

    async def collect(
        self,
        endpoint: str,
        extract: Extract,
        cancelled: asyncio.Event | None = None,
    ) -> list[dict[str, Any]]:
        limit = self._page_size
        items: list[dict[str, Any]] = []
        offset = 0
        total = 0
        while offset == 0 or offset < total:
            if offset:
                await self._sleep(self._page_delay)
            if cancelled is not None and cancelled.is_set():
                raise FetchCancelledError(f"Pagination of {endpoint} cancelled at offset {offset}")
            mrdata = envelope(await self._fetcher.get_json(endpoint, page_params(limit, offset)))
            total = _int_field(mrdata, "total", 0)
            items.extend(extract(mrdata))
            if total == 0:
                break
            # The server may cap the limit below what was asked for.
            reported = _int_field(mrdata, "limit", limit)
            offset += reported if 0 < reported < limit else limit
        logger.debug("Collected %d items from %s", len(items), endpoint)
        return items
