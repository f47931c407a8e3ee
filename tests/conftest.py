"""Shared test fixtures and sample API responses."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import pytest
import pytest_asyncio

from jolpica import EngineConfig, JolpicaClient

BASE_URL = "https://api.jolpi.ca/ergast/f1"


SAMPLE_DRIVER = {
    "driverId": "alonso",
    "permanentNumber": "14",
    "code": "ALO",
    "url": "http://en.wikipedia.org/wiki/Fernando_Alonso",
    "givenName": "Fernando",
    "familyName": "Alonso",
    "dateOfBirth": "1981-07-29",
    "nationality": "Spanish",
}

SAMPLE_DRIVER_2 = {
    "driverId": "hamilton",
    "permanentNumber": "44",
    "code": "HAM",
    "url": "http://en.wikipedia.org/wiki/Lewis_Hamilton",
    "givenName": "Lewis",
    "familyName": "Hamilton",
    "dateOfBirth": "1985-01-07",
    "nationality": "British",
}

SAMPLE_CONSTRUCTOR = {
    "constructorId": "renault",
    "url": "http://en.wikipedia.org/wiki/Renault_in_Formula_One",
    "name": "Renault",
    "nationality": "French",
}

SAMPLE_CONSTRUCTOR_2 = {
    "constructorId": "mclaren",
    "url": "http://en.wikipedia.org/wiki/McLaren",
    "name": "McLaren",
    "nationality": "British",
}

SAMPLE_CIRCUIT = {
    "circuitId": "monza",
    "url": "http://en.wikipedia.org/wiki/Autodromo_Nazionale_Monza",
    "circuitName": "Autodromo Nazionale di Monza",
    "Location": {"lat": "45.6156", "long": "9.28111", "locality": "Monza", "country": "Italy"},
}

SAMPLE_PIT_STOP = {
    "driverId": "alonso",
    "lap": "14",
    "stop": "1",
    "time": "14:25:11",
    "duration": "23.456",
}


def result_entry(
    driver: dict[str, Any] = SAMPLE_DRIVER,
    constructor: dict[str, Any] = SAMPLE_CONSTRUCTOR,
    position: str = "1",
    points: str = "25",
    status: str = "Finished",
) -> dict[str, Any]:
    return {
        "number": driver.get("permanentNumber", "0"),
        "position": position,
        "positionText": position,
        "points": points,
        "Driver": driver,
        "Constructor": constructor,
        "grid": "1",
        "laps": "53",
        "status": status,
    }


def race(
    season: str | int = "2005",
    round_: str | int = "1",
    date_: str | None = None,
    **children: Any,
) -> dict[str, Any]:
    """A RaceTable entry; pass Results=[...], PitStops=[...] and so on as children."""
    entry: dict[str, Any] = {
        "season": str(season),
        "round": str(round_),
        "url": f"http://example.com/{season}/{round_}",
        "raceName": f"Grand Prix {round_}",
        "Circuit": SAMPLE_CIRCUIT,
        "date": date_ or f"{season}-03-{int(round_):02d}",
    }
    entry.update(children)
    return entry


def mrdata(
    table: str,
    key: str,
    items: list[dict[str, Any]],
    total: int | None = None,
    limit: int = 100,
    offset: int = 0,
) -> dict[str, Any]:
    """Wrap items in an Ergast MRData envelope."""
    return {
        "MRData": {
            "xmlns": "",
            "series": "f1",
            "limit": str(limit),
            "offset": str(offset),
            "total": str(len(items) if total is None else total),
            table: {key: items},
        }
    }


def race_page(items: list[dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
    return mrdata("RaceTable", "Races", items, **kwargs)


def standings_page(key: str, items: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "MRData": {
            "limit": "100",
            "offset": "0",
            "total": "1" if items else "0",
            "StandingsTable": {"StandingsLists": [{"season": "2005", "round": "19", key: items}] if items else []},
        }
    }


class RecordingSleep:
    """Stands in for asyncio.sleep and records every requested delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def today() -> date:
    return date(2024, 6, 1)


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(page_size=100, max_attempts=3, base_delay=0.5, page_delay=0.25, sweep_interval=1.0)


@pytest_asyncio.fixture
async def client(config, sleep):
    async with JolpicaClient(config, sleep=sleep) as f1:
        yield f1


@pytest.fixture(autouse=True)
def _api_log_in_tmp(tmp_path):
    """Keep the call log out of the working directory."""
    import jolpica._logging as mod

    old_logger, old_dir, old_file = mod._logger, mod._LOG_DIR, mod._LOG_FILE
    named_logger = logging.getLogger("jolpica.api")
    named_logger.handlers.clear()

    mod._logger = None
    mod._LOG_DIR = str(tmp_path)
    mod._LOG_FILE = str(tmp_path / "api_calls.log")

    yield tmp_path

    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)
    mod._logger, mod._LOG_DIR, mod._LOG_FILE = old_logger, old_dir, old_file
