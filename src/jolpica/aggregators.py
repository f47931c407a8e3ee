"""Pure folds from raw race data into statistics bundles.

Nothing here performs I/O or keeps state between calls. Given the same input
every function returns the same output: ordering is always explicit, and
unparseable values (see ``jolpica.parsing``) go down their own branch instead
of being coerced to zero.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from jolpica.models.constructor import Constructor
from jolpica.models.driver import Driver
from jolpica.models.race import Race, ResultEntry
from jolpica.models.standings import ConstructorStanding, DriverStanding
from jolpica.models.stats import (
    CareerStats,
    CircuitStats,
    CircuitWinner,
    ConstructorBreakdown,
    ConstructorRow,
    ConstructorStats,
    DriverRaceCount,
    DriverRow,
    DriverStopRank,
    PitStopRecord,
    PitStopSummary,
    SeasonResults,
    SeasonTable,
)
from jolpica.parsing import parse_int

_UNKNOWN_RANK = sys.maxsize
_UNCLASSIFIED = 999


@dataclass(frozen=True)
class ResultFold:
    """Running totals over a set of race results."""

    entries: int
    wins: int
    points_by_season: dict[str, float]
    average_finish: float | None
    unparsed_points: int


@dataclass(frozen=True)
class QualifyingFold:
    entries: int
    poles: int
    average_position: float | None


def _season_sort_key(season: str) -> tuple[int, str]:
    number = parse_int(season)
    return (number if number is not None else _UNKNOWN_RANK, season)


def _chronological_rank(race: Race) -> tuple[int, int]:
    season = race.season_number
    round_ = race.round_number
    return (
        season if season is not None else _UNKNOWN_RANK,
        round_ if round_ is not None else _UNKNOWN_RANK,
    )


def _mean(total: float, count: int) -> float | None:
    return total / count if count else None


def _driver_name(driver: Driver | None, fallback: str) -> str:
    if driver is None:
        return fallback
    return f"{driver.given_name} {driver.family_name}".strip() or fallback


def sort_by_round(races: Iterable[Race]) -> list[Race]:
    """Order races by numeric round; unparseable rounds sort first, as round 0."""
    return sorted(races, key=lambda race: race.round_number or 0)


# ── Result folding ─────────────────────────────────────────────


def fold_results(races: Iterable[Race]) -> ResultFold:
    """Fold wins, points per season and average finish over every result entry.

    Entries with an unparseable position count towards ``entries`` but not
    towards the average-finish denominator. Entries with unparseable points
    add nothing to the season totals and are counted in ``unparsed_points``.
    """
    entries = 0
    wins = 0
    points_by_season: dict[str, float] = {}
    position_sum = 0
    position_count = 0
    unparsed_points = 0

    for race in races:
        for result in race.results:
            entries += 1
            position = result.position_value
            if position is not None:
                position_sum += position
                position_count += 1
                if position == 1:
                    wins += 1

            if race.season:
                points_by_season.setdefault(race.season, 0.0)
            points = result.points_value
            if points is None:
                unparsed_points += 1
            elif race.season:
                points_by_season[race.season] += points

    ordered = {season: points_by_season[season] for season in sorted(points_by_season, key=_season_sort_key)}
    return ResultFold(
        entries=entries,
        wins=wins,
        points_by_season=ordered,
        average_finish=_mean(position_sum, position_count),
        unparsed_points=unparsed_points,
    )


def fold_qualifying(races: Iterable[Race]) -> QualifyingFold:
    """Pole count and average qualifying position over numeric positions only."""
    entries = 0
    poles = 0
    position_sum = 0
    position_count = 0
    for race in races:
        for entry in race.qualifying_results:
            entries += 1
            position = entry.position_value
            if position is None:
                continue
            position_sum += position
            position_count += 1
            if position == 1:
                poles += 1
    return QualifyingFold(entries=entries, poles=poles, average_position=_mean(position_sum, position_count))


def constructor_breakdown(races: Iterable[Race]) -> list[ConstructorBreakdown]:
    """Group result entries by constructor, ordered by first (season, round) seen."""
    rows: dict[str, dict] = {}
    for race in races:
        rank = _chronological_rank(race)
        for result in race.results:
            team = result.constructor
            cid = (team.constructor_id if team else None) or (team.name if team else None) or "unknown"
            row = rows.get(cid)
            if row is None:
                row = rows[cid] = {
                    "constructor_id": cid,
                    "name": (team.name if team else "") or cid,
                    "races": 0,
                    "wins": 0,
                    "points": 0.0,
                    "first_season": rank[0],
                    "first_round": rank[1],
                }
            elif rank < (row["first_season"], row["first_round"]):
                row["first_season"], row["first_round"] = rank

            row["races"] += 1
            points = result.points_value
            # Unparseable points are left out of the total rather than counted as zero.
            if points is not None:
                row["points"] += points
            if result.position_value == 1:
                row["wins"] += 1

    ordered = sorted(
        rows.values(),
        key=lambda r: (r["first_season"], r["first_round"], r["constructor_id"]),
    )
    return [ConstructorBreakdown(**row) for row in ordered]


def driver_career_stats(
    driver_id: str,
    result_races: Sequence[Race],
    qualifying_races: Sequence[Race],
) -> CareerStats:
    """Build a driver's career rollup from their result and qualifying histories."""
    fold = fold_results(result_races)
    quali = fold_qualifying(qualifying_races)
    return CareerStats(
        driver_id=driver_id,
        races_started=sum(1 for race in result_races if race.results),
        wins=fold.wins,
        poles=quali.poles,
        seasons=len(fold.points_by_season),
        average_finish=fold.average_finish,
        average_qualifying=quali.average_position,
        points_by_season=fold.points_by_season,
        constructor_breakdown=constructor_breakdown(result_races),
    )


# ── Constructor and circuit rollups ────────────────────────────


def constructor_stats(constructor_id: str, races: Sequence[Race]) -> ConstructorStats:
    """Roll up a constructor's history: seasons, wins, and who drove most."""
    fold = fold_results(races)
    seasons = {race.season for race in races if race.season}
    season_numbers = [race.season_number for race in races if race.season_number is not None]

    counts: dict[str, dict] = {}
    for race in races:
        for result in race.results:
            if result.driver is None:
                continue
            did = result.driver.driver_id
            name = _driver_name(result.driver, did)
            row = counts.setdefault(did, {"driver_id": did, "name": name, "races": 0})
            row["races"] += 1
            row["name"] = name

    top_id: str | None = None
    top_races = 0
    for did, row in counts.items():
        if row["races"] > top_races:
            top_id, top_races = did, row["races"]

    # Stable sort: ties keep first-appearance order.
    breakdown = sorted(counts.values(), key=lambda r: -r["races"])
    return ConstructorStats(
        constructor_id=constructor_id,
        seasons=len(seasons),
        first_season=min(season_numbers) if season_numbers else None,
        races=sum(1 for race in races if race.results),
        wins=fold.wins,
        points_by_season=fold.points_by_season,
        average_finish=fold.average_finish,
        driver_count=len(counts),
        top_driver_name=counts[top_id]["name"] if top_id else None,
        top_driver_races=top_races,
        driver_breakdown=[DriverRaceCount(**row) for row in breakdown],
    )


def _winner(race: Race) -> ResultEntry | None:
    return next((r for r in race.results if r.position_value == 1), None)


def circuit_stats(
    circuit_id: str,
    races: Sequence[Race],
    result_races: Sequence[Race],
    top: int = 3,
) -> CircuitStats:
    """Race count, first date, most frequent winners and the latest classification."""
    dates = [race.date for race in races if race.date]

    wins: dict[str, dict] = {}
    latest: Race | None = None
    latest_key: tuple[str, int, int] | None = None
    for race in result_races:
        winner = _winner(race)
        if winner is not None and winner.driver is not None:
            did = winner.driver.driver_id
            row = wins.setdefault(did, {"driver_id": did, "name": _driver_name(winner.driver, did), "wins": 0})
            row["wins"] += 1

        key = (race.date or "", race.season_number or -1, race.round_number or -1)
        if latest_key is None or key > latest_key:
            latest, latest_key = race, key

    if latest is not None:
        ordered = sorted(latest.results, key=lambda r: r.position_value or _UNCLASSIFIED)
        latest = latest.model_copy(update={"results": ordered})

    return CircuitStats(
        circuit_id=circuit_id,
        race_count=len(races),
        first_date=min(dates) if dates else None,
        top_winners=[CircuitWinner(**row) for row in sorted(wins.values(), key=lambda r: -r["wins"])[:top]],
        latest_race=latest,
    )


# ── Pit stops ──────────────────────────────────────────────────


def pit_stop_summary(
    from_season: int,
    to_season: int,
    races: Iterable[Race],
    driver_names: dict[str, str] | None = None,
) -> PitStopSummary:
    """Fastest and slowest stops plus a per-driver ranking by stop count.

    Ties on duration keep the first stop seen. Stops whose duration cannot be
    parsed are counted in ``unparsed_stops`` and excluded from every extreme
    and average.
    """
    names = driver_names or {}
    total_stops = 0
    races_with_stops = 0
    unparsed = 0
    fastest: PitStopRecord | None = None
    slowest: PitStopRecord | None = None
    stops_by_driver: dict[str, int] = {}
    seconds_by_driver: dict[str, float] = {}

    for race in races:
        if not race.pit_stops:
            continue
        races_with_stops += 1
        total_stops += len(race.pit_stops)
        for stop in race.pit_stops:
            seconds = stop.duration_seconds
            if seconds is None:
                unparsed += 1
                continue
            record = PitStopRecord(
                season=race.season_number or 0,
                round=race.round,
                race_name=race.display_name,
                driver_id=stop.driver_id,
                lap=stop.lap or "",
                stop=stop.stop or "",
                duration_text=stop.duration or "",
                duration_seconds=seconds,
            )
            if fastest is None or seconds < fastest.duration_seconds:
                fastest = record
            if slowest is None or seconds > slowest.duration_seconds:
                slowest = record
            stops_by_driver[stop.driver_id] = stops_by_driver.get(stop.driver_id, 0) + 1
            seconds_by_driver[stop.driver_id] = seconds_by_driver.get(stop.driver_id, 0.0) + seconds

    ranking = [
        DriverStopRank(
            driver_id=did,
            name=names.get(did, did),
            stops=count,
            average_seconds=seconds_by_driver[did] / count,
        )
        for did, count in sorted(stops_by_driver.items(), key=lambda item: (-item[1], item[0]))
    ]
    return PitStopSummary(
        from_season=from_season,
        to_season=to_season,
        total_stops=total_stops,
        races_with_stops=races_with_stops,
        unparsed_stops=unparsed,
        fastest=fastest,
        slowest=slowest,
        ranking=ranking,
    )


# ── Season assembly ────────────────────────────────────────────


def attach_results(schedule: Sequence[Race], result_races: Iterable[Race]) -> list[Race]:
    """Pair each scheduled round with its merged results, ordered by round."""
    by_round: dict[str, list[ResultEntry]] = {}
    for race in result_races:
        by_round.setdefault(race.round, []).extend(race.results)
    return [
        race.model_copy(update={"results": list(by_round.get(race.round, []))})
        for race in sort_by_round(schedule)
    ]


def _format_points(value: float) -> str:
    return str(int(value)) if value.is_integer() else f"{value:g}"


def season_table(results: SeasonResults) -> SeasonTable:
    """Lay out a season grid: standings order first, then anyone seen only in results."""
    races = results.races

    driver_standings: dict[str, DriverStanding] = {s.driver.driver_id: s for s in results.driver_standings}
    drivers: dict[str, Driver] = {s.driver.driver_id: s.driver for s in results.driver_standings}
    for race in races:
        for entry in race.results:
            if entry.driver is not None and entry.driver.driver_id not in drivers:
                drivers[entry.driver.driver_id] = entry.driver

    driver_rows = []
    for did, driver in drivers.items():
        standing = driver_standings.get(did)
        per_race = []
        for race in races:
            entry = next((r for r in race.results if r.driver and r.driver.driver_id == did), None)
            per_race.append((entry.position or entry.position_text or entry.status or "-") if entry else "-")
        driver_rows.append(DriverRow(
            driver=driver,
            position=(standing.position or "") if standing else "",
            points=standing.points if standing else "0",
            per_race=per_race,
        ))

    team_standings: dict[str, ConstructorStanding] = {
        s.constructor.constructor_id: s for s in results.constructor_standings
    }
    teams: dict[str, Constructor] = {s.constructor.constructor_id: s.constructor for s in results.constructor_standings}
    for race in races:
        for entry in race.results:
            if entry.constructor is not None and entry.constructor.constructor_id not in teams:
                teams[entry.constructor.constructor_id] = entry.constructor

    constructor_rows = []
    for cid, team in teams.items():
        standing = team_standings.get(cid)
        per_race = []
        for race in races:
            round_points = 0.0
            for r in race.results:
                if r.constructor is None or r.constructor.constructor_id != cid:
                    continue
                points = r.points_value
                # Unparseable points are skipped, not read as zero.
                if points is not None:
                    round_points += points
            per_race.append(_format_points(round_points) if round_points > 0 else "-")
        constructor_rows.append(ConstructorRow(
            constructor=team,
            position=(standing.position or "") if standing else "",
            points=standing.points if standing else "0",
            per_race=per_race,
        ))

    winners = [w for w in (_winner(race) for race in races) if w is not None]
    driver_champion = results.driver_standings[0].driver.driver_id if results.driver_standings else None
    team_champion = (
        results.constructor_standings[0].constructor.constructor_id if results.constructor_standings else None
    )
    return SeasonTable(
        rounds=[race.round for race in races],
        drivers=driver_rows,
        constructors=constructor_rows,
        driver_champion_wins=sum(
            1 for w in winners if driver_champion and w.driver and w.driver.driver_id == driver_champion
        ),
        constructor_champion_wins=sum(
            1 for w in winners if team_champion and w.constructor and w.constructor.constructor_id == team_champion
        ),
    )
