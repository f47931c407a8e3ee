"""Tests for the pure statistics folds."""

from __future__ import annotations

import pytest

from conftest import (
    SAMPLE_CONSTRUCTOR,
    SAMPLE_CONSTRUCTOR_2,
    SAMPLE_DRIVER,
    SAMPLE_DRIVER_2,
    race,
    result_entry,
)
from jolpica.aggregators import (
    attach_results,
    circuit_stats,
    constructor_breakdown,
    constructor_stats,
    driver_career_stats,
    fold_qualifying,
    fold_results,
    pit_stop_summary,
    season_table,
    sort_by_round,
)
from jolpica.models import ConstructorStanding, DriverStanding, Race, ReconcileState, SeasonResults


def _race(*args, **kwargs) -> Race:
    return Race.model_validate(race(*args, **kwargs))


def _stop(driver_id: str, duration: str, lap: str = "10") -> dict:
    return {"driverId": driver_id, "lap": lap, "stop": "1", "time": "14:00:00", "duration": duration}


class TestFoldResults:
    def test_wins_points_and_average_finish(self) -> None:
        races = [
            _race(2005, 1, Results=[result_entry(position="1", points="10")]),
            _race(2005, 2, Results=[result_entry(position="DNF", points="0")]),
            _race(2005, 3, Results=[result_entry(position="1", points="25")]),
        ]

        fold = fold_results(races)

        assert fold.entries == 3
        assert fold.wins == 2
        assert fold.points_by_season == {"2005": 35.0}
        assert fold.average_finish == 1.0
        assert fold.unparsed_points == 0

    def test_unparseable_points_are_counted_not_zeroed(self) -> None:
        races = [
            _race(2004, 1, Results=[result_entry(position="2", points="")]),
            _race(2005, 1, Results=[result_entry(position="3", points="6")]),
        ]

        fold = fold_results(races)

        assert fold.unparsed_points == 1
        assert fold.points_by_season == {"2004": 0.0, "2005": 6.0}
        assert fold.average_finish == 2.5

    def test_seasons_sorted_numerically(self) -> None:
        races = [
            _race(2010, 1, Results=[result_entry(points="1")]),
            _race(2003, 1, Results=[result_entry(points="2")]),
        ]
        assert list(fold_results(races).points_by_season) == ["2003", "2010"]

    def test_no_numeric_positions(self) -> None:
        fold = fold_results([_race(2005, 1, Results=[result_entry(position="R")])])
        assert fold.average_finish is None
        assert fold.wins == 0

    def test_empty(self) -> None:
        fold = fold_results([])
        assert fold.entries == 0
        assert fold.points_by_season == {}


class TestFoldQualifying:
    def test_poles_and_average(self) -> None:
        races = [
            _race(2005, 1, QualifyingResults=[{"position": "1", "Driver": SAMPLE_DRIVER}]),
            _race(2005, 2, QualifyingResults=[{"position": "4", "Driver": SAMPLE_DRIVER}]),
            _race(2005, 3, QualifyingResults=[{"position": "", "Driver": SAMPLE_DRIVER}]),
        ]
        fold = fold_qualifying(races)
        assert fold.entries == 3
        assert fold.poles == 1
        assert fold.average_position == 2.5


class TestConstructorBreakdown:
    def test_ordered_by_first_appearance(self) -> None:
        races = [
            _race(2007, 1, Results=[result_entry(constructor=SAMPLE_CONSTRUCTOR_2, position="3", points="6")]),
            _race(2005, 2, Results=[result_entry(constructor=SAMPLE_CONSTRUCTOR, position="1", points="10")]),
            _race(2005, 1, Results=[result_entry(constructor=SAMPLE_CONSTRUCTOR, position="2", points="8")]),
        ]

        rows = constructor_breakdown(races)

        assert [row.constructor_id for row in rows] == ["renault", "mclaren"]
        renault = rows[0]
        assert (renault.first_season, renault.first_round) == (2005, 1)
        assert renault.races == 2
        assert renault.wins == 1
        assert renault.points == 18.0

    def test_round_compared_as_integer(self) -> None:
        races = [
            _race(2005, 10, Results=[result_entry(constructor=SAMPLE_CONSTRUCTOR)]),
            _race(2005, 9, Results=[result_entry(constructor=SAMPLE_CONSTRUCTOR_2)]),
        ]
        assert [row.constructor_id for row in constructor_breakdown(races)] == ["mclaren", "renault"]

    def test_unparseable_points_are_skipped(self) -> None:
        races = [
            _race(2005, 1, Results=[result_entry(constructor=SAMPLE_CONSTRUCTOR, points="10")]),
            _race(2005, 2, Results=[result_entry(constructor=SAMPLE_CONSTRUCTOR, points="n/a")]),
        ]

        (row,) = constructor_breakdown(races)

        assert row.races == 2
        assert row.points == 10.0


class TestDriverCareer:
    def test_rollup(self) -> None:
        results = [
            _race(2005, 1, Results=[result_entry(position="1", points="10")]),
            _race(2006, 1, Results=[result_entry(position="2", points="8")]),
        ]
        qualifying = [_race(2005, 1, QualifyingResults=[{"position": "1", "Driver": SAMPLE_DRIVER}])]

        stats = driver_career_stats("alonso", results, qualifying)

        assert stats.races_started == 2
        assert stats.wins == 1
        assert stats.poles == 1
        assert stats.seasons == 2
        assert stats.total_points == 18.0
        assert stats.average_finish == 1.5
        assert stats.average_qualifying == 1.0


class TestConstructorStats:
    def test_top_driver_first_seen_on_tie(self) -> None:
        races = [
            _race(2005, 1, Results=[
                result_entry(driver=SAMPLE_DRIVER, position="1", points="10"),
                result_entry(driver=SAMPLE_DRIVER_2, position="2", points="8"),
            ]),
            _race(2005, 2, Results=[
                result_entry(driver=SAMPLE_DRIVER_2, position="1", points="10"),
                result_entry(driver=SAMPLE_DRIVER, position="2", points="8"),
            ]),
        ]

        stats = constructor_stats("renault", races)

        assert stats.top_driver_name == "Fernando Alonso"
        assert stats.top_driver_races == 2
        assert stats.driver_count == 2
        assert [row.driver_id for row in stats.driver_breakdown] == ["alonso", "hamilton"]
        assert stats.wins == 2
        assert stats.races == 2
        assert stats.seasons == 1
        assert stats.first_season == 2005
        assert stats.points_by_season == {"2005": 36.0}

    def test_breakdown_descending(self) -> None:
        races = [
            _race(2005, 1, Results=[result_entry(driver=SAMPLE_DRIVER)]),
            _race(2005, 2, Results=[result_entry(driver=SAMPLE_DRIVER_2)]),
            _race(2005, 3, Results=[result_entry(driver=SAMPLE_DRIVER_2)]),
        ]
        stats = constructor_stats("renault", races)
        assert [(row.driver_id, row.races) for row in stats.driver_breakdown] == [("hamilton", 2), ("alonso", 1)]
        assert stats.top_driver_name == "Lewis Hamilton"

    def test_no_races(self) -> None:
        stats = constructor_stats("nobody", [])
        assert stats.top_driver_name is None
        assert stats.first_season is None
        assert stats.average_finish is None


class TestCircuitStats:
    def test_counts_winners_and_latest(self) -> None:
        races = [_race(2003, 15, "2003-09-14"), _race(2004, 15, "2004-09-12"), _race(2005, 16, "2005-09-04")]
        results = [
            _race(2003, 15, "2003-09-14", Results=[result_entry(driver=SAMPLE_DRIVER_2, position="1")]),
            _race(2005, 16, "2005-09-04", Results=[
                result_entry(driver=SAMPLE_DRIVER, position="R", status="Engine"),
                result_entry(driver=SAMPLE_DRIVER_2, position="2"),
                result_entry(driver=SAMPLE_DRIVER, position="1"),
            ]),
            _race(2004, 15, "2004-09-12", Results=[result_entry(driver=SAMPLE_DRIVER_2, position="1")]),
        ]

        stats = circuit_stats("monza", races, results)

        assert stats.race_count == 3
        assert stats.first_date == "2003-09-14"
        assert [(w.driver_id, w.wins) for w in stats.top_winners] == [("hamilton", 2), ("alonso", 1)]
        assert stats.latest_race is not None
        assert stats.latest_race.season == "2005"
        assert [r.position for r in stats.latest_race.results] == ["1", "2", "R"]

    def test_top_limits_winners(self) -> None:
        results = [
            _race(2000 + i, 1, Results=[result_entry(driver={"driverId": f"d{i}"}, position="1")])
            for i in range(5)
        ]
        assert len(circuit_stats("monza", [], results, top=3).top_winners) == 3

    def test_no_history(self) -> None:
        stats = circuit_stats("new", [], [])
        assert stats.race_count == 0
        assert stats.first_date is None
        assert stats.latest_race is None


class TestPitStopSummary:
    def test_extremes_keep_first_seen_on_ties(self) -> None:
        races = [
            _race(2019, 1, PitStops=[_stop("alonso", "22.000"), _stop("hamilton", "22.000")]),
            _race(2019, 2, PitStops=[_stop("hamilton", "1:05.500"), _stop("alonso", "1:05.500")]),
        ]

        summary = pit_stop_summary(2019, 2019, races)

        assert summary.fastest is not None and summary.fastest.driver_id == "alonso"
        assert summary.slowest is not None and summary.slowest.driver_id == "hamilton"
        assert summary.slowest.duration_seconds == pytest.approx(65.5)
        assert summary.slowest.round == "2"

    def test_unparseable_durations_are_excluded(self) -> None:
        races = [_race(2019, 1, PitStops=[_stop("alonso", ""), _stop("alonso", "abc"), _stop("hamilton", "24.1")])]

        summary = pit_stop_summary(2019, 2019, races)

        assert summary.total_stops == 3
        assert summary.unparsed_stops == 2
        assert summary.fastest is not None and summary.fastest.driver_id == "hamilton"
        assert summary.fastest is summary.slowest or summary.fastest == summary.slowest
        assert [rank.driver_id for rank in summary.ranking] == ["hamilton"]

    def test_ranking_by_count_then_id(self) -> None:
        races = [
            _race(2020, 1, PitStops=[_stop("b", "20"), _stop("a", "30"), _stop("c", "25"), _stop("c", "27")]),
        ]

        summary = pit_stop_summary(2020, 2020, races, driver_names={"c": "Driver C"})

        assert [(r.driver_id, r.stops) for r in summary.ranking] == [("c", 2), ("a", 1), ("b", 1)]
        assert summary.ranking[0].name == "Driver C"
        assert summary.ranking[0].average_seconds == pytest.approx(26.0)
        assert summary.ranking[1].name == "a"

    def test_races_without_stops(self) -> None:
        summary = pit_stop_summary(2020, 2020, [_race(2020, 1), _race(2020, 2, PitStops=[_stop("a", "20")])])
        assert summary.races_with_stops == 1
        assert summary.total_stops == 1

    def test_empty(self) -> None:
        summary = pit_stop_summary(2020, 2021, [])
        assert summary.fastest is None
        assert summary.slowest is None
        assert summary.ranking == []


class TestSeasonAssembly:
    def test_sort_by_round_is_numeric(self) -> None:
        races = [_race(2005, 10), _race(2005, 2), _race(2005, 1)]
        assert [r.round for r in sort_by_round(races)] == ["1", "2", "10"]

    def test_attach_results_keeps_rounds_without_results(self) -> None:
        schedule = [_race(2005, 2), _race(2005, 1)]
        results = [_race(2005, 1, Results=[result_entry()])]

        attached = attach_results(schedule, results)

        assert [r.round for r in attached] == ["1", "2"]
        assert attached[0].is_complete
        assert not attached[1].is_complete

    def test_season_table(self) -> None:
        races = [
            _race(2005, 1, Results=[
                result_entry(driver=SAMPLE_DRIVER, constructor=SAMPLE_CONSTRUCTOR, position="1", points="10"),
                result_entry(driver=SAMPLE_DRIVER_2, constructor=SAMPLE_CONSTRUCTOR_2, position="2", points="8"),
            ]),
            _race(2005, 2, Results=[
                result_entry(driver=SAMPLE_DRIVER_2, constructor=SAMPLE_CONSTRUCTOR_2, position="1", points="10"),
                result_entry(driver=SAMPLE_DRIVER, constructor=SAMPLE_CONSTRUCTOR, position="R", points="0",
                             status="Hydraulics"),
            ]),
            _race(2005, 3),
        ]
        results = SeasonResults(
            season=2005,
            state=ReconcileState.COMPLETE,
            races=races,
            driver_standings=[DriverStanding.model_validate(
                {"position": "1", "points": "133", "wins": "7", "Driver": SAMPLE_DRIVER}
            )],
            constructor_standings=[ConstructorStanding.model_validate(
                {"position": "1", "points": "191", "wins": "8", "Constructor": SAMPLE_CONSTRUCTOR}
            )],
        )

        table = season_table(results)

        assert table.rounds == ["1", "2", "3"]
        assert [row.driver.driver_id for row in table.drivers] == ["alonso", "hamilton"]
        assert table.drivers[0].per_race == ["1", "R", "-"]
        assert table.drivers[1].position == ""
        assert table.drivers[1].points == "0"
        assert [row.constructor.constructor_id for row in table.constructors] == ["renault", "mclaren"]
        assert table.constructors[0].per_race == ["10", "-", "-"]
        assert table.constructors[1].per_race == ["8", "10", "-"]
        assert table.driver_champion_wins == 1
        assert table.constructor_champion_wins == 1

    def test_season_table_skips_unparseable_team_points(self) -> None:
        races = [
            _race(2005, 1, Results=[
                result_entry(driver=SAMPLE_DRIVER, constructor=SAMPLE_CONSTRUCTOR, points="10"),
                result_entry(driver=SAMPLE_DRIVER_2, constructor=SAMPLE_CONSTRUCTOR, position="2", points="?"),
            ]),
            _race(2005, 2, Results=[
                result_entry(driver=SAMPLE_DRIVER, constructor=SAMPLE_CONSTRUCTOR, points=""),
            ]),
        ]
        results = SeasonResults(season=2005, state=ReconcileState.COMPLETE, races=races)

        table = season_table(results)

        assert table.constructors[0].per_race == ["10", "-"]
