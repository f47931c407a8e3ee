"""Tests for typed parsing of upstream string fields."""

from __future__ import annotations

import pytest

from jolpica.parsing import classify_status, parse_duration, parse_int, parse_points, parse_position


class TestParseDuration:
    def test_minutes_and_seconds(self) -> None:
        assert parse_duration("1:23.456") == pytest.approx(83.456)

    def test_plain_seconds(self) -> None:
        assert parse_duration("23.456") == pytest.approx(23.456)

    def test_seconds_past_a_minute(self) -> None:
        assert parse_duration("0:75.5") == pytest.approx(75.5)
        assert parse_duration("1:61.0") == pytest.approx(121.0)

    @pytest.mark.parametrize("value", ["", "   ", None, "abc", "1:2:3", "1:-5.0", "-3.0", "x:10.0", "1:nan"])
    def test_unparseable(self, value) -> None:
        assert parse_duration(value) is None


class TestParsePosition:
    def test_numeric(self) -> None:
        assert parse_position("3") == 3

    @pytest.mark.parametrize("value", ["R", "DNF", "", None, "0", "-1", "W"])
    def test_unclassified(self, value) -> None:
        assert parse_position(value) is None


class TestParsePoints:
    def test_fractional(self) -> None:
        assert parse_points("12.5") == 12.5

    def test_zero(self) -> None:
        assert parse_points("0") == 0.0

    @pytest.mark.parametrize("value", ["", None, "nan", "inf", "-5", "ten", True])
    def test_unparseable(self, value) -> None:
        assert parse_points(value) is None


class TestParseInt:
    def test_values(self) -> None:
        assert parse_int("2005") == 2005
        assert parse_int(7) == 7
        assert parse_int("7a") is None
        assert parse_int(None) is None


class TestClassifyStatus:
    @pytest.mark.parametrize(
        ("status", "kind"),
        [
            ("Finished", "finished"),
            ("+1 Lap", "lapped"),
            ("+3 Laps", "lapped"),
            ("Engine", "retired"),
            ("Collision", "retired"),
            ("", "retired"),
            (None, "retired"),
        ],
    )
    def test_kinds(self, status, kind) -> None:
        assert classify_status(status) == kind
