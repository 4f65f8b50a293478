"""
Tests for the unit and vocabulary converters.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from weather_gateway.providers.units import (
    COMPASS_DEGREES,
    compass_to_degrees,
    fahrenheit_to_celsius,
    meters_to_km,
    mph_to_ms,
    pa_to_hpa,
    parse_rfc3339,
    parse_wind_speed,
)


class TestCompassToDegrees:
    @pytest.mark.parametrize(
        "direction,expected",
        [
            ("N", 0.0), ("NNE", 22.5), ("NE", 45.0), ("ENE", 67.5),
            ("E", 90.0), ("ESE", 112.5), ("SE", 135.0), ("SSE", 157.5),
            ("S", 180.0), ("SSW", 202.5), ("SW", 225.0), ("WSW", 247.5),
            ("W", 270.0), ("WNW", 292.5), ("NW", 315.0), ("NNW", 337.5),
        ],
    )
    def test_all_sixteen_points(self, direction, expected):
        assert compass_to_degrees(direction) == expected

    def test_case_insensitive(self):
        for direction, degrees in COMPASS_DEGREES.items():
            assert compass_to_degrees(direction.lower()) == degrees

    @pytest.mark.parametrize("direction", ["", "X", "NORTH", "N E", "Variable"])
    def test_unknown_defaults_to_north(self, direction):
        assert compass_to_degrees(direction) == 0.0

    def test_none_defaults_to_north(self):
        assert compass_to_degrees(None) == 0.0


class TestConversions:
    def test_fahrenheit_to_celsius(self):
        assert fahrenheit_to_celsius(75) == pytest.approx(23.89, abs=0.1)
        assert fahrenheit_to_celsius(60) == pytest.approx(15.56, abs=0.1)
        assert fahrenheit_to_celsius(32) == 0

    def test_mph_to_ms(self):
        assert mph_to_ms(10) == pytest.approx(4.4704, abs=0.1)

    def test_pa_to_hpa(self):
        assert pa_to_hpa(101325) == 1013.25

    def test_meters_to_km(self):
        assert meters_to_km(16000) == 16.0


class TestParseWindSpeed:
    def test_simple_speed(self):
        assert parse_wind_speed("10 mph") == pytest.approx(4.4704)

    def test_range_takes_first_number(self):
        assert parse_wind_speed("5 to 10 mph") == pytest.approx(5 * 0.44704)

    @pytest.mark.parametrize("text", ["", "calm", "mph", "ten mph", "10"])
    def test_unparsable_is_zero(self, text):
        assert parse_wind_speed(text) == 0.0


class TestParseRfc3339:
    def test_zulu(self):
        assert parse_rfc3339("2024-01-15T12:00:00Z") == datetime(2024, 1, 15, 12, tzinfo=timezone.utc)

    def test_offset(self):
        parsed = parse_rfc3339("2024-01-15T12:00:00-05:00")
        assert parsed.utcoffset() == timedelta(hours=-5)

    @pytest.mark.parametrize("value,microsecond", [
        ("2024-01-15T12:00:00.5Z", 500000),
        ("2024-01-15T12:00:00.25+00:00", 250000),
        ("2024-01-15T12:00:00.123456Z", 123456),
    ])
    def test_fractional_seconds(self, value, microsecond):
        parsed = parse_rfc3339(value)
        assert parsed.microsecond == microsecond
        assert parsed.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("value", ["not a time", "2024-13-01T00:00:00Z", "2024-01-15T12:00:00"])
    def test_invalid_raises(self, value):
        with pytest.raises(ValueError):
            parse_rfc3339(value)
