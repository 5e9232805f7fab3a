"""Tests for duration, timestamp and range parsing."""

import pytest

from cwlogs.core.errors import MalformedDurationError, MalformedTimestampError, TimeFormatError
from cwlogs.core.timeparse import parse_duration, parse_time_range, parse_timestamp

NOW = 1_704_067_200_000  # 2024-01-01 00:00:00 UTC


@pytest.mark.parametrize("value,expected", [
    ("30m", 1_800_000),
    ("45s", 45_000),
    ("2h", 7_200_000),
    ("1d", 86_400_000),
    ("0s", 0),
    (" 5m ", 300_000),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected

@pytest.mark.parametrize("value", ["bogus", "", "10", "m", "1w", "-5m", "1.5h", "5 m"])
def test_parse_duration_rejects(value):
    with pytest.raises(MalformedDurationError) as excinfo:
        parse_duration(value)

    assert excinfo.value.details["value"] == value

@pytest.mark.parametrize("value,expected", [
    ("2024-01-01 00:00:00", NOW),
    ("2024-01-01T00:00:00", NOW),
    ("2024-01-01T00:00:00Z", NOW),
    ("2024-01-01T00:00:00.250Z", NOW + 250),
    ("1704067200", NOW),
    ("1704067200000", NOW),
])
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected

@pytest.mark.parametrize("value", ["yesterday", "2024-13-01 00:00:00", "01/02/2024", ""])
def test_parse_timestamp_rejects(value):
    with pytest.raises(MalformedTimestampError):
        parse_timestamp(value)

def test_time_errors_share_base():
    assert issubclass(MalformedDurationError, TimeFormatError)
    assert issubclass(MalformedTimestampError, TimeFormatError)

def test_range_defaults_to_last_hour():
    assert parse_time_range(now=NOW) == (NOW - 3_600_000, NOW)

def test_range_since():
    assert parse_time_range(since="15m", now=NOW) == (NOW - 900_000, NOW)

def test_since_takes_precedence():
    start, end = parse_time_range(since="1m", start="2020-01-01 00:00:00", now=NOW)

    assert (start, end) == (NOW - 60_000, NOW)

def test_range_explicit_bounds():
    start, end = parse_time_range(start="2024-01-01 00:00:00", end="1704070800", now=NOW)

    assert start == NOW
    assert end == NOW + 3_600_000

def test_range_open_end():
    assert parse_time_range(start="1704067200", now=NOW) == (NOW, None)

def test_range_bad_since_raises():
    with pytest.raises(MalformedDurationError):
        parse_time_range(since="soon", now=NOW)
