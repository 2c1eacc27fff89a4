import math
from datetime import datetime

from judgeit_core import (
    duration_between,
    format_duration,
    millis_to_seconds,
    parse_clock_time,
    rpm_from_duration,
)
from judgeit_core.timecodec import clock_time_of, duration_sort_key


def test_parse_clock_time_handles_fraction_and_missing_fraction():
    assert parse_clock_time("00:00:10.500") == 10500
    assert parse_clock_time("01:02:03") == 3723000
    assert parse_clock_time("12:00:00.1234") == 43200123


def test_parse_clock_time_malformed_is_nan_not_error():
    assert math.isnan(parse_clock_time("garbage"))
    assert math.isnan(parse_clock_time("12:00"))
    assert math.isnan(parse_clock_time(None))


def test_parse_clock_time_is_strictly_increasing():
    ordered = ["00:00:00.000", "00:00:00.001", "00:00:59.999", "00:01:00", "09:59:59.999", "23:59:59.999"]
    values = [parse_clock_time(t) for t in ordered]
    assert all(a < b for a, b in zip(values, values[1:]))


def test_duration_between_same_time_is_zero():
    for t in ("00:00:00.000", "13:37:00.042", "23:59:59"):
        assert duration_between(t, t) == 0


def test_format_duration_of_one_hour_twenty_three_minutes():
    assert format_duration(duration_between("10:00:00.000", "11:23:45.678")) == "83:45:678"
    assert format_duration(10500) == "00:10:500"
    assert format_duration(0) == "00:00:000"


def test_format_duration_negative_and_invalid():
    assert format_duration(-1500) == "-00:01:500"
    assert format_duration(math.nan) == "--:--:---"


def test_negative_duration_is_not_clamped():
    assert duration_between("00:00:10.000", "00:00:05.000") == -5000


def test_millis_to_seconds_precision_modes():
    assert millis_to_seconds(1500) == 1.5
    assert millis_to_seconds(1500, 3) == "1.500"
    assert millis_to_seconds(2345, 0) == "2"
    assert millis_to_seconds(1999, -1) == "1"


def test_rpm_from_duration():
    assert rpm_from_duration(6000, 10) == 100.0
    assert rpm_from_duration(500, 10) == 1200.0
    assert math.isnan(rpm_from_duration(0, 10))
    assert math.isnan(rpm_from_duration(math.nan, 10))


def test_duration_sort_key_sinks_invalid_durations():
    assert duration_sort_key(100) == 100
    assert duration_sort_key(-1) == math.inf
    assert duration_sort_key(math.nan) == math.inf


def test_clock_time_of_judge_press():
    clock, seconds = clock_time_of(datetime(2024, 6, 1, 13, 5, 7, 250000))
    assert clock == "13:05:07.250"
    assert seconds == 47107.25
    assert parse_clock_time(clock) == 47107250


def test_parse_clock_time_rejects_non_ascii_digits():
    assert math.isnan(parse_clock_time("١٢:00:00"))
    assert math.isnan(parse_clock_time("12:00:00.٥"))
