"""Tests for date, clock and occupation-period helpers"""

from datetime import datetime

import pytest

from app.engine import InvalidDateFormat, day_of_week, occupation_period, parse_local_date, periods_overlap
from app.engine.periods import clock_to_minutes, minutes_to_clock
from app.schemas.availability import OccupationPeriod


def test_parse_local_date_pins_noon():
    parsed = parse_local_date("2030-01-01")
    assert parsed == datetime(2030, 1, 1, 12, 0, 0)


@pytest.mark.parametrize("value", ["01/01/2030", "2030-1-1", "", "2030-02-30", "tomorrow"])
def test_parse_local_date_rejects_malformed(value):
    with pytest.raises(InvalidDateFormat):
        parse_local_date(value)


def test_day_of_week_starts_on_sunday():
    assert day_of_week("2029-12-30") == 0  # Sunday
    assert day_of_week("2030-01-01") == 2  # Tuesday
    assert day_of_week("2030-01-05") == 6  # Saturday


def test_clock_round_trip_edges():
    assert clock_to_minutes("00:00") == 0
    assert clock_to_minutes("23:59") == 1439
    assert minutes_to_clock(750) == "12:30"
    with pytest.raises(InvalidDateFormat):
        clock_to_minutes("24:00")


def test_occupation_period_adds_buffer_on_both_sides():
    period = occupation_period("12:30", 90, 10)
    assert (period.start, period.end, period.slot_minutes) == (740, 850, 750)


def test_occupation_period_is_not_wrapped_at_midnight():
    early = occupation_period("00:05", 60, 10)
    late = occupation_period("23:30", 90, 10)
    assert early.start == -5
    assert late.end == 1410 + 100


def test_touching_periods_do_not_overlap():
    first = OccupationPeriod(start=600, end=700, slot_minutes=610)
    second = OccupationPeriod(start=700, end=800, slot_minutes=710)
    assert not periods_overlap(first, second)
    assert not periods_overlap(second, first)


@pytest.mark.parametrize(
    "a,b",
    [
        ((600, 700), (650, 750)),
        ((600, 700), (610, 690)),
        ((600, 700), (500, 601)),
        ((600, 700), (700, 800)),
        ((600, 700), (100, 200)),
    ],
)
def test_overlap_is_symmetric(a, b):
    first = OccupationPeriod(start=a[0], end=a[1], slot_minutes=a[0])
    second = OccupationPeriod(start=b[0], end=b[1], slot_minutes=b[0])
    assert periods_overlap(first, second) == periods_overlap(second, first)
