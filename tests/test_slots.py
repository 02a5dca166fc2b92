"""Tests for bookable slot enumeration"""

from datetime import datetime

from app.engine import generate_available_slots, iter_available_slots
from tests.conftest import TUESDAY

NOW = datetime(2029, 12, 1, 10, 0, 0)


def _times(slots):
    return [slot.time for slot in slots]


def test_every_slot_of_an_empty_shift(lunch, make_table):
    slots = generate_available_slots(lunch, TUESDAY, 2, [make_table(4)], [], 2, NOW)

    assert _times(slots) == [
        "12:00", "12:15", "12:30", "12:45",
        "13:00", "13:15", "13:30", "13:45",
        "14:00", "14:15", "14:30", "14:45",
    ]
    assert all(slot.available and slot.tables_count == 1 for slot in slots)


def test_conflicting_slots_are_omitted(lunch, make_table, make_reservation):
    table = make_table(4)
    # held 12:20-14:10
    existing = [make_reservation(lunch, [table], slot_time="12:30")]

    slots = generate_available_slots(lunch, TUESDAY, 2, [table], existing, 2, NOW)

    assert _times(slots) == ["14:30", "14:45"]


def test_today_skips_slots_inside_cutoff(lunch, make_table):
    now = datetime(2030, 1, 1, 11, 0, 0)
    slots = generate_available_slots(lunch, TUESDAY, 2, [make_table(4)], [], 2, now)

    assert _times(slots)[0] == "13:00"
    assert len(slots) == 8


def test_party_too_large_has_no_slots(lunch, make_table):
    assert generate_available_slots(lunch, TUESDAY, 20, [make_table(4)], [], 2, NOW) == []


def test_joined_tables_count(lunch, make_table):
    slots = generate_available_slots(lunch, TUESDAY, 6, [make_table(4), make_table(4)], [], 2, NOW)
    assert {slot.tables_count for slot in slots} == {2}


def test_iterator_is_lazy(lunch, make_table):
    slots = iter_available_slots(lunch, TUESDAY, 2, [make_table(4)], [], 2, NOW)
    assert next(slots).time == "12:00"
