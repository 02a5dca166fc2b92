"""Date, clock and occupation-period helpers.

Clock times are ``HH:MM`` strings in the restaurant's local time and are
compared as minutes since midnight.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Union

from app.engine.results import InvalidDateFormat
from app.schemas.availability import OccupationPeriod


DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

DateLike = Union[str, date, datetime]


def parse_local_date(date_string: str) -> datetime:
    """Parse ``YYYY-MM-DD`` into a naive datetime pinned at local noon.

    Noon keeps the calendar day stable when the value is later shifted
    across timezones or formatted.
    """
    match = DATE_PATTERN.match(date_string) if isinstance(date_string, str) else None
    if not match:
        raise InvalidDateFormat(f"Data inválida: {date_string!r}. Use o formato AAAA-MM-DD.")
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, 12, 0, 0)
    except ValueError as exc:
        raise InvalidDateFormat(f"Data inválida: {date_string!r}.") from exc


def as_local_date(value: DateLike) -> date:
    """Normalize a date string, date or datetime to a calendar date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_local_date(value).date()


def day_of_week(value: DateLike) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday"""
    return (as_local_date(value).weekday() + 1) % 7


def is_same_day(value: DateLike, now: datetime) -> bool:
    return as_local_date(value) == now.date()


def clock_to_minutes(clock: str) -> int:
    match = CLOCK_PATTERN.match(clock) if isinstance(clock, str) else None
    if not match:
        raise InvalidDateFormat(f"Horário inválido: {clock!r}. Use o formato HH:MM.")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidDateFormat(f"Horário inválido: {clock!r}.")
    return hours * 60 + minutes


def minutes_to_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clock_on(day: date, clock: str, tzinfo=None) -> datetime:
    """Wall-clock instant of ``clock`` on ``day``"""
    minutes = clock_to_minutes(clock)
    return datetime.combine(day, time(minutes // 60, minutes % 60), tzinfo=tzinfo)


def cutoff_minutes(booking_cutoff_hours: float) -> int:
    return int(round(booking_cutoff_hours * 60))


def cutoff_delta(booking_cutoff_hours: float) -> timedelta:
    return timedelta(minutes=cutoff_minutes(booking_cutoff_hours))


def occupation_period(slot_time: str, dwell_minutes: int, buffer_minutes: int) -> OccupationPeriod:
    """Window a table is held for a booking starting at ``slot_time``.

    ``start = slot - buffer`` and ``end = slot + dwell + buffer``; the
    result is not wrapped around midnight.
    """
    slot_minutes = clock_to_minutes(slot_time)
    return OccupationPeriod(
        start=slot_minutes - buffer_minutes,
        end=slot_minutes + dwell_minutes + buffer_minutes,
        slot_minutes=slot_minutes,
    )


def periods_overlap(a: OccupationPeriod, b: OccupationPeriod) -> bool:
    """Half-open overlap test; ``a.end == b.start`` is not a conflict"""
    return a.overlaps(b)
