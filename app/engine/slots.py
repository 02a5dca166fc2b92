"""Bookable slot enumeration"""

from datetime import datetime
from typing import Iterator, List, Sequence

import structlog

from app.engine.allocation import find_available_tables
from app.engine.periods import (
    DateLike,
    clock_on,
    clock_to_minutes,
    cutoff_delta,
    is_same_day,
    minutes_to_clock,
    occupation_period,
)
from app.schemas.availability import AvailabilitySlot
from app.schemas.reservation import ReservationResponse
from app.schemas.shift import ShiftResponse
from app.schemas.table import TableResponse

logger = structlog.get_logger()


def iter_available_slots(
    shift: ShiftResponse,
    date: DateLike,
    party_size: int,
    tables: Sequence[TableResponse],
    existing_reservations: Sequence[ReservationResponse],
    booking_cutoff_hours: float,
    now: datetime,
) -> Iterator[AvailabilitySlot]:
    """Yield the start times in ``[start_time, end_time)`` that can seat the party.

    For today, slots starting earlier than ``now + cutoff`` are skipped.
    Unbookable slots are omitted rather than reported.
    """
    start = clock_to_minutes(shift.start_time)
    end = clock_to_minutes(shift.end_time)
    step = shift.slot_interval_minutes
    if step <= 0:
        return

    earliest = now + cutoff_delta(booking_cutoff_hours) if is_same_day(date, now) else None

    for minutes in range(start, end, step):
        slot_time = minutes_to_clock(minutes)

        if earliest is not None and clock_on(now.date(), slot_time, tzinfo=now.tzinfo) < earliest:
            logger.debug("Slot blocked by cutoff", slot=slot_time, shift=shift.name)
            continue

        period = occupation_period(slot_time, shift.default_dwell_minutes, shift.default_buffer_minutes)
        allocation = find_available_tables(
            party_size,
            tables,
            date,
            period,
            existing_reservations,
            shift.default_dwell_minutes,
            shift.default_buffer_minutes,
        )
        if allocation.ok:
            yield AvailabilitySlot(time=slot_time, available=True, tables_count=len(allocation.value.tables))


def generate_available_slots(
    shift: ShiftResponse,
    date: DateLike,
    party_size: int,
    tables: Sequence[TableResponse],
    existing_reservations: Sequence[ReservationResponse],
    booking_cutoff_hours: float,
    now: datetime,
) -> List[AvailabilitySlot]:
    return list(
        iter_available_slots(shift, date, party_size, tables, existing_reservations, booking_cutoff_hours, now)
    )
