"""Booking validation.

Checks run in a fixed order and the first failure wins:

1. the restaurant has an active shift on that weekday
2. the requested shift exists, is active and runs on that weekday
3. same-day bookings are still ahead of the shift's cutoff
4. the shift's aggregate capacity is not exceeded
5. the party is within the restaurant's size limit
6. a conflict-free set of tables can seat the party
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

import structlog

from app.config import settings
from app.engine.allocation import find_available_tables
from app.engine.periods import (
    DateLike,
    as_local_date,
    clock_on,
    cutoff_delta,
    cutoff_minutes,
    day_of_week,
    is_same_day,
    occupation_period,
)
from app.engine.results import Err, ErrorKind, Ok, Result
from app.models.reservation import ReservationStatus
from app.schemas.availability import ValidatedBooking
from app.schemas.reservation import ReservationResponse
from app.schemas.restaurant import RestaurantResponse
from app.schemas.shift import ShiftResponse
from app.schemas.table import TableResponse

logger = structlog.get_logger()

WEEKDAY_NAMES = (
    "Domingo",
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
    "Sábado",
)

# Reservations counted against a shift's capacity
ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})


def effective_cutoff_hours(restaurant: RestaurantResponse) -> float:
    if restaurant.booking_cutoff_hours is None:
        return settings.default_booking_cutoff_hours
    return restaurant.booking_cutoff_hours


def effective_max_party_size(restaurant: RestaurantResponse) -> int:
    return restaurant.max_party_size or settings.default_max_party_size


def cutoff_label(hours: float) -> str:
    if hours < 1:
        return f"{cutoff_minutes(hours)} minutos"
    if hours == 1:
        return "1 hora"
    return f"{hours:g} horas"


def validate_opening_hours(
    restaurant: RestaurantResponse,
    date: DateLike,
    shifts: Iterable[ShiftResponse],
) -> Result[List[ShiftResponse]]:
    """Return the active shifts covering the weekday of ``date``"""
    weekday = day_of_week(date)
    open_shifts = [shift for shift in shifts if shift.active and weekday in (shift.days_of_week or [])]

    if not open_shifts:
        logger.debug("Closed on weekday", restaurant_id=str(restaurant.id), weekday=weekday)
        return Err(
            ErrorKind.CLOSED_ON_THIS_DAY,
            f"Não é possível reservar neste dia. O restaurante não abre na {WEEKDAY_NAMES[weekday]}.",
        )
    return Ok(open_shifts)


def validate_shift_availability(
    shift: ShiftResponse,
    date: DateLike,
    booking_cutoff_hours: float,
    now: datetime,
) -> Result[None]:
    """Refuse same-day bookings once ``now`` is past ``shift end - cutoff``"""
    if not is_same_day(date, now):
        return Ok(None)

    shift_end = clock_on(now.date(), shift.end_time, tzinfo=now.tzinfo)
    cutoff = shift_end - cutoff_delta(booking_cutoff_hours)
    if now > cutoff:
        logger.debug("Past booking cutoff", shift=shift.name, cutoff=cutoff.isoformat())
        return Err(
            ErrorKind.PAST_BOOKING_CUTOFF,
            f"Horários de reserva encerrados para o turno {shift.name} hoje. "
            f"Antecedência mínima: {cutoff_label(booking_cutoff_hours)}.",
        )
    return Ok(None)


def validate_shift_capacity(
    shift: ShiftResponse,
    date: DateLike,
    party_size: int,
    existing_reservations: Iterable[ReservationResponse],
) -> Result[int]:
    """Check the shift's aggregate party-size cap; returns the resulting occupancy"""
    day = as_local_date(date)
    occupancy = sum(
        reservation.party_size
        for reservation in existing_reservations
        if reservation.date == day
        and reservation.shift_id == shift.id
        and reservation.status in ACTIVE_STATUSES
    )

    if shift.max_capacity and occupancy + party_size > shift.max_capacity:
        return Err(
            ErrorKind.SHIFT_CAPACITY_EXCEEDED,
            f"Capacidade máxima do turno atingida. Ocupação atual: {occupancy}/{shift.max_capacity}",
            {"occupancy": occupancy, "max_capacity": shift.max_capacity},
        )
    return Ok(occupancy + party_size)


def validate_party_size(restaurant: RestaurantResponse, party_size: int) -> Result[int]:
    # max_online_party_size is stored but not enforced for any channel
    limit = effective_max_party_size(restaurant)
    if party_size > limit:
        return Err(
            ErrorKind.PARTY_SIZE_EXCEEDS_LIMIT,
            f"Grupo muito grande. Máximo permitido: {limit} pessoas. Entre em contato diretamente.",
            {"max_party_size": limit},
        )
    return Ok(party_size)


def validate_reservation(
    restaurant: RestaurantResponse,
    date: DateLike,
    shift_id: Optional[UUID],
    slot_time: str,
    party_size: int,
    shifts: Sequence[ShiftResponse],
    tables: Sequence[TableResponse],
    existing_reservations: Sequence[ReservationResponse],
    now: datetime,
) -> Result[ValidatedBooking]:
    """Run every booking check and allocate tables on success"""
    opening = validate_opening_hours(restaurant, date, shifts)
    if not opening.ok:
        return opening

    # Only shifts running on this weekday qualify
    shift = next((s for s in opening.value if s.id == shift_id), None)
    if shift is None or not shift.active:
        return Err(ErrorKind.SHIFT_INACTIVE_OR_UNKNOWN, "Turno inválido ou inativo")

    availability = validate_shift_availability(shift, date, effective_cutoff_hours(restaurant), now)
    if not availability.ok:
        return availability

    capacity = validate_shift_capacity(shift, date, party_size, existing_reservations)
    if not capacity.ok:
        return capacity

    size = validate_party_size(restaurant, party_size)
    if not size.ok:
        return size

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
    if not allocation.ok:
        return allocation

    return Ok(ValidatedBooking(shift=shift, tables=allocation.value.tables, occupation_period=period))
