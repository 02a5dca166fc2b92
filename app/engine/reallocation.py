"""Table reallocation when a reservation's party size changes or a released reservation is reinstated.

The engine only computes a plan; writing the new ``table_id`` /
``linked_tables`` and the audit entry is the caller's job.
"""

from typing import List, Sequence

import structlog

from app.engine.allocation import find_available_tables, find_best_table_combination, is_table_available
from app.engine.periods import occupation_period
from app.engine.results import Err, ErrorKind, Ok, Result
from app.engine.validation import ACTIVE_STATUSES, validate_shift_capacity
from app.schemas.availability import ReallocationPlan, TableAllocation
from app.schemas.reservation import ReservationResponse
from app.schemas.shift import ShiftResponse
from app.schemas.table import TableResponse

logger = structlog.get_logger()


def _names(tables: Sequence[TableResponse]) -> List[str]:
    return [table.name for table in tables]


def _seats(tables: Sequence[TableResponse]) -> int:
    return sum(table.seats for table in tables)


def _shrink(
    new_party_size: int,
    current_tables: List[TableResponse],
) -> ReallocationPlan:
    # Only tables already held are considered, largest first
    by_seats_desc = sorted(current_tables, key=lambda t: t.seats, reverse=True)
    current_ids = {table.id for table in current_tables}

    single = next((table for table in by_seats_desc if table.seats >= new_party_size), None)
    if single is not None:
        freed = [table for table in current_tables if table.id != single.id]
        if not freed:
            return ReallocationPlan(
                needs_reallocation=False,
                tables=[single],
                message="Mantendo mesas atuais",
                total_seats=single.seats,
            )
        return ReallocationPlan(
            needs_reallocation=True,
            tables=[single],
            message=(
                f"Otimizado: agora usando apenas {single.name} "
                f"({single.seats} lugares) para {new_party_size} pessoas"
            ),
            freed_tables=_names(freed),
            total_seats=single.seats,
        )

    selected: List[TableResponse] = []
    needed = new_party_size
    for table in by_seats_desc:
        if needed <= 0:
            break
        selected.append(table)
        needed -= table.seats

    selected_ids = {table.id for table in selected}
    freed = [table for table in current_tables if table.id not in selected_ids]
    changed = selected_ids != current_ids
    return ReallocationPlan(
        needs_reallocation=changed,
        tables=selected,
        message=f"Otimizado: liberando {len(freed)} mesa(s)" if changed else "Mantendo mesas atuais",
        freed_tables=_names(freed),
        total_seats=_seats(selected),
    )


def validate_and_reallocate_tables(
    reservation: ReservationResponse,
    new_party_size: int,
    all_tables: Sequence[TableResponse],
    all_reservations: Sequence[ReservationResponse],
    shift: ShiftResponse,
) -> Result[ReallocationPlan]:
    """Decide whether to keep, shrink or expand the reservation's table set"""
    current_ids = reservation.table_ids
    current_tables = [table for table in all_tables if table.id in current_ids]
    current_capacity = _seats(current_tables)

    if new_party_size == reservation.party_size:
        return Ok(ReallocationPlan(
            needs_reallocation=False,
            tables=current_tables,
            message="Número de pessoas não alterado",
            total_seats=current_capacity,
        ))

    if new_party_size < reservation.party_size:
        return Ok(_shrink(new_party_size, current_tables))

    if current_capacity >= new_party_size:
        return Ok(ReallocationPlan(
            needs_reallocation=False,
            tables=current_tables,
            message=f"Mesas atuais ({current_capacity} lugares) comportam {new_party_size} pessoas",
            total_seats=current_capacity,
        ))

    dwell = shift.default_dwell_minutes
    buffer = shift.default_buffer_minutes
    period = occupation_period(reservation.slot_time, dwell, buffer)

    others = [
        other
        for other in all_reservations
        if other.date == reservation.date
        and other.id != reservation.id
        and other.status in ACTIVE_STATUSES
    ]
    candidates = [
        table
        for table in all_tables
        if table.is_allocatable
        and is_table_available(table.id, reservation.date, period, others, dwell, buffer)
    ]

    if not candidates:
        logger.debug("Reallocation found no free tables", reservation_id=str(reservation.id))
        return Err(
            ErrorKind.NO_AVAILABILITY,
            "Não há mesas disponíveis neste horário para acomodar mais pessoas. "
            "Todas as outras mesas estão ocupadas.",
        )

    allocation = find_best_table_combination(new_party_size, candidates)
    if not allocation.ok:
        total_available = _seats(candidates)
        return Err(
            ErrorKind.INSUFFICIENT_CAPACITY,
            f"Capacidade insuficiente. Necessário: {new_party_size} lugares. "
            f"Disponível: {total_available} lugares.",
            {"available_seats": total_available, "required_seats": new_party_size},
        )

    chosen = allocation.value.tables
    chosen_ids = {table.id for table in chosen}
    return Ok(ReallocationPlan(
        needs_reallocation=True,
        tables=chosen,
        message=(
            f"Redistribuído para {len(chosen)} mesa(s): {', '.join(_names(chosen))} "
            f"({allocation.value.total_seats} lugares)"
        ),
        freed_tables=[table.name for table in current_tables if table.id not in chosen_ids],
        previous_tables=_names(current_tables),
        total_seats=allocation.value.total_seats,
    ))


def validate_reinstatement(
    reservation: ReservationResponse,
    all_tables: Sequence[TableResponse],
    all_reservations: Sequence[ReservationResponse],
    shift: ShiftResponse,
) -> Result[TableAllocation]:
    """Tables a cancelled or no-show reservation can hold again.

    The previous tables are kept when every one of them is still free;
    otherwise a fresh set is searched as for a new booking. The shift's
    capacity is checked first.
    """
    others = [other for other in all_reservations if other.id != reservation.id]

    capacity = validate_shift_capacity(shift, reservation.date, reservation.party_size, others)
    if not capacity.ok:
        return capacity

    dwell = shift.default_dwell_minutes
    buffer = shift.default_buffer_minutes
    period = occupation_period(reservation.slot_time, dwell, buffer)

    held = [table for table in all_tables if table.id in reservation.table_ids]
    if (
        held
        and len(held) == len(reservation.table_ids)
        and _seats(held) >= reservation.party_size
        and all(
            table.is_allocatable
            and is_table_available(table.id, reservation.date, period, others, dwell, buffer)
            for table in held
        )
    ):
        return Ok(TableAllocation(tables=held, total_seats=_seats(held)))

    logger.debug("Previous tables taken, searching again", reservation_id=str(reservation.id))
    return find_available_tables(reservation.party_size, all_tables, reservation.date, period, others, dwell, buffer)
