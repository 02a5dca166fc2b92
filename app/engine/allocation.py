"""Table search and allocation"""

from typing import Iterable, List, Sequence
from uuid import UUID

import structlog

from app.engine.periods import DateLike, as_local_date, occupation_period
from app.engine.results import Err, ErrorKind, Ok, Result
from app.models.reservation import ReservationStatus
from app.schemas.availability import OccupationPeriod, TableAllocation
from app.schemas.reservation import ReservationResponse
from app.schemas.table import TableResponse

logger = structlog.get_logger()

# Reservations in these states never hold a table
RELEASED_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW})


def is_table_available(
    table_id: UUID,
    date: DateLike,
    period: OccupationPeriod,
    existing_reservations: Iterable[ReservationResponse],
    dwell_minutes: int,
    buffer_minutes: int,
) -> bool:
    """Check that no live reservation holds ``table_id`` during ``period``.

    Each existing reservation is measured with its own dwell and buffer
    when it carries them, otherwise with the supplied defaults.
    """
    day = as_local_date(date)
    for reservation in existing_reservations:
        if reservation.date != day or reservation.status in RELEASED_STATUSES:
            continue
        if table_id not in reservation.table_ids:
            continue
        held = occupation_period(
            reservation.slot_time,
            dwell_minutes if reservation.dwell_minutes is None else reservation.dwell_minutes,
            buffer_minutes if reservation.buffer_minutes is None else reservation.buffer_minutes,
        )
        if period.overlaps(held):
            return False
    return True


def allocate_tables(
    party_size: int,
    candidates: Sequence[TableResponse],
    prefer_exact: bool = False,
) -> Result[TableAllocation]:
    """Pick tables for ``party_size`` from seats-ascending ``candidates``.

    Order of preference: an exact single fit (only with ``prefer_exact``),
    the smallest single table that fits, then a greedy run over the
    ascending list until the party is seated. The greedy step is a
    heuristic and may use more tables than strictly needed.
    """
    if prefer_exact:
        for table in candidates:
            if table.seats == party_size:
                return Ok(TableAllocation(tables=[table], total_seats=table.seats))

    for table in candidates:
        if table.seats >= party_size:
            return Ok(TableAllocation(tables=[table], total_seats=table.seats))

    selected: List[TableResponse] = []
    remaining = party_size
    for table in candidates:
        if remaining <= 0:
            break
        selected.append(table)
        remaining -= table.seats

    if remaining > 0:
        total_available = sum(table.seats for table in candidates)
        return Err(
            ErrorKind.INSUFFICIENT_CAPACITY,
            f"Capacidade insuficiente. Disponível: {total_available} lugares, necessário: {party_size}.",
            {"available_seats": total_available, "required_seats": party_size},
        )

    return Ok(TableAllocation(tables=selected, total_seats=sum(table.seats for table in selected)))


def find_best_table_combination(party_size: int, tables: Sequence[TableResponse]) -> Result[TableAllocation]:
    """Allocation used when re-seating an existing party: exact fit first"""
    return allocate_tables(party_size, sorted(tables, key=lambda t: t.seats), prefer_exact=True)


def find_available_tables(
    party_size: int,
    tables: Iterable[TableResponse],
    date: DateLike,
    period: OccupationPeriod,
    existing_reservations: Sequence[ReservationResponse],
    dwell_minutes: int,
    buffer_minutes: int,
) -> Result[TableAllocation]:
    """Find a conflict-free set of tables seating ``party_size`` during ``period``"""
    free = [
        table
        for table in tables
        if table.is_allocatable
        and is_table_available(table.id, date, period, existing_reservations, dwell_minutes, buffer_minutes)
    ]

    if not free:
        logger.debug("No free tables", date=str(date), start=period.start, end=period.end)
        return Err(
            ErrorKind.NO_TABLES_AVAILABLE,
            "Todas as mesas estão ocupadas neste horário. Quer entrar na fila de espera?",
        )

    # sorted() is stable: equal seat counts keep their original order
    free = sorted(free, key=lambda t: t.seats)
    return allocate_tables(party_size, free)
