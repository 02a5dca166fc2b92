"""Reservation management API endpoints.

Every write that changes table holds runs inside ``booking_lock`` for the
restaurant and day, locks the restaurant row, re-reads shifts, tables and
reservations, and re-runs the engine before committing.
"""

import secrets
import string
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.api.common import (
    booking_lock,
    engine_error,
    get_restaurant_or_404,
    load_reservations,
    load_shifts,
    load_tables,
    parse_day,
    restaurant_now,
)
from app.config import settings
from app.database import get_db
from app.engine import (
    add_cancellation,
    add_modification,
    generate_available_slots,
    generate_change_log,
    validate_and_reallocate_tables,
    validate_opening_hours,
    validate_party_size,
    validate_reservation,
    validate_reinstatement,
    validate_shift_capacity,
)
from app.engine.validation import ACTIVE_STATUSES, effective_cutoff_hours
from app.models.customer import Customer
from app.models.reservation import Reservation, ReservationStatus
from app.schemas.customer import CustomerInfo
from app.schemas.reservation import (
    AvailabilityResponse,
    BookingResponse,
    CancellationRequest,
    PartySizeChange,
    ReallocationResponse,
    ReservationCreate,
    ReservationListResponse,
    ReservationResponse,
    ReservationUpdate,
)
from app.schemas.restaurant import RestaurantResponse

router = APIRouter()
logger = structlog.get_logger()

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_reservation_code(length: int = 8) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


async def unique_reservation_code(db: AsyncSession) -> str:
    """Draw codes until one is not taken"""
    while True:
        code = generate_reservation_code(settings.reservation_code_length)
        result = await db.execute(select(Reservation.id).where(Reservation.reservation_code == code))
        if result.first() is None:
            return code


async def _get_reservation_or_404(db: AsyncSession, restaurant_id: UUID, reservation_id: UUID) -> Reservation:
    result = await db.execute(
        select(Reservation).where(
            Reservation.id == reservation_id,
            Reservation.restaurant_id == restaurant_id,
        )
    )
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")

    return reservation


async def _find_or_create_customer(db: AsyncSession, restaurant_id: UUID, info: CustomerInfo) -> Customer:
    result = await db.execute(
        select(Customer).where(
            Customer.restaurant_id == restaurant_id,
            Customer.phone_whatsapp == info.phone_whatsapp,
        )
    )
    customer = result.scalars().first()

    if customer is None:
        customer = Customer(restaurant_id=restaurant_id, **info.model_dump())
        customer.total_reservations = 0
        db.add(customer)
        await db.flush()

    customer.total_reservations = (customer.total_reservations or 0) + 1
    return customer


def _assign_tables(reservation: Reservation, table_ids: List[UUID]) -> None:
    reservation.table_id = table_ids[0] if table_ids else None
    reservation.linked_tables = [str(table_id) for table_id in table_ids] if len(table_ids) > 1 else []


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    restaurant_id: UUID,
    date: Optional[str] = None,
    status: Optional[str] = None,
    shift_id: Optional[UUID] = None,
    customer_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
):
    """List reservations of a restaurant with optional filters"""
    await get_restaurant_or_404(db, restaurant_id)

    query = select(Reservation).where(Reservation.restaurant_id == restaurant_id)

    if date:
        query = query.where(Reservation.date == parse_day(date))

    if status:
        query = query.where(Reservation.status == status.upper())

    if shift_id:
        query = query.where(Reservation.shift_id == shift_id)

    if customer_id:
        query = query.where(Reservation.customer_id == customer_id)

    result = await db.execute(query.order_by(Reservation.date.desc(), Reservation.slot_time))
    reservations = result.scalars().all()

    return ReservationListResponse(items=reservations, total=len(reservations))


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    restaurant_id: UUID,
    date: str,
    shift_id: UUID,
    party_size: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
):
    """Bookable start times of a shift for a party size"""
    restaurant = RestaurantResponse.model_validate(await get_restaurant_or_404(db, restaurant_id))
    day = parse_day(date)

    shifts = await load_shifts(db, restaurant_id)
    opening = validate_opening_hours(restaurant, day, shifts)
    if not opening.ok:
        raise engine_error(opening)

    shift = next((s for s in opening.value if s.id == shift_id), None)
    if shift is None:
        raise HTTPException(status_code=404, detail="Shift not found or not running on this day")

    size = validate_party_size(restaurant, party_size)
    if not size.ok:
        raise engine_error(size)

    slots = generate_available_slots(
        shift,
        day,
        party_size,
        await load_tables(db, restaurant_id),
        await load_reservations(db, restaurant_id, day),
        effective_cutoff_hours(restaurant),
        restaurant_now(restaurant.timezone),
    )

    return AvailabilityResponse(
        date=date,
        shift_id=shift_id,
        party_size=party_size,
        available=bool(slots),
        slots=slots,
    )


@router.post("", response_model=BookingResponse, status_code=201)
async def create_reservation(
    restaurant_id: UUID,
    reservation_data: ReservationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Validate, allocate tables and persist a new reservation"""
    day = parse_day(reservation_data.date)

    async with booking_lock(restaurant_id, day):
        restaurant_row = await get_restaurant_or_404(db, restaurant_id, for_update=True)
        restaurant = RestaurantResponse.model_validate(restaurant_row)

        outcome = validate_reservation(
            restaurant,
            day,
            reservation_data.shift_id,
            reservation_data.slot_time,
            reservation_data.party_size,
            await load_shifts(db, restaurant_id),
            await load_tables(db, restaurant_id),
            await load_reservations(db, restaurant_id, day),
            restaurant_now(restaurant.timezone),
        )

        if not outcome.ok:
            logger.info(
                "Reservation refused",
                restaurant_id=str(restaurant_id),
                date=str(day),
                slot_time=reservation_data.slot_time,
                party_size=reservation_data.party_size,
                reason=outcome.kind.value,
            )
            raise engine_error(outcome)

        booking = outcome.value
        customer = await _find_or_create_customer(db, restaurant_id, reservation_data.customer)

        reservation = Reservation(
            restaurant_id=restaurant_id,
            customer_id=customer.id,
            shift_id=booking.shift.id,
            reservation_code=await unique_reservation_code(db),
            date=day,
            slot_time=reservation_data.slot_time,
            party_size=reservation_data.party_size,
            status=reservation_data.status.value,
            source=reservation_data.source.value,
            notes=reservation_data.notes,
            tags=[],
            modification_log=[],
        )
        _assign_tables(reservation, [table.id for table in booking.tables])

        db.add(reservation)
        await db.commit()
        await db.refresh(reservation)

    logger.info(
        "Reservation created",
        restaurant_id=str(restaurant_id),
        reservation_code=reservation.reservation_code,
        party_size=reservation.party_size,
        tables=[table.name for table in booking.tables],
    )

    return BookingResponse(
        reservation=reservation,
        occupation_period=booking.occupation_period,
        table_names=[table.name for table in booking.tables],
    )


@router.get("/code/{code}", response_model=ReservationResponse)
async def get_reservation_by_code(
    restaurant_id: UUID,
    code: str,
    db: AsyncSession = Depends(get_db),
):
    """Look up a reservation by its public code"""
    result = await db.execute(
        select(Reservation).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.reservation_code == code.upper(),
        )
    )
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")

    return reservation


@router.get("/by-phone/{phone}", response_model=List[ReservationResponse])
async def list_upcoming_by_phone(
    restaurant_id: UUID,
    phone: str,
    db: AsyncSession = Depends(get_db),
):
    """Upcoming pending or confirmed reservations of a guest"""
    restaurant = await get_restaurant_or_404(db, restaurant_id)
    today = restaurant_now(restaurant.timezone).date()

    result = await db.execute(
        select(Reservation)
        .join(Customer, Customer.id == Reservation.customer_id)
        .where(
            Reservation.restaurant_id == restaurant_id,
            Customer.phone_whatsapp == phone,
            Reservation.date >= today,
            Reservation.status.in_([ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value]),
        )
        .order_by(Reservation.date, Reservation.slot_time)
    )
    return result.scalars().all()


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get reservation details"""
    return await _get_reservation_or_404(db, restaurant_id, reservation_id)


@router.put("/{reservation_id}/party-size", response_model=ReallocationResponse)
async def change_party_size(
    restaurant_id: UUID,
    reservation_id: UUID,
    change: PartySizeChange,
    db: AsyncSession = Depends(get_db),
):
    """Change the party size, reallocating tables when needed"""
    row = await _get_reservation_or_404(db, restaurant_id, reservation_id)

    async with booking_lock(restaurant_id, row.date):
        restaurant = RestaurantResponse.model_validate(
            await get_restaurant_or_404(db, restaurant_id, for_update=True)
        )
        await db.refresh(row)
        current = ReservationResponse.model_validate(row)

        if current.status not in ACTIVE_STATUSES:
            raise HTTPException(status_code=400, detail="Only pending or confirmed reservations can be changed")

        shifts = await load_shifts(db, restaurant_id)
        shift = next((s for s in shifts if s.id == current.shift_id), None)
        if shift is None:
            raise HTTPException(status_code=404, detail="Shift not found")

        size = validate_party_size(restaurant, change.party_size)
        if not size.ok:
            raise engine_error(size)

        day_reservations = await load_reservations(db, restaurant_id, current.date)
        others = [r for r in day_reservations if r.id != current.id]
        capacity = validate_shift_capacity(shift, current.date, change.party_size, others)
        if not capacity.ok:
            raise engine_error(capacity)

        outcome = validate_and_reallocate_tables(
            current,
            change.party_size,
            await load_tables(db, restaurant_id),
            day_reservations,
            shift,
        )
        if not outcome.ok:
            raise engine_error(outcome)

        plan = outcome.value
        changes = generate_change_log(current, {"party_size": change.party_size})
        if plan.needs_reallocation:
            _assign_tables(row, [table.id for table in plan.tables])
            changes.append(plan.message)

        row.party_size = change.party_size
        if changes:
            for field, value in add_modification(
                current, changes, change.modified_by, restaurant_now(restaurant.timezone)
            ).items():
                setattr(row, field, value)

        await db.commit()
        await db.refresh(row)

    logger.info(
        "Party size changed",
        reservation_id=str(reservation_id),
        party_size=change.party_size,
        reallocated=plan.needs_reallocation,
    )

    return ReallocationResponse(reservation=row, plan=plan)


@router.put("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    reservation_data: ReservationUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update status or notes.

    Moving a reservation back to PENDING or CONFIRMED from a state that does
    not hold tables is an allocation write: it runs under the booking lock
    and must win its tables again.
    """
    reservation = await _get_reservation_or_404(db, restaurant_id, reservation_id)

    reinstating = (
        reservation_data.status in ACTIVE_STATUSES
        and ReservationStatus(reservation.status) not in ACTIVE_STATUSES
    )
    if not reinstating:
        restaurant = await get_restaurant_or_404(db, restaurant_id)
        _apply_update(reservation, reservation_data, restaurant.timezone)
        await db.commit()
        await db.refresh(reservation)
        return reservation

    async with booking_lock(restaurant_id, reservation.date):
        restaurant = await get_restaurant_or_404(db, restaurant_id, for_update=True)
        await db.refresh(reservation)
        current = ReservationResponse.model_validate(reservation)

        shifts = await load_shifts(db, restaurant_id)
        shift = next((s for s in shifts if s.id == current.shift_id), None)
        if shift is None:
            raise HTTPException(status_code=404, detail="Shift not found")

        outcome = validate_reinstatement(
            current,
            await load_tables(db, restaurant_id),
            await load_reservations(db, restaurant_id, current.date),
            shift,
        )
        if not outcome.ok:
            logger.info(
                "Reinstatement refused",
                reservation_id=str(reservation_id),
                reason=outcome.kind.value,
            )
            raise engine_error(outcome)

        tables = outcome.value.tables
        extra_changes = []
        if {table.id for table in tables} != set(current.table_ids):
            _assign_tables(reservation, [table.id for table in tables])
            extra_changes.append(f"Mesas realocadas: {', '.join(table.name for table in tables)}")

        _apply_update(reservation, reservation_data, restaurant.timezone, extra_changes)
        await db.commit()
        await db.refresh(reservation)

    logger.info(
        "Reservation reinstated",
        reservation_id=str(reservation_id),
        tables=[table.name for table in tables],
    )
    return reservation


def _apply_update(
    reservation: Reservation,
    reservation_data: ReservationUpdate,
    timezone: Optional[str],
    extra_changes: Optional[List[str]] = None,
) -> None:
    current = ReservationResponse.model_validate(reservation)

    changes = []
    if reservation_data.status is not None and reservation_data.status != current.status:
        changes.append(f"Status alterado de {current.status.value} para {reservation_data.status.value}")
        reservation.status = reservation_data.status.value

    if reservation_data.notes is not None and reservation_data.notes != current.notes:
        changes.append("Observações atualizadas")
        reservation.notes = reservation_data.notes

    changes.extend(extra_changes or [])
    if changes:
        now = restaurant_now(timezone)
        for field, value in add_modification(current, changes, reservation_data.modified_by, now).items():
            setattr(reservation, field, value)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    cancellation: CancellationRequest,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a reservation, releasing its tables"""
    restaurant = await get_restaurant_or_404(db, restaurant_id)
    reservation = await _get_reservation_or_404(db, restaurant_id, reservation_id)
    current = ReservationResponse.model_validate(reservation)

    if current.status == ReservationStatus.CANCELLED:
        return reservation

    now = restaurant_now(restaurant.timezone)
    for field, value in add_cancellation(current, cancellation.reason, cancellation.cancelled_by, now).items():
        setattr(reservation, field, value)
    reservation.status = ReservationStatus.CANCELLED.value

    await db.commit()
    await db.refresh(reservation)

    logger.info("Reservation cancelled", reservation_id=str(reservation_id), by=cancellation.cancelled_by)
    return reservation


@router.delete("/{reservation_id}", status_code=204)
async def delete_reservation(
    restaurant_id: UUID,
    reservation_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Hard-delete a reservation (administrative; skips the availability engine)"""
    reservation = await _get_reservation_or_404(db, restaurant_id, reservation_id)
    await db.delete(reservation)
    await db.commit()

    logger.info("Reservation deleted", reservation_id=str(reservation_id))
