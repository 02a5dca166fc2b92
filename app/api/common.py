"""Shared helpers for the API routers"""

import asyncio
import weakref
from datetime import date, datetime
from typing import List, Optional, Tuple
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.engine import Err, InvalidDateFormat, parse_local_date
from app.models.restaurant import Restaurant
from app.models.reservation import Reservation
from app.models.shift import Shift
from app.models.table import Table
from app.schemas.reservation import ErrorDetail, ReservationResponse
from app.schemas.shift import ShiftResponse
from app.schemas.table import TableResponse

logger = structlog.get_logger()

_booking_locks: "weakref.WeakValueDictionary[Tuple[UUID, date], asyncio.Lock]" = weakref.WeakValueDictionary()


def booking_lock(restaurant_id: UUID, day: date) -> asyncio.Lock:
    """Lock serializing every allocation write for one restaurant and day"""
    key = (restaurant_id, day)
    lock = _booking_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _booking_locks[key] = lock
    return lock


def restaurant_now(timezone: Optional[str]) -> datetime:
    """Current naive wall-clock time in the restaurant's timezone"""
    try:
        zone = ZoneInfo(timezone or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown restaurant timezone, using server time", timezone=timezone)
        return datetime.now()
    return datetime.now(zone).replace(tzinfo=None)


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` request value or fail with 400"""
    try:
        return parse_local_date(value).date()
    except InvalidDateFormat as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def engine_error(err: Err) -> HTTPException:
    """Translate an engine refusal into a 409 carrying code and message"""
    detail = ErrorDetail(code=err.kind.value, message=err.message, extra=err.extra)
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail.model_dump())


async def get_restaurant_or_404(
    db: AsyncSession,
    restaurant_id: UUID,
    for_update: bool = False,
) -> Restaurant:
    query = select(Restaurant).where(Restaurant.id == restaurant_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    restaurant = result.scalar_one_or_none()
    
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    
    return restaurant


async def load_shifts(db: AsyncSession, restaurant_id: UUID) -> List[ShiftResponse]:
    result = await db.execute(
        select(Shift).where(Shift.restaurant_id == restaurant_id).order_by(Shift.start_time)
    )
    return [ShiftResponse.model_validate(shift) for shift in result.scalars().all()]


async def load_tables(db: AsyncSession, restaurant_id: UUID) -> List[TableResponse]:
    result = await db.execute(
        select(Table).where(Table.restaurant_id == restaurant_id).order_by(Table.name)
    )
    return [TableResponse.model_validate(table) for table in result.scalars().all()]


async def load_reservations(db: AsyncSession, restaurant_id: UUID, day: date) -> List[ReservationResponse]:
    result = await db.execute(
        select(Reservation).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.date == day,
        )
    )
    return [ReservationResponse.model_validate(reservation) for reservation in result.scalars().all()]
