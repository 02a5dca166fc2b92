"""Shift management API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.api.common import get_restaurant_or_404
from app.config import settings
from app.database import get_db
from app.models.shift import Shift
from app.schemas.shift import ShiftCreate, ShiftUpdate, ShiftResponse

router = APIRouter()
logger = structlog.get_logger()


async def _get_shift_or_404(db: AsyncSession, restaurant_id: UUID, shift_id: UUID) -> Shift:
    result = await db.execute(
        select(Shift).where(
            Shift.id == shift_id,
            Shift.restaurant_id == restaurant_id,
        )
    )
    shift = result.scalar_one_or_none()
    
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")
    
    return shift


@router.get("", response_model=List[ShiftResponse])
async def list_shifts(
    restaurant_id: UUID,
    active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    """List shifts of a restaurant ordered by start time"""
    await get_restaurant_or_404(db, restaurant_id)
    
    query = select(Shift).where(Shift.restaurant_id == restaurant_id)
    if active is not None:
        query = query.where(Shift.active == active)
    
    result = await db.execute(query.order_by(Shift.start_time))
    return result.scalars().all()


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
async def create_shift(
    restaurant_id: UUID,
    shift_data: ShiftCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a shift, filling unset timings from the configured defaults"""
    await get_restaurant_or_404(db, restaurant_id)
    
    data = shift_data.model_dump()
    if data["slot_interval_minutes"] is None:
        data["slot_interval_minutes"] = settings.default_slot_interval_minutes
    if data["default_dwell_minutes"] is None:
        data["default_dwell_minutes"] = settings.default_dwell_minutes
    if data["default_buffer_minutes"] is None:
        data["default_buffer_minutes"] = settings.default_buffer_minutes
    
    shift = Shift(restaurant_id=restaurant_id, **data)
    db.add(shift)
    await db.commit()
    await db.refresh(shift)
    
    logger.info("Shift created", restaurant_id=str(restaurant_id), shift=shift.name)
    return shift


@router.get("/{shift_id}", response_model=ShiftResponse)
async def get_shift(
    restaurant_id: UUID,
    shift_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get shift details"""
    return await _get_shift_or_404(db, restaurant_id, shift_id)


@router.put("/{shift_id}", response_model=ShiftResponse)
async def update_shift(
    restaurant_id: UUID,
    shift_id: UUID,
    shift_data: ShiftUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update shift"""
    shift = await _get_shift_or_404(db, restaurant_id, shift_id)
    
    for field, value in shift_data.model_dump(exclude_unset=True).items():
        setattr(shift, field, value)
    
    await db.commit()
    await db.refresh(shift)
    
    return shift


@router.delete("/{shift_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_shift(
    restaurant_id: UUID,
    shift_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Deactivate shift (soft delete; existing reservations keep referencing it)"""
    shift = await _get_shift_or_404(db, restaurant_id, shift_id)
    shift.active = False
    await db.commit()
