"""Restaurant management API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.api.common import get_restaurant_or_404
from app.database import get_db
from app.models.restaurant import Restaurant
from app.schemas.restaurant import (
    RestaurantCreate,
    RestaurantUpdate,
    RestaurantResponse,
)

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=List[RestaurantResponse])
async def list_restaurants(
    owner_email: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """List restaurants, optionally for one owner"""
    query = select(Restaurant)
    if owner_email:
        query = query.where(Restaurant.owner_email == owner_email)
    
    result = await db.execute(query.order_by(Restaurant.name).offset(skip).limit(limit))
    return result.scalars().all()


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    restaurant_data: RestaurantCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new restaurant"""
    restaurant = Restaurant(**restaurant_data.model_dump(exclude_none=True))
    db.add(restaurant)
    await db.commit()
    await db.refresh(restaurant)
    
    logger.info("Restaurant created", restaurant_id=str(restaurant.id), owner=restaurant.owner_email)
    return restaurant


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(
    restaurant_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get restaurant details"""
    return await get_restaurant_or_404(db, restaurant_id)


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
async def update_restaurant(
    restaurant_id: UUID,
    restaurant_data: RestaurantUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update restaurant details and booking policy"""
    restaurant = await get_restaurant_or_404(db, restaurant_id)
    
    for field, value in restaurant_data.model_dump(exclude_unset=True).items():
        setattr(restaurant, field, value)
    
    await db.commit()
    await db.refresh(restaurant)
    
    return restaurant
