"""Table and seating environment API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.api.common import get_restaurant_or_404
from app.database import get_db
from app.models.restaurant import Environment
from app.models.table import Table
from app.schemas.environment import EnvironmentCreate, EnvironmentResponse
from app.schemas.table import TableCreate, TableUpdate, TableResponse

router = APIRouter()
environments_router = APIRouter()
logger = structlog.get_logger()


async def _get_table_or_404(db: AsyncSession, restaurant_id: UUID, table_id: UUID) -> Table:
    result = await db.execute(
        select(Table).where(
            Table.id == table_id,
            Table.restaurant_id == restaurant_id,
        )
    )
    table = result.scalar_one_or_none()
    
    if not table:
        raise HTTPException(status_code=404, detail="Table not found")
    
    return table


@router.get("", response_model=List[TableResponse])
async def list_tables(
    restaurant_id: UUID,
    environment_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
):
    """List tables of a restaurant"""
    await get_restaurant_or_404(db, restaurant_id)
    
    query = select(Table).where(Table.restaurant_id == restaurant_id)
    if environment_id:
        query = query.where(Table.environment_id == environment_id)
    
    result = await db.execute(query.order_by(Table.name))
    return result.scalars().all()


@router.post("", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
async def create_table(
    restaurant_id: UUID,
    table_data: TableCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a table"""
    await get_restaurant_or_404(db, restaurant_id)
    
    data = table_data.model_dump()
    data["status"] = table_data.status.value
    table = Table(restaurant_id=restaurant_id, **data)
    db.add(table)
    await db.commit()
    await db.refresh(table)
    
    logger.info("Table created", restaurant_id=str(restaurant_id), table=table.name, seats=table.seats)
    return table


@router.put("/{table_id}", response_model=TableResponse)
async def update_table(
    restaurant_id: UUID,
    table_id: UUID,
    table_data: TableUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update table (seats, status, position...)"""
    table = await _get_table_or_404(db, restaurant_id, table_id)
    
    for field, value in table_data.model_dump(exclude_unset=True).items():
        if field == "status" and value is not None:
            value = value.value
        setattr(table, field, value)
    
    await db.commit()
    await db.refresh(table)
    
    return table


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_table(
    restaurant_id: UUID,
    table_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Deactivate table so it no longer takes new allocations"""
    table = await _get_table_or_404(db, restaurant_id, table_id)
    table.is_active = False
    await db.commit()


@environments_router.get("", response_model=List[EnvironmentResponse])
async def list_environments(
    restaurant_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """List seating environments"""
    await get_restaurant_or_404(db, restaurant_id)
    
    result = await db.execute(
        select(Environment).where(Environment.restaurant_id == restaurant_id).order_by(Environment.name)
    )
    return result.scalars().all()


@environments_router.post("", response_model=EnvironmentResponse, status_code=status.HTTP_201_CREATED)
async def create_environment(
    restaurant_id: UUID,
    environment_data: EnvironmentCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a seating environment"""
    await get_restaurant_or_404(db, restaurant_id)
    
    environment = Environment(restaurant_id=restaurant_id, **environment_data.model_dump())
    db.add(environment)
    await db.commit()
    await db.refresh(environment)
    
    return environment
