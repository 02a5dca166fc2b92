"""Seating environment schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field


class EnvironmentCreate(BaseModel):
    """Create environment request"""
    name: str
    capacity: Optional[int] = Field(None, gt=0)
    is_active: bool = True


class EnvironmentResponse(BaseModel):
    """Environment response"""
    id: UUID
    restaurant_id: UUID
    name: str
    capacity: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
