"""Customer schemas"""

from datetime import datetime, date
from typing import Optional
from uuid import UUID
from pydantic import BaseModel


class CustomerInfo(BaseModel):
    """Guest details supplied with a booking"""
    full_name: str
    phone_whatsapp: str
    email: Optional[str] = None
    birth_date: Optional[date] = None


class CustomerResponse(BaseModel):
    """Customer response"""
    id: UUID
    restaurant_id: UUID
    full_name: str
    phone_whatsapp: str
    email: Optional[str]
    birth_date: Optional[date]
    total_reservations: int
    created_at: datetime

    class Config:
        from_attributes = True
