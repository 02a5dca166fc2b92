"""Restaurant schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.shift import reject_null


class RestaurantCreate(BaseModel):
    """Create restaurant request"""
    owner_email: EmailStr
    name: str
    slug: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    timezone: str = "America/Sao_Paulo"
    total_capacity: Optional[int] = None
    public: bool = True
    max_party_size: Optional[int] = Field(None, ge=1)
    max_online_party_size: Optional[int] = Field(None, ge=1)
    booking_cutoff_hours: Optional[float] = Field(None, ge=0)
    cancellation_cutoff_hours: Optional[float] = Field(None, ge=0)
    modification_cutoff_hours: Optional[float] = Field(None, ge=0)
    late_tolerance_minutes: Optional[int] = Field(None, ge=0)
    enable_waitlist: bool = False
    enable_table_joining: bool = True
    enable_modifications: bool = True


class RestaurantUpdate(BaseModel):
    """Update restaurant policy; identity fields are immutable"""
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    timezone: Optional[str] = None
    total_capacity: Optional[int] = None
    public: Optional[bool] = None
    max_party_size: Optional[int] = Field(None, ge=1)
    max_online_party_size: Optional[int] = Field(None, ge=1)
    booking_cutoff_hours: Optional[float] = Field(None, ge=0)
    cancellation_cutoff_hours: Optional[float] = Field(None, ge=0)
    modification_cutoff_hours: Optional[float] = Field(None, ge=0)
    late_tolerance_minutes: Optional[int] = Field(None, ge=0)
    enable_waitlist: Optional[bool] = None
    enable_table_joining: Optional[bool] = None
    enable_modifications: Optional[bool] = None

    _not_null = field_validator(
        "name",
        "timezone",
        "public",
        "enable_waitlist",
        "enable_table_joining",
        "enable_modifications",
        mode="before",
    )(reject_null)


class RestaurantResponse(BaseModel):
    """Restaurant response"""
    id: UUID
    owner_email: str
    name: str
    slug: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    timezone: str = "America/Sao_Paulo"
    total_capacity: Optional[int] = None
    public: bool = True
    max_party_size: Optional[int] = None
    max_online_party_size: Optional[int] = None
    booking_cutoff_hours: Optional[float] = None
    cancellation_cutoff_hours: Optional[float] = None
    modification_cutoff_hours: Optional[float] = None
    late_tolerance_minutes: Optional[int] = None
    enable_waitlist: bool = False
    enable_table_joining: bool = True
    enable_modifications: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
