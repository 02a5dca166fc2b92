"""Shift schemas"""

import re
from datetime import datetime
from typing import Annotated, Optional, List
from uuid import UUID
from pydantic import AfterValidator, BaseModel, Field, field_validator


HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def check_hhmm(value: str) -> str:
    if not HHMM_PATTERN.match(value):
        raise ValueError("time must be formatted as HH:MM")
    return value


def reject_null(value):
    """Explicit null is refused for columns that cannot be cleared"""
    if value is None:
        raise ValueError("field cannot be null")
    return value


def check_weekdays(value: List[int]) -> List[int]:
    if any(day < 0 or day > 6 for day in value):
        raise ValueError("days_of_week entries must be within 0 (Sunday) .. 6 (Saturday)")
    return value


ClockTime = Annotated[str, AfterValidator(check_hhmm)]
Weekdays = Annotated[List[int], AfterValidator(check_weekdays)]


class ShiftCreate(BaseModel):
    """Create shift request"""
    name: str
    start_time: ClockTime
    end_time: ClockTime
    slot_interval_minutes: Optional[int] = Field(None, gt=0)
    default_dwell_minutes: Optional[int] = Field(None, ge=0)
    default_buffer_minutes: Optional[int] = Field(None, ge=0)
    max_capacity: Optional[int] = Field(None, gt=0)
    days_of_week: Weekdays = []
    active: bool = True


class ShiftUpdate(BaseModel):
    """Update shift request"""
    name: Optional[str] = None
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    slot_interval_minutes: Optional[int] = Field(None, gt=0)
    default_dwell_minutes: Optional[int] = Field(None, ge=0)
    default_buffer_minutes: Optional[int] = Field(None, ge=0)
    max_capacity: Optional[int] = Field(None, gt=0)
    days_of_week: Optional[Weekdays] = None
    active: Optional[bool] = None

    _not_null = field_validator(
        "name",
        "start_time",
        "end_time",
        "slot_interval_minutes",
        "default_dwell_minutes",
        "default_buffer_minutes",
        "days_of_week",
        "active",
        mode="before",
    )(reject_null)


class ShiftResponse(BaseModel):
    """Shift response, also the snapshot consumed by the allocation engine"""
    id: UUID
    restaurant_id: Optional[UUID] = None
    name: str
    start_time: str
    end_time: str
    slot_interval_minutes: int = 15
    default_dwell_minutes: int = 90
    default_buffer_minutes: int = 10
    max_capacity: Optional[int] = None
    days_of_week: List[int] = []
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
