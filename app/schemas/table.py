"""Table schemas"""

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID
from pydantic import BaseModel, BeforeValidator, Field, field_validator

from app.models.table import TableStatus
from app.schemas.shift import reject_null


def upper_if_str(value):
    """Enum values are stored uppercase; accept any casing on input"""
    if isinstance(value, str):
        return value.upper()
    return value


Status = Annotated[TableStatus, BeforeValidator(upper_if_str)]


class TableCreate(BaseModel):
    """Create table request"""
    name: str
    seats: int = Field(..., gt=0)
    environment_id: Optional[UUID] = None
    is_active: bool = True
    status: Status = TableStatus.AVAILABLE
    position_x: Optional[float] = None
    position_y: Optional[float] = None


class TableUpdate(BaseModel):
    """Update table request"""
    name: Optional[str] = None
    seats: Optional[int] = Field(None, gt=0)
    environment_id: Optional[UUID] = None
    is_active: Optional[bool] = None
    status: Optional[Status] = None
    position_x: Optional[float] = None
    position_y: Optional[float] = None

    _not_null = field_validator("name", "seats", "is_active", "status", mode="before")(reject_null)


class TableResponse(BaseModel):
    """Table response, also the snapshot consumed by the allocation engine"""
    id: UUID
    restaurant_id: Optional[UUID] = None
    environment_id: Optional[UUID] = None
    name: str = ""
    seats: int
    is_active: bool = True
    status: Status = TableStatus.AVAILABLE
    position_x: Optional[float] = None
    position_y: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_allocatable(self) -> bool:
        """Only active tables in AVAILABLE status take part in allocation"""
        return bool(self.is_active) and self.status == TableStatus.AVAILABLE

    class Config:
        from_attributes = True
