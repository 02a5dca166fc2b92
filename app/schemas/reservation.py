"""Reservation schemas"""

import datetime as dt
from typing import Annotated, Any, Dict, List, Optional
from uuid import UUID
from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, field_validator

from app.models.reservation import ReservationSource, ReservationStatus
from app.schemas.availability import AvailabilitySlot, OccupationPeriod, ReallocationPlan
from app.schemas.customer import CustomerInfo
from app.schemas.shift import ClockTime
from app.schemas.table import upper_if_str


Status = Annotated[ReservationStatus, BeforeValidator(upper_if_str)]
Source = Annotated[ReservationSource, BeforeValidator(upper_if_str)]


def check_bookable(value: ReservationStatus) -> ReservationStatus:
    if value not in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
        raise ValueError("a new reservation must be PENDING or CONFIRMED")
    return value


BookableStatus = Annotated[ReservationStatus, BeforeValidator(upper_if_str), AfterValidator(check_bookable)]


class ModificationEntry(BaseModel):
    """Single audit trail entry"""
    timestamp: dt.datetime
    changes: str
    modified_by: str


class ReservationCreate(BaseModel):
    """Create reservation request"""
    date: str
    shift_id: UUID
    slot_time: ClockTime
    party_size: int = Field(..., gt=0)
    customer: CustomerInfo
    source: Source = ReservationSource.PHONE
    status: BookableStatus = ReservationStatus.PENDING
    notes: Optional[str] = None


class ReservationUpdate(BaseModel):
    """Update reservation request (status and notes)"""
    status: Optional[Status] = None
    notes: Optional[str] = None
    modified_by: str = "admin"


class PartySizeChange(BaseModel):
    """Change the number of guests on an existing reservation"""
    party_size: int = Field(..., gt=0)
    modified_by: str = "admin"


class CancellationRequest(BaseModel):
    """Cancel a reservation"""
    reason: Optional[str] = None
    cancelled_by: str = "admin"


class ReservationResponse(BaseModel):
    """Reservation response, also the snapshot consumed by the allocation engine"""
    id: UUID
    restaurant_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    shift_id: UUID
    reservation_code: str = ""
    date: dt.date
    slot_time: str
    party_size: int
    table_id: Optional[UUID] = None
    linked_tables: List[UUID] = []
    dwell_minutes: Optional[int] = None
    buffer_minutes: Optional[int] = None
    status: Status = ReservationStatus.PENDING
    source: Source = ReservationSource.PHONE
    notes: Optional[str] = None
    tags: List[str] = []
    modification_log: List[ModificationEntry] = []
    cancelled_at: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @field_validator("linked_tables", "tags", "modification_log", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or []

    @property
    def table_ids(self) -> List[UUID]:
        """Effective table set: the joined tables if any, else the primary table"""
        if self.linked_tables:
            return list(self.linked_tables)
        return [self.table_id] if self.table_id else []

    class Config:
        from_attributes = True


class ReservationListResponse(BaseModel):
    """Filtered reservation list"""
    items: List[ReservationResponse]
    total: int


class BookingResponse(BaseModel):
    """Created reservation together with the allocation decision"""
    reservation: ReservationResponse
    occupation_period: OccupationPeriod
    table_names: List[str]


class ReallocationResponse(BaseModel):
    """Party-size change outcome"""
    reservation: ReservationResponse
    plan: ReallocationPlan


class AvailabilityResponse(BaseModel):
    """Bookable slots of a shift"""
    date: str
    shift_id: UUID
    party_size: int
    available: bool
    slots: List[AvailabilitySlot] = []


class ErrorDetail(BaseModel):
    """Machine-readable code plus user-facing message"""
    code: str
    message: str
    extra: Dict[str, Any] = {}
