"""Values produced by the allocation engine"""

from typing import List, Optional

from pydantic import BaseModel

from app.schemas.shift import ShiftResponse
from app.schemas.table import TableResponse


class OccupationPeriod(BaseModel):
    """Minutes since local midnight during which tables are held.

    ``start`` may be negative and ``end`` may exceed 1440; no wraparound
    is applied.
    """
    start: int
    end: int
    slot_minutes: int

    def overlaps(self, other: "OccupationPeriod") -> bool:
        # Half-open: touching endpoints do not overlap
        return self.start < other.end and self.end > other.start

    class Config:
        frozen = True


class TableAllocation(BaseModel):
    """Tables chosen for a party"""
    tables: List[TableResponse]
    total_seats: int

    @property
    def table_ids(self):
        return [table.id for table in self.tables]


class ValidatedBooking(BaseModel):
    """Successful outcome of the full booking validation"""
    shift: ShiftResponse
    tables: List[TableResponse]
    occupation_period: OccupationPeriod


class AvailabilitySlot(BaseModel):
    """Bookable start time"""
    time: str
    available: bool = True
    tables_count: int


class ReallocationPlan(BaseModel):
    """Table assignment after a party-size change; persisting it is up to the caller"""
    needs_reallocation: bool
    tables: List[TableResponse]
    message: str
    freed_tables: List[str] = []
    previous_tables: List[str] = []
    total_seats: Optional[int] = None
