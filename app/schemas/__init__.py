"""Pydantic schemas for request/response validation"""

from app.schemas.restaurant import (
    RestaurantCreate,
    RestaurantUpdate,
    RestaurantResponse,
)
from app.schemas.shift import (
    ShiftCreate,
    ShiftUpdate,
    ShiftResponse,
)
from app.schemas.table import (
    TableCreate,
    TableUpdate,
    TableResponse,
)
from app.schemas.environment import (
    EnvironmentCreate,
    EnvironmentResponse,
)
from app.schemas.customer import (
    CustomerInfo,
    CustomerResponse,
)
from app.schemas.availability import (
    OccupationPeriod,
    TableAllocation,
    ValidatedBooking,
    AvailabilitySlot,
    ReallocationPlan,
)
from app.schemas.reservation import (
    ReservationCreate,
    ReservationUpdate,
    ReservationResponse,
    PartySizeChange,
    CancellationRequest,
)

__all__ = [
    "RestaurantCreate",
    "RestaurantUpdate",
    "RestaurantResponse",
    "ShiftCreate",
    "ShiftUpdate",
    "ShiftResponse",
    "TableCreate",
    "TableUpdate",
    "TableResponse",
    "EnvironmentCreate",
    "EnvironmentResponse",
    "CustomerInfo",
    "CustomerResponse",
    "OccupationPeriod",
    "TableAllocation",
    "ValidatedBooking",
    "AvailabilitySlot",
    "ReallocationPlan",
    "ReservationCreate",
    "ReservationUpdate",
    "ReservationResponse",
    "PartySizeChange",
    "CancellationRequest",
]
