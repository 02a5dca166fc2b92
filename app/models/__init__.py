"""Database models"""

from app.models.restaurant import Restaurant, Environment
from app.models.shift import Shift
from app.models.table import Table, TableStatus
from app.models.customer import Customer
from app.models.reservation import Reservation, ReservationStatus, ReservationSource

__all__ = [
    "Restaurant",
    "Environment",
    "Shift",
    "Table",
    "TableStatus",
    "Customer",
    "Reservation",
    "ReservationStatus",
    "ReservationSource",
]
