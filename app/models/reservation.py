"""Reservation model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, JSON, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class ReservationStatus(str, enum.Enum):
    """Reservation lifecycle states"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


class ReservationSource(str, enum.Enum):
    """Booking channel"""
    PHONE = "PHONE"
    ONLINE = "ONLINE"


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id"))
    shift_id = Column(UUID(as_uuid=True), ForeignKey("shifts.id"), nullable=False)
    reservation_code = Column(String(16), unique=True, nullable=False)
    
    # Reservation details
    date = Column(Date, nullable=False, index=True)
    slot_time = Column(String(5), nullable=False)
    party_size = Column(Integer, nullable=False)
    
    # Primary table plus the joined set when several tables serve one party
    table_id = Column(UUID(as_uuid=True), ForeignKey("tables.id"))
    linked_tables = Column(JSON, default=list)
    
    # Per-reservation overrides of the shift occupation defaults
    dwell_minutes = Column(Integer)
    buffer_minutes = Column(Integer)
    
    # Status
    status = Column(String(20), default=ReservationStatus.PENDING.value)
    source = Column(String(20), default=ReservationSource.PHONE.value)
    
    # Notes and audit trail
    notes = Column(Text)
    tags = Column(JSON, default=list)
    modification_log = Column(JSON, default=list)
    cancelled_at = Column(DateTime)
    
    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    restaurant = relationship("Restaurant", back_populates="reservations")
    customer = relationship("Customer", back_populates="reservations")
    shift = relationship("Shift", back_populates="reservations")
