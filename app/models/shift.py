"""Shift (service period) model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class Shift(Base):
    """Recurring service period with its own slot and occupation defaults"""
    __tablename__ = "shifts"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    name = Column(String(100), nullable=False)
    
    # Local wall-clock hours, "HH:MM"
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    
    slot_interval_minutes = Column(Integer, default=15)
    default_dwell_minutes = Column(Integer, default=90)
    default_buffer_minutes = Column(Integer, default=10)
    max_capacity = Column(Integer)
    
    # Weekdays, 0 = Sunday .. 6 = Saturday
    days_of_week = Column(JSON, default=list)
    active = Column(Boolean, default=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    restaurant = relationship("Restaurant", back_populates="shifts")
    reservations = relationship("Reservation", back_populates="shift")
