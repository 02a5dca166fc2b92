"""Restaurant-related models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class Restaurant(Base):
    """Restaurant tenant with its booking policy"""
    __tablename__ = "restaurants"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_email = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True)
    phone = Column(String(20))
    address = Column(Text)
    timezone = Column(String(50), default="America/Sao_Paulo")
    total_capacity = Column(Integer)
    public = Column(Boolean, default=True)
    
    # Booking policy
    max_party_size = Column(Integer)
    max_online_party_size = Column(Integer)
    booking_cutoff_hours = Column(Float)
    cancellation_cutoff_hours = Column(Float)
    modification_cutoff_hours = Column(Float)
    late_tolerance_minutes = Column(Integer)
    
    # Feature flags
    enable_waitlist = Column(Boolean, default=False)
    enable_table_joining = Column(Boolean, default=True)
    enable_modifications = Column(Boolean, default=True)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    environments = relationship("Environment", back_populates="restaurant")
    shifts = relationship("Shift", back_populates="restaurant")
    tables = relationship("Table", back_populates="restaurant")
    customers = relationship("Customer", back_populates="restaurant")
    reservations = relationship("Reservation", back_populates="restaurant")


class Environment(Base):
    """Seating area (terrace, main hall, ...)"""
    __tablename__ = "environments"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Relationships
    restaurant = relationship("Restaurant", back_populates="environments")
    tables = relationship("Table", back_populates="environment")
