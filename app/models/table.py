"""Dining table model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Float
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class TableStatus(str, enum.Enum):
    """Operational status of a table"""
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    BLOCKED = "BLOCKED"


class Table(Base):
    """Physical table that can be allocated to reservations"""
    __tablename__ = "tables"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    environment_id = Column(UUID(as_uuid=True), ForeignKey("environments.id"))
    name = Column(String(100), nullable=False)
    seats = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True)
    status = Column(String(20), default=TableStatus.AVAILABLE.value)
    
    # Floor plan position (UI only)
    position_x = Column(Float)
    position_y = Column(Float)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    restaurant = relationship("Restaurant", back_populates="tables")
    environment = relationship("Environment", back_populates="tables")
