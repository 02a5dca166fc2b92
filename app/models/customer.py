"""Customer model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class Customer(Base):
    """Restaurant guest, keyed by WhatsApp phone within a restaurant"""
    __tablename__ = "customers"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(UUID(as_uuid=True), ForeignKey("restaurants.id"), nullable=False)
    full_name = Column(String(255), nullable=False)
    phone_whatsapp = Column(String(20), nullable=False, index=True)
    email = Column(String(255))
    birth_date = Column(Date)
    total_reservations = Column(Integer, default=0)
    
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    restaurant = relationship("Restaurant", back_populates="customers")
    reservations = relationship("Reservation", back_populates="customer")
