# app/models/service.py
"""
Service Model - the catalogue of bookable cleaning services.
A service is the source of truth for a booking's duration and price.
"""
from sqlalchemy import Column, String, Numeric, Integer, Boolean, DateTime, Text, CheckConstraint
from sqlalchemy.sql import func
from app.models.base import Base


class Service(Base):
    """
    Stores bookable services. Bookings snapshot duration and price at
    reservation time, so editing a service never rewrites past bookings.
    """
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(50), unique=True, nullable=True)

    # Core service details
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    duration_minutes = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)

    active = Column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
        CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
    )

    def __repr__(self):
        return f"<Service(id={self.id}, title={self.title})>"

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            "id": self.id,
            "code": self.code,
            "title": self.title,
            "description": self.description,
            "duration_minutes": self.duration_minutes,
            "price": float(self.price) if self.price is not None else 0.0,
            "active": bool(self.active),
        }

    @property
    def formatted_duration(self) -> str:
        """Return human-readable duration string"""
        hours = self.duration_minutes // 60
        minutes = self.duration_minutes % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        elif hours > 0:
            return f"{hours}h"
        else:
            return f"{minutes}m"
