# app/models/resource.py
"""
Resource Model - a bookable unit (wash bay, bench, staff slot).

Capacity is the number of bookings the resource can host at the same
instant. The resource row is also the lock the booking transaction takes
before counting conflicts.
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, CheckConstraint
from sqlalchemy.sql import func
from app.models.base import Base


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=True)
    capacity = Column(Integer, nullable=False, default=1)
    active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_resources_capacity_positive"),
    )

    def __repr__(self):
        return f"<Resource(id={self.id}, capacity={self.capacity}, active={self.active})>"
