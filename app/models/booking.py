# ===== app/models/booking.py =====
from sqlalchemy import Column, String, Integer, Text, DateTime, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from app.models.base import Base
from app.utils.time_utils import to_local_iso


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REFUSED = "refused"


# Statuses that hold capacity on a resource
ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING.value: {
        BookingStatus.CONFIRMED.value,
        BookingStatus.CANCELLED.value,
        BookingStatus.REFUSED.value,
    },
    BookingStatus.CONFIRMED.value: {
        BookingStatus.CANCELLED.value,
        BookingStatus.COMPLETED.value,
    },
    BookingStatus.CANCELLED.value: set(),
    BookingStatus.COMPLETED.value: set(),
    BookingStatus.REFUSED.value: set(),
}


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # References
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    # NULL only for businesses running without resource rows
    resource_id = Column(Integer, ForeignKey("resources.id"), nullable=True, index=True)

    # Time window, business-local; end_at = start_at + duration_minutes
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)

    # Snapshots of the service at booking time
    duration_minutes = Column(Integer, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value)
    notes = Column(Text, nullable=True)

    # Vehicle details
    vehicle_type = Column(String(100), nullable=True)
    license_plate = Column(String(20), nullable=True)

    # Cancellation tracking
    canceled_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    canceled_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", foreign_keys=[user_id], lazy="joined")
    service = relationship("Service", lazy="joined")
    resource = relationship("Resource", lazy="select")

    __table_args__ = (
        CheckConstraint("end_at > start_at", name="ck_bookings_window"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed', 'refused')",
            name="ck_bookings_status"
        ),
        Index("ix_bookings_resource_window", "resource_id", "start_at", "end_at"),
    )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def to_dict(self) -> dict:
        """API representation; vehicle fields are emitted under both spellings"""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "service_id": self.service_id,
            "service_title": self.service.title if self.service else None,
            "resource_id": self.resource_id,
            "start_at": to_local_iso(self.start_at),
            "end_at": to_local_iso(self.end_at),
            "duration_minutes": self.duration_minutes,
            "total_price": float(self.total_price) if self.total_price is not None else 0.0,
            "status": self.status,
            "notes": self.notes,
            "vehicle_type": self.vehicle_type,
            "license_plate": self.license_plate,
            "vehicleType": self.vehicle_type,
            "licensePlate": self.license_plate,
            "canceled_by": self.canceled_by,
            "canceled_at": to_local_iso(self.canceled_at),
            "created_at": to_local_iso(self.created_at),
            "updated_at": to_local_iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Booking(id={self.id}, resource={self.resource_id}, {self.start_at}-{self.end_at}, {self.status})>"
