# ===== app/models/appointment.py =====
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from .base import Base


class Appointment(Base):
    """
    Advisory meeting with a seller. Unlike bookings there is no duration:
    two appointments may never share the exact same instant.
    """
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Client info
    client_name = Column(String(200), nullable=False)
    client_email = Column(String(255), nullable=False, index=True)

    # Appointment details
    appointment_type_id = Column(Integer, nullable=False)
    appointment_date = Column(DateTime, nullable=False, unique=True)
    notes = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)

    # Status tracking
    status = Column(String(20), default="pending")  # pending, confirmed, accepted, valid, cancelled, refused

    seller_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "clientName": self.client_name,
            "clientEmail": self.client_email,
            "appointmentTypeId": self.appointment_type_id,
            "appointmentDate": self.appointment_date.strftime("%Y-%m-%d %H:%M:%S") if self.appointment_date else None,
            "notes": self.notes,
            "location": self.location,
            "status": self.status,
            "sellerId": self.seller_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
