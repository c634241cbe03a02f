# ============================================================================
# app/services/appointment/appointment_service.py
# ============================================================================
"""Service for managing advisory appointments"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.models.appointment import Appointment
from app.models.user import User
from app.services.notification import booking_notifier
from app.utils.time_utils import to_local_naive

logger = logging.getLogger(__name__)

CONFIRMATION_STATUSES = {"confirmed", "valid", "accepted"}
CANCELLATION_STATUSES = {"cancelled", "refused"}
APPOINTMENT_STATUSES = {"pending"} | CONFIRMATION_STATUSES | CANCELLATION_STATUSES


class AppointmentService:
    """Handles appointment operations"""

    @staticmethod
    def create_appointment(
            db: Session,
            seller: User,
            client_name: str,
            client_email: str,
            appointment_type_id: int,
            appointment_date: datetime,
            notes: Optional[str] = None,
            location: Optional[str] = None
    ) -> Appointment:
        """
        Create a pending appointment owned by `seller`.
        Only one appointment may exist at a given instant.
        """
        if not client_name or not client_email or not appointment_type_id or appointment_date is None:
            raise ValidationError("Missing required fields")

        appointment_date = to_local_naive(appointment_date)
        taken = ConflictError("This slot is already booked", details={"appointmentDate": appointment_date.isoformat()})

        existing = db.query(Appointment.id).filter(
            Appointment.appointment_date == appointment_date
        ).first()
        if existing:
            raise taken

        appointment = Appointment(
            client_name=client_name,
            client_email=client_email,
            appointment_type_id=appointment_type_id,
            appointment_date=appointment_date,
            notes=notes,
            location=location,
            status="pending",
            seller_id=seller.id,
        )

        db.add(appointment)
        try:
            db.commit()
        except IntegrityError:
            # A concurrent insert won the unique constraint
            db.rollback()
            raise taken
        db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} created by seller {seller.id} at {appointment_date}")
        return appointment

    @staticmethod
    def list_for_seller(db: Session, seller: User) -> List[Dict]:
        """Seller's appointments, newest first, with the client's phone when known"""
        rows = db.query(Appointment, User.phone).outerjoin(
            User, User.email == Appointment.client_email
        ).filter(
            Appointment.seller_id == seller.id
        ).order_by(Appointment.appointment_date.desc()).all()

        results = []
        for appointment, phone in rows:
            data = appointment.to_dict()
            data["phone"] = phone
            results.append(data)
        return results

    @staticmethod
    def list_for_client(db: Session, user: User) -> List[Appointment]:
        return db.query(Appointment).filter(
            Appointment.client_email == user.email
        ).order_by(Appointment.appointment_date.desc()).all()

    @staticmethod
    def _get_owned(db: Session, appointment_id: int, actor: User) -> Appointment:
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("Appointment not found", details={"appointment_id": appointment_id})
        if appointment.seller_id != actor.id and not actor.is_admin():
            raise AuthorizationError("Only the seller or an admin can change this appointment")
        return appointment

    @staticmethod
    def update_status(db: Session, appointment_id: int, actor: User, status: str) -> Appointment:
        if not status:
            raise ValidationError("Status required")
        if status not in APPOINTMENT_STATUSES:
            raise ValidationError("Invalid status", details={"allowed": sorted(APPOINTMENT_STATUSES)})

        appointment = AppointmentService._get_owned(db, appointment_id, actor)
        appointment.status = status
        db.commit()
        db.refresh(appointment)

        logger.info(f"Appointment {appointment.id} set to {status} by user {actor.id}")

        if status in CONFIRMATION_STATUSES:
            seller = db.query(User).filter(User.id == appointment.seller_id).first() if appointment.seller_id else None
            advisor_name = " ".join(filter(None, [seller.first_name, seller.last_name])) if seller else None
            booking_notifier.appointment_confirmed(appointment, advisor_name=advisor_name)
        elif status in CANCELLATION_STATUSES:
            booking_notifier.appointment_cancelled(appointment)

        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment_id: int, actor: User) -> None:
        """Notify the client, then remove the row"""
        appointment = AppointmentService._get_owned(db, appointment_id, actor)

        if appointment.client_email:
            booking_notifier.appointment_cancelled(appointment)

        db.delete(appointment)
        db.commit()
        logger.info(f"Appointment {appointment_id} deleted by user {actor.id}")
