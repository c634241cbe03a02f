# ===== app/services/notification/booking_notifier.py =====
"""
Post-commit customer notifications.

Every function here is called after the database transaction has
committed. Any failure while building or queueing the email is logged
and dropped: an unreachable broker never turns a successful booking
into an error response.
"""
from datetime import datetime
from functools import wraps
from typing import Optional
import logging

from app.models.appointment import Appointment
from app.models.booking import Booking
from app.tasks import email_tasks
from app.utils.time_utils import format_fr_date, format_fr_time

logger = logging.getLogger(__name__)


def _after_commit(func):
    @wraps(func)
    def wrapper(*args, **kwargs) -> bool:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Notification {func.__name__} failed: {e}", exc_info=True)
            return False
    return wrapper


def _enqueue(task, **kwargs) -> bool:
    try:
        task.delay(**kwargs)
        return True
    except Exception as e:
        logger.error(f"Could not queue {task.name}: {e}")
        return False


def _format_price(value) -> str:
    return f"{float(value or 0):.2f} €"


def _booking_payload(booking: Booking) -> dict:
    user = booking.user
    service = booking.service
    return {
        "booking_id": booking.id,
        "user_email": user.email if user else None,
        "user_name": user.display_name if user else "Client",
        "service": service.title if service else None,
        "duration": service.formatted_duration if service else None,
        "date": format_fr_date(booking.start_at),
        "time": format_fr_time(booking.start_at),
        "vehicle_type": booking.vehicle_type,
        "license_plate": booking.license_plate,
        "price": _format_price(booking.total_price),
        "status": booking.status,
    }


@_after_commit
def booking_confirmed(booking: Booking) -> bool:
    payload = _booking_payload(booking)
    if not payload["user_email"]:
        return False
    return _enqueue(email_tasks.send_booking_confirmation_email, data=payload)


@_after_commit
def booking_modified(booking: Booking, previous_start: Optional[datetime] = None) -> bool:
    payload = _booking_payload(booking)
    if not payload["user_email"]:
        return False

    previous_start = previous_start or booking.start_at
    payload.update({
        "old_date": format_fr_date(previous_start),
        "old_time": format_fr_time(previous_start),
        "new_date": payload["date"],
        "new_time": payload["time"],
    })
    return _enqueue(email_tasks.send_booking_modification_email, data=payload)


@_after_commit
def booking_cancelled(booking: Booking) -> bool:
    payload = _booking_payload(booking)
    if not payload["user_email"]:
        return False
    return _enqueue(email_tasks.send_booking_cancellation_email, data=payload)


def _appointment_payload(appointment: Appointment, advisor_name: Optional[str] = None) -> dict:
    when = appointment.appointment_date
    return {
        "appointment_id": appointment.id,
        "client_name": appointment.client_name,
        "client_email": appointment.client_email,
        "date_time": f"{format_fr_date(when)} {format_fr_time(when)}" if when else None,
        "advisor_name": advisor_name,
        "location": appointment.location,
    }


@_after_commit
def appointment_confirmed(appointment: Appointment, advisor_name: Optional[str] = None) -> bool:
    return _enqueue(
        email_tasks.send_appointment_confirmation_email,
        data=_appointment_payload(appointment, advisor_name)
    )


@_after_commit
def appointment_cancelled(appointment: Appointment) -> bool:
    return _enqueue(
        email_tasks.send_appointment_cancellation_email,
        data=_appointment_payload(appointment)
    )


@_after_commit
def registration(email: str, token: str, user_name: Optional[str] = None) -> bool:
    return _enqueue(email_tasks.send_registration_email, email=email, token=token, user_name=user_name)
