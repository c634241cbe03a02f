# app/models/__init__.py
from .base import Base
from .user import User, UserRole
from .service import Service
from .resource import Resource
from .availability import BusinessHours, AvailabilityException, normalize_weekday
from .booking import Booking, BookingStatus, ACTIVE_STATUSES, ALLOWED_TRANSITIONS
from .appointment import Appointment

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Service",
    "Resource",
    "BusinessHours",
    "AvailabilityException",
    "normalize_weekday",
    "Booking",
    "BookingStatus",
    "ACTIVE_STATUSES",
    "ALLOWED_TRANSITIONS",
    "Appointment",
]
