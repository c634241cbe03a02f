# app/schemas/__init__.py
from .booking import (
    BookingCreateRequest,
    BookingUpdateRequest
)

from .appointment import (
    AppointmentCreateRequest,
    AppointmentStatusRequest
)
