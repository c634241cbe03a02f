# ============================================================================
# FILE: app/api/v1/dashboard/bookings.py
# Customer bookings - create, reschedule, cancel, delete
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_db, get_current_user
from app.models.user import User
from app.schemas.booking import BookingCreateRequest, BookingUpdateRequest
from app.services.booking.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
        request: BookingCreateRequest,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """
    Reserve a slot.

    404 when the service or resource is missing or inactive,
    409 `slot_unavailable` when the window is already full.
    """
    booking = BookingService.create_booking(
        db,
        user=current_user,
        service_id=request.service_id,
        start_at=request.start_at,
        resource_id=request.resource_id,
        notes=request.notes,
        vehicle_type=request.vehicle_type,
        license_plate=request.license_plate
    )
    return {"booking": booking.to_dict()}


@router.get("")
def list_my_bookings(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    bookings = BookingService.list_user_bookings(db, current_user)
    return {"bookings": [b.to_dict() for b in bookings]}


@router.get("/{booking_id}")
def get_booking(
        booking_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    booking = BookingService.get_booking(db, booking_id, current_user)
    return {"booking": booking.to_dict()}


@router.put("/{booking_id}")
def update_booking(
        booking_id: int,
        request: BookingUpdateRequest,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """Reschedule, change status, or edit notes/vehicle details"""
    booking = BookingService.update_booking(db, booking_id, current_user, request.changes())
    return {"booking": booking.to_dict()}


@router.delete("/{booking_id}")
def delete_booking(
        booking_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    BookingService.delete_booking(db, booking_id, current_user)
    return {"message": "Booking deleted", "id": booking_id}
