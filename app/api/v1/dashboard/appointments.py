# ============================================================================
# FILE: app/api/v1/dashboard/appointments.py
# Advisory appointments managed by sellers
# ============================================================================
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_db, get_current_user
from app.models.user import User
from app.schemas.appointment import AppointmentCreateRequest, AppointmentStatusRequest
from app.services.appointment.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_appointment(
        request: AppointmentCreateRequest,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    """409 when another appointment exists at the exact same instant"""
    appointment = AppointmentService.create_appointment(
        db,
        seller=current_user,
        client_name=request.client_name,
        client_email=request.client_email,
        appointment_type_id=request.appointment_type_id,
        appointment_date=request.appointment_date,
        notes=request.notes,
        location=request.location
    )
    return {"message": "Appointment created", "appointment": appointment.to_dict()}


@router.get("")
def list_seller_appointments(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    return {"appointments": AppointmentService.list_for_seller(db, current_user)}


@router.get("/my")
def list_my_appointments(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    appointments = AppointmentService.list_for_client(db, current_user)
    return {"appointments": [a.to_dict() for a in appointments]}


@router.put("/{appointment_id}/status")
def update_appointment_status(
        appointment_id: int,
        request: AppointmentStatusRequest,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    appointment = AppointmentService.update_status(db, appointment_id, current_user, request.status)
    return {"message": "Appointment status updated", "appointment": appointment.to_dict()}


@router.delete("/{appointment_id}")
def delete_appointment(
        appointment_id: int,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    AppointmentService.delete_appointment(db, appointment_id, current_user)
    return {"message": "Appointment deleted", "id": appointment_id}
