# ============================================================================
# FILE: app/api/v1/public/availability.py
# Bookable slots for a service on a given day
# ============================================================================
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.config.database import get_db
from app.services.availability.availability_service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["Availability"])


@router.get("")
def get_availability(
        date: Optional[str] = Query(None, description="Calendar date, YYYY-MM-DD"),
        service_id: Optional[int] = Query(None, alias="serviceId"),
        resource_id: Optional[int] = Query(None, alias="resourceId"),
        step: Optional[int] = Query(None, description="Slot step in minutes (default 30)"),
        db: Session = Depends(get_db)
):
    """
    Returns {date, serviceId, stepMinutes, slots: [{resourceId, startAt, endAt}]}.

    The result is a snapshot: a slot listed here can still be taken by a
    concurrent booking, which POST /bookings reports as 409.
    """
    return AvailabilityService.get_availability(
        db,
        date_str=date,
        service_id=service_id,
        resource_id=resource_id,
        step_minutes=step
    )
