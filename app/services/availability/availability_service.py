# ===== app/services/availability/availability_service.py =====
from typing import List, Dict, Optional, Set, Tuple
from datetime import date, datetime, timedelta
from sqlalchemy import or_
from sqlalchemy.orm import Session
import logging

from app.config.settings import get_settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.availability import BusinessHours, AvailabilityException
from app.models.service import Service
from app.services.scheduling.intervals import TimeRange, has_capacity, iter_windows, subtract
from app.services.scheduling.resources import (
    BookableResource,
    ConfiguredResource,
    active_booking_intervals,
    list_candidate_resources,
)
from app.utils.time_utils import now_local, parse_iso_date, to_local_iso

logger = logging.getLogger(__name__)


def weekday_values(target_date: date) -> Tuple[int, int]:
    """
    Both numberings a business_hours row may use for this date:
    0-6 with Sunday = 0, and 1-7 with Sunday = 7.
    """
    iso = target_date.isoweekday()  # Monday=1 .. Sunday=7
    return iso % 7, iso


class AvailabilityService:
    """Computes bookable slots for a service on a given day"""

    @staticmethod
    def get_availability(
            db: Session,
            date_str: Optional[str],
            service_id: Optional[int],
            resource_id: Optional[int] = None,
            step_minutes: Optional[int] = None,
            now: Optional[datetime] = None
    ) -> Dict:
        """
        Validate raw request parameters and return the availability payload:
        {date, serviceId, stepMinutes, slots: [{resourceId, startAt, endAt}]}
        """
        settings = get_settings()

        if not date_str:
            raise ValidationError("Invalid date (YYYY-MM-DD required)")
        try:
            target_date = parse_iso_date(date_str)
        except ValueError:
            raise ValidationError("Invalid date (YYYY-MM-DD required)", details={"date": date_str})

        if not service_id:
            raise ValidationError("serviceId required")

        step = step_minutes if step_minutes is not None else settings.DEFAULT_SLOT_STEP_MINUTES
        if step < 1 or step > settings.MAX_SLOT_STEP_MINUTES:
            raise ValidationError(
                f"step must be between 1 and {settings.MAX_SLOT_STEP_MINUTES} minutes",
                details={"step": step}
            )

        slots = AvailabilityService.compute_availability(
            db,
            target_date=target_date,
            service_id=service_id,
            resource_id=resource_id,
            step_minutes=step,
            now=now
        )

        return {
            "date": target_date.isoformat(),
            "serviceId": service_id,
            "stepMinutes": step,
            "slots": [
                {
                    "resourceId": slot["resource_id"],
                    "startAt": to_local_iso(slot["start_at"]),
                    "endAt": to_local_iso(slot["end_at"]),
                }
                for slot in slots
            ],
        }

    @staticmethod
    def compute_availability(
            db: Session,
            target_date: date,
            service_id: int,
            resource_id: Optional[int] = None,
            step_minutes: int = 30,
            now: Optional[datetime] = None
    ) -> List[Dict]:
        """
        Ordered slots for one day across the candidate resources.

        Read-only and unlocked: the result is a snapshot, and the booking
        transaction re-validates whatever the client picks.
        """
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.active.is_(True)
        ).first()
        if not service:
            raise NotFoundError("Service not found", details={"service_id": service_id})

        resources = list_candidate_resources(db, resource_id)

        now = now or now_local()
        duration = timedelta(minutes=service.duration_minutes)
        step = timedelta(minutes=step_minutes)

        slots: List[Dict] = []
        for resource in resources:
            slots.extend(
                AvailabilityService._resource_day_slots(
                    db, resource, target_date, duration, step, now
                )
            )

        # Stable sort keeps resource-id order for slots starting together
        slots.sort(key=lambda s: s["start_at"])

        logger.debug(
            f"Availability {target_date} service={service_id} resource={resource_id}: {len(slots)} slots"
        )
        return slots

    @staticmethod
    def _resource_day_slots(
            db: Session,
            resource: BookableResource,
            target_date: date,
            duration: timedelta,
            step: timedelta,
            now: datetime
    ) -> List[Dict]:
        exceptions = AvailabilityService._get_exceptions(db, resource, target_date)
        if any(exc.closes_whole_day for exc in exceptions):
            return []

        open_ranges = AvailabilityService._get_open_ranges(db, resource, target_date)
        for exc in exceptions:
            if exc.has_range:
                open_ranges = subtract(
                    open_ranges,
                    TimeRange.on_day(target_date, exc.start_time, exc.end_time)
                )
        if not open_ranges:
            return []

        day_start = datetime.combine(target_date, datetime.min.time())
        booked = active_booking_intervals(
            db, resource, day_start, day_start + timedelta(days=1)
        )

        is_today = target_date == now.date()
        seen: Set[Tuple[datetime, datetime]] = set()
        slots: List[Dict] = []

        for open_range in open_ranges:
            for start, end in iter_windows(open_range, duration, step):
                if is_today and start <= now:
                    continue
                if (start, end) in seen:
                    continue
                if not has_capacity(booked, start, end, resource.capacity):
                    continue
                seen.add((start, end))
                slots.append({"resource_id": resource.id, "start_at": start, "end_at": end})

        return slots

    @staticmethod
    def _get_open_ranges(
            db: Session,
            resource: BookableResource,
            target_date: date
    ) -> List[TimeRange]:
        """Business hours for the weekday, global or specific to the resource"""
        query = db.query(BusinessHours).filter(
            BusinessHours.weekday.in_(weekday_values(target_date))
        )
        query = query.filter(AvailabilityService._scope_filter(BusinessHours, resource))

        rows = query.order_by(BusinessHours.start_time, BusinessHours.id).all()
        return [TimeRange.on_day(target_date, row.start_time, row.end_time) for row in rows]

    @staticmethod
    def _get_exceptions(
            db: Session,
            resource: BookableResource,
            target_date: date
    ) -> List[AvailabilityException]:
        return db.query(AvailabilityException).filter(
            AvailabilityException.date == target_date,
            AvailabilityService._scope_filter(AvailabilityException, resource)
        ).all()

    @staticmethod
    def _scope_filter(model, resource: BookableResource):
        """Rows that apply globally, plus rows for this resource"""
        if isinstance(resource, ConfiguredResource):
            return or_(model.resource_id.is_(None), model.resource_id == resource.id)
        return model.resource_id.is_(None)
