# ===== app/services/booking/booking_service.py =====
"""
Booking transaction manager.

Creation and reschedule both go through `_reserve`, which runs inside the
caller's transaction: lock the resource (or the global timeline), lock and
read the active bookings overlapping the requested window, then apply the
shared capacity rule. A failed check raises before anything is written and
the caller rolls back. Notifications are queued only after commit.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AuthorizationError,
    BookingPlatformError,
    ConflictError,
    InternalError,
    NotFoundError,
    SlotUnavailableError,
    ValidationError,
)
from app.models.booking import Booking, BookingStatus, ALLOWED_TRANSITIONS, ACTIVE_STATUSES
from app.models.service import Service
from app.models.user import User
from app.services.notification import booking_notifier
from app.services.scheduling.intervals import has_capacity
from app.services.scheduling.resources import BookableResource, active_booking_intervals, lock_resource
from app.utils.time_utils import now_local, to_local_naive

logger = logging.getLogger(__name__)

# Fields a PUT may touch
RESCHEDULE_FIELDS = ("service_id", "resource_id", "start_at")
EDITABLE_FIELDS = RESCHEDULE_FIELDS + ("status", "notes", "vehicle_type", "license_plate")

# Statuses that send the confirmation email instead of the generic update
CONFIRMATION_STATUSES = {BookingStatus.CONFIRMED.value}
CANCELLATION_STATUSES = {BookingStatus.CANCELLED.value, BookingStatus.REFUSED.value}


class BookingService:
    """Serialized check-and-reserve plus the booking read side"""

    # ------------------------------------------------------------------
    # Shared reservation step
    # ------------------------------------------------------------------

    @staticmethod
    def _get_active_service(db: Session, service_id: int) -> Service:
        service = db.query(Service).filter(
            Service.id == service_id,
            Service.active.is_(True)
        ).first()
        if not service:
            raise NotFoundError("Service not found", details={"service_id": service_id})
        return service

    @staticmethod
    def _reserve(
            db: Session,
            service: Service,
            start_at: datetime,
            resource_id: Optional[int],
            exclude_booking_id: Optional[int] = None
    ) -> Tuple[BookableResource, datetime]:
        """
        Lock the target resource and verify [start_at, end_at) still has
        capacity on it. Returns the resource and the computed end.
        """
        end_at = start_at + timedelta(minutes=service.duration_minutes)

        resource = lock_resource(db, resource_id)
        booked = active_booking_intervals(
            db,
            resource,
            start_at,
            end_at,
            exclude_booking_id=exclude_booking_id,
            for_update=True
        )

        if not has_capacity(booked, start_at, end_at, resource.capacity):
            logger.warning(
                f"Slot unavailable on resource {resource.id}: {start_at}-{end_at} "
                f"({len(booked)}/{resource.capacity} taken)"
            )
            raise SlotUnavailableError(
                "Slot not available",
                details={
                    "resource_id": resource.id,
                    "start_at": start_at.isoformat(),
                    "end_at": end_at.isoformat(),
                }
            )

        return resource, end_at

    @staticmethod
    def _rollback(db: Session, error: Exception, action: str):
        """Roll back and translate store failures; domain errors pass through"""
        db.rollback()
        if isinstance(error, BookingPlatformError):
            raise error
        if isinstance(error, SQLAlchemyError):
            logger.error(f"Database error while {action}: {error}", exc_info=True)
            raise InternalError("Internal server error") from error
        logger.error(f"Unexpected error while {action}: {error}", exc_info=True)
        raise error

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @staticmethod
    def create_booking(
            db: Session,
            user: User,
            service_id: int,
            start_at: datetime,
            resource_id: Optional[int] = None,
            notes: Optional[str] = None,
            vehicle_type: Optional[str] = None,
            license_plate: Optional[str] = None
    ) -> Booking:
        """
        Reserve a slot for `user`. Raises NotFoundError for an unknown
        service or resource and SlotUnavailableError when the window is full.
        """
        if not service_id or start_at is None:
            raise ValidationError("serviceId and startAt are required")

        start_at = to_local_naive(start_at)

        try:
            service = BookingService._get_active_service(db, service_id)
            resource, end_at = BookingService._reserve(db, service, start_at, resource_id)

            booking = Booking(
                user_id=user.id,
                service_id=service.id,
                resource_id=resource.id,
                start_at=start_at,
                end_at=end_at,
                duration_minutes=service.duration_minutes,
                total_price=service.price or 0,
                status=BookingStatus.CONFIRMED.value,
                notes=notes,
                vehicle_type=vehicle_type,
                license_plate=license_plate,
            )
            db.add(booking)
            db.commit()

        except Exception as e:
            BookingService._rollback(db, e, "creating booking")

        db.refresh(booking)
        logger.info(
            f"Booking {booking.id} created for user {user.id}: service={service_id} "
            f"resource={booking.resource_id} {booking.start_at}-{booking.end_at}"
        )

        booking_notifier.booking_confirmed(booking)
        return booking

    # ------------------------------------------------------------------
    # Update / reschedule
    # ------------------------------------------------------------------

    @staticmethod
    def _check_access(booking: Booking, actor: User, now: datetime, action: str) -> None:
        is_admin = actor.is_admin()
        if booking.user_id != actor.id and not is_admin:
            raise AuthorizationError(f"Only owner or admin can {action} this booking")
        if not is_admin and booking.start_at <= now:
            raise AuthorizationError(f"Cannot {action} past bookings")

    @staticmethod
    def _check_status_change(booking: Booking, actor: User, status: str) -> None:
        valid = {s.value for s in BookingStatus}
        if status not in valid:
            raise ValidationError("Invalid status", details={"status": status, "allowed": sorted(valid)})

        if status != BookingStatus.CANCELLED.value and not actor.is_admin():
            raise AuthorizationError("Only admin can change status")

        if status != booking.status and status not in ALLOWED_TRANSITIONS.get(booking.status, set()):
            raise ConflictError(
                f"Cannot change status from {booking.status} to {status}",
                details={"from": booking.status, "to": status},
                code="invalid_status_transition"
            )

    @staticmethod
    def update_booking(
            db: Session,
            booking_id: int,
            actor: User,
            changes: Dict[str, Any],
            now: Optional[datetime] = None
    ) -> Booking:
        """
        Apply a partial update. `changes` holds only the fields the client
        sent (service_id, resource_id, start_at, status, notes, vehicle_type,
        license_plate). Any of the first three re-runs the reservation check
        with this booking excluded from the count.
        """
        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        if not changes:
            raise ValidationError("Nothing to update")

        now = now or now_local()

        try:
            # FOR NO KEY UPDATE: concurrent edits of one booking serialize here
            booking = (
                db.query(Booking)
                .filter(Booking.id == booking_id)
                .with_for_update(of=Booking, key_share=True)
                .first()
            )
            if not booking:
                raise NotFoundError("Booking not found", details={"booking_id": booking_id})

            BookingService._check_access(booking, actor, now, "modify")

            previous_status = booking.status
            previous_start = booking.start_at

            new_status = changes.get("status")
            if new_status is not None:
                BookingService._check_status_change(booking, actor, new_status)

            rescheduling = any(changes.get(field) is not None for field in RESCHEDULE_FIELDS)
            if rescheduling:
                BookingService._apply_reschedule(db, booking, changes, new_status or booking.status)

            if new_status is not None and new_status != booking.status:
                booking.status = new_status
                if new_status == BookingStatus.CANCELLED.value:
                    booking.canceled_by = actor.id
                    booking.canceled_at = now

            for field in ("notes", "vehicle_type", "license_plate"):
                if field in changes:
                    setattr(booking, field, changes[field])

            db.commit()

        except Exception as e:
            BookingService._rollback(db, e, f"updating booking {booking_id}")

        db.refresh(booking)
        logger.info(f"Booking {booking.id} updated by user {actor.id}: {sorted(changes)}")

        BookingService._notify_update(booking, previous_status, previous_start, rescheduling)
        return booking

    @staticmethod
    def _apply_reschedule(db: Session, booking: Booking, changes: Dict[str, Any], target_status: str) -> None:
        if target_status not in ACTIVE_STATUSES:
            raise ValidationError(
                "Only pending or confirmed bookings can be rescheduled",
                details={"status": target_status}
            )

        service_id = changes.get("service_id") or booking.service_id
        service = BookingService._get_active_service(db, service_id)

        start_at = changes.get("start_at")
        start_at = to_local_naive(start_at) if start_at is not None else booking.start_at

        resource_id = changes.get("resource_id")
        if resource_id is None:
            resource_id = booking.resource_id

        resource, end_at = BookingService._reserve(
            db, service, start_at, resource_id, exclude_booking_id=booking.id
        )

        booking.service_id = service.id
        booking.resource_id = resource.id
        booking.start_at = start_at
        booking.end_at = end_at
        booking.duration_minutes = service.duration_minutes
        booking.total_price = service.price or 0

    @staticmethod
    def _notify_update(booking: Booking, previous_status: str, previous_start: datetime, rescheduled: bool) -> None:
        status_changed = booking.status != previous_status

        if status_changed and booking.status in CANCELLATION_STATUSES:
            booking_notifier.booking_cancelled(booking)
        elif status_changed and booking.status in CONFIRMATION_STATUSES and not rescheduled:
            booking_notifier.booking_confirmed(booking)
        else:
            booking_notifier.booking_modified(booking, previous_start=previous_start)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @staticmethod
    def delete_booking(
            db: Session,
            booking_id: int,
            actor: User,
            now: Optional[datetime] = None
    ) -> None:
        """Hard delete; cancellation is a status change, not this"""
        now = now or now_local()

        try:
            booking = (
                db.query(Booking)
                .filter(Booking.id == booking_id)
                .with_for_update(of=Booking)
                .first()
            )
            if not booking:
                raise NotFoundError("Booking not found", details={"booking_id": booking_id})

            BookingService._check_access(booking, actor, now, "delete")

            db.delete(booking)
            db.commit()

        except Exception as e:
            BookingService._rollback(db, e, f"deleting booking {booking_id}")

        logger.info(f"Booking {booking_id} deleted by user {actor.id}")

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @staticmethod
    def get_booking(db: Session, booking_id: int, actor: User) -> Booking:
        booking = db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFoundError("Booking not found", details={"booking_id": booking_id})
        if booking.user_id != actor.id and not actor.is_admin():
            raise AuthorizationError("Access denied")
        return booking

    @staticmethod
    def list_user_bookings(db: Session, user: User) -> List[Booking]:
        """The user's own bookings, newest first"""
        return db.query(Booking).filter(
            Booking.user_id == user.id
        ).order_by(Booking.start_at.desc(), Booking.id.desc()).all()
