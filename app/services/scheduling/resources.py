# ===== app/services/scheduling/resources.py =====
"""
Resource resolution and the booking-interval query behind every capacity
decision.

A business either has resource rows (bays, benches) or runs without any.
The second case is modelled as `GlobalResource` rather than a resource
with a NULL id: a single timeline of capacity 1 against which every
active booking counts.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.booking import Booking, ACTIVE_STATUSES
from app.models.resource import Resource
from app.services.scheduling.intervals import Interval


@dataclass(frozen=True)
class ConfiguredResource:
    id: int
    capacity: int


@dataclass(frozen=True)
class GlobalResource:
    capacity: int = 1

    @property
    def id(self) -> None:
        return None


BookableResource = Union[ConfiguredResource, GlobalResource]

# Arbitrary key for pg_advisory_xact_lock when no resource row exists
GLOBAL_TIMELINE_LOCK_KEY = 7_340_021


def _from_row(row: Resource) -> ConfiguredResource:
    return ConfiguredResource(id=row.id, capacity=row.capacity or 1)


def list_candidate_resources(db: Session, resource_id: Optional[int] = None) -> List[BookableResource]:
    """
    Resources an availability query should enumerate: the requested one,
    all active ones by id, or the global timeline when none are configured.
    """
    if resource_id is not None:
        row = db.query(Resource).filter(
            Resource.id == resource_id,
            Resource.active.is_(True)
        ).first()
        if not row:
            raise NotFoundError("Resource not found", details={"resource_id": resource_id})
        return [_from_row(row)]

    rows = db.query(Resource).filter(Resource.active.is_(True)).order_by(Resource.id).all()
    if not rows:
        return [GlobalResource()]
    return [_from_row(row) for row in rows]


def lock_resource(db: Session, resource_id: Optional[int]) -> BookableResource:
    """
    Pick and row-lock the resource a booking will consume.

    An explicit id must reference an active resource. Without one, the
    first active resource by id is taken (fixed policy, not best fit);
    with no resources configured at all the global timeline is locked.
    """
    query = db.query(Resource).filter(Resource.active.is_(True))

    if resource_id is not None:
        row = query.filter(Resource.id == resource_id).with_for_update().first()
        if not row:
            raise NotFoundError("Resource not found", details={"resource_id": resource_id})
        return _from_row(row)

    row = query.order_by(Resource.id).limit(1).with_for_update().first()
    if row:
        return _from_row(row)

    _lock_global_timeline(db)
    return GlobalResource()


def _lock_global_timeline(db: Session) -> None:
    """Transaction-scoped lock standing in for the missing resource row"""
    if db.get_bind().dialect.name == "postgresql":
        db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": GLOBAL_TIMELINE_LOCK_KEY})
    # SQLite transactions already start with BEGIN IMMEDIATE


def active_booking_intervals(
        db: Session,
        resource: BookableResource,
        window_start: datetime,
        window_end: datetime,
        exclude_booking_id: Optional[int] = None,
        for_update: bool = False
) -> List[Interval]:
    """
    [start_at, end_at) of pending/confirmed bookings overlapping the window.

    For a configured resource only its own bookings count; on the global
    timeline every active booking does. `for_update` takes FOR KEY SHARE
    on the matching rows, which is compatible with the FOR NO KEY UPDATE
    an edit holds on its own booking.
    """
    query = db.query(Booking.id, Booking.start_at, Booking.end_at).filter(
        Booking.status.in_(ACTIVE_STATUSES),
        Booking.start_at < window_end,
        Booking.end_at > window_start,
    )

    if isinstance(resource, ConfiguredResource):
        query = query.filter(Booking.resource_id == resource.id)

    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)

    if for_update:
        query = query.with_for_update(of=Booking, read=True, key_share=True)

    return [(row.start_at, row.end_at) for row in query.all()]
