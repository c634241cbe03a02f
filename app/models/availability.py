# ===== app/models/availability.py =====
from sqlalchemy import Column, String, Integer, Boolean, Time, Date, ForeignKey, CheckConstraint
from sqlalchemy.orm import validates
from app.models.base import Base


def normalize_weekday(value: int) -> int:
    """
    Store weekdays as 0-6 with 0 = Sunday.

    Imported schedules sometimes use 1-7 (Monday = 1 ... Sunday = 7); the
    only value that differs between the two conventions is Sunday.
    """
    value = int(value)
    if value < 0 or value > 7:
        raise ValueError(f"weekday must be in 0..7, got {value}")
    return 0 if value == 7 else value


class BusinessHours(Base):
    """Recurring weekly open hours, per resource or global (resource_id NULL)"""
    __tablename__ = "business_hours"

    id = Column(Integer, primary_key=True, autoincrement=True)
    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), nullable=True, index=True)

    weekday = Column(Integer, nullable=False, index=True)  # 0=Sunday .. 6=Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_business_hours_range"),
    )

    @validates("weekday")
    def _normalize_weekday(self, key, value):
        return normalize_weekday(value)

    def __repr__(self):
        return f"<BusinessHours(weekday={self.weekday}, {self.start_time}-{self.end_time}, resource={self.resource_id})>"


class AvailabilityException(Base):
    """
    Date-specific closures.

    is_closed with no start/end closes the whole day; any row carrying a
    start/end range carves that range out of the day's open hours.
    """
    __tablename__ = "availability_exceptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    resource_id = Column(Integer, ForeignKey("resources.id", ondelete="CASCADE"), nullable=True, index=True)

    date = Column(Date, nullable=False, index=True)
    is_closed = Column(Boolean, default=False, nullable=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    reason = Column(String(255), nullable=True)  # "Holiday", "Maintenance", etc.

    @property
    def closes_whole_day(self) -> bool:
        return bool(self.is_closed) and self.start_time is None and self.end_time is None

    @property
    def has_range(self) -> bool:
        return self.start_time is not None and self.end_time is not None
