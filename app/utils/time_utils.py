# app/utils/time_utils.py
"""
Business-timezone helpers.

The business runs in a single civil timezone. Timestamps are stored naive,
in that timezone; anything arriving with an offset is converted on the way
in, and responses carry the business offset on the way out.
"""
from datetime import date, datetime
from typing import Optional
import re
from zoneinfo import ZoneInfo

from app.config.settings import get_settings

ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def business_tz() -> ZoneInfo:
    return ZoneInfo(get_settings().BUSINESS_TIMEZONE)


def now_local() -> datetime:
    """Current business-local wall clock time (naive)"""
    return datetime.now(business_tz()).replace(tzinfo=None)


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime into naive business-local time"""
    if value.tzinfo is None:
        return value
    return value.astimezone(business_tz()).replace(tzinfo=None)


def to_local_iso(value: Optional[datetime]) -> Optional[str]:
    """Render a stored (naive, business-local) timestamp as ISO-8601 with offset"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=business_tz())
    return value.isoformat()


def parse_iso_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD calendar date.

    Raises ValueError for anything else, including datetimes.
    """
    # fromisoformat alone also takes week dates such as 2030-W02-1
    if not isinstance(value, str) or not ISO_DATE_RE.fullmatch(value):
        raise ValueError("Invalid date (YYYY-MM-DD required)")
    return date.fromisoformat(value)


def format_fr_date(value: Optional[datetime]) -> Optional[str]:
    """dd/mm/YYYY, as used in customer emails"""
    return value.strftime("%d/%m/%Y") if value else None


def format_fr_time(value: Optional[datetime]) -> Optional[str]:
    """HH:MM, as used in customer emails"""
    return value.strftime("%H:%M") if value else None
