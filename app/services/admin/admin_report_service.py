# ===== app/services/admin/admin_report_service.py =====
from datetime import date, datetime
from typing import Dict, List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.booking import Booking, BookingStatus
from app.models.service import Service
from app.models.user import User
from app.utils.time_utils import now_local

logger = logging.getLogger(__name__)

REVENUE_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.COMPLETED.value)

FR_MONTHS = ["janv.", "févr.", "mars", "avr.", "mai", "juin",
             "juil.", "août", "sept.", "oct.", "nov.", "déc."]


def _months_back(today: date, count: int) -> List[date]:
    """First day of each of the last `count` months, oldest first"""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


class AdminReportService:
    """Read-only aggregates for the admin dashboard"""

    @staticmethod
    def list_bookings(db: Session) -> List[Dict]:
        """All bookings with user and service info, newest first"""
        rows = db.query(Booking, User.first_name, User.last_name, User.email, Service.title).outerjoin(
            User, User.id == Booking.user_id
        ).outerjoin(
            Service, Service.id == Booking.service_id
        ).order_by(Booking.start_at.desc(), Booking.id.desc()).all()

        results = []
        for booking, first_name, last_name, email, title in rows:
            data = booking.to_dict()
            data.update({
                "userId": booking.user_id,
                "user_firstName": first_name,
                "user_lastName": last_name,
                "user_email": email,
                "service": title,
                "date": booking.start_at.strftime("%Y-%m-%d") if booking.start_at else None,
                "time": booking.start_at.strftime("%H:%M") if booking.start_at else None,
            })
            results.append(data)
        return results

    @staticmethod
    def list_users(db: Session) -> List[Dict]:
        users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
        return [
            {
                "id": u.id,
                "firstName": u.first_name,
                "lastName": u.last_name,
                "email": u.email,
                "phone": u.phone,
                "role": u.role.value,
                "createdAt": u.created_at.isoformat() if u.created_at else None,
            }
            for u in users
        ]

    @staticmethod
    def get_stats(db: Session, now: Optional[datetime] = None) -> Dict:
        now = now or now_local()

        total_bookings = db.query(func.count(Booking.id)).scalar() or 0

        total_revenue = db.query(
            func.coalesce(func.sum(Booking.total_price), 0)
        ).filter(
            Booking.status.in_(REVENUE_STATUSES)
        ).scalar() or 0

        not_cancelled = Booking.status != BookingStatus.CANCELLED.value
        upcoming = db.query(func.count(Booking.id)).filter(not_cancelled, Booking.start_at > now).scalar() or 0
        completed = db.query(func.count(Booking.id)).filter(not_cancelled, Booking.end_at <= now).scalar() or 0
        cancelled = db.query(func.count(Booking.id)).filter(
            Booking.status == BookingStatus.CANCELLED.value
        ).scalar() or 0

        status_rows = db.query(
            Booking.status,
            func.count(Booking.id).label('count')
        ).group_by(Booking.status).all()

        service_name = func.coalesce(Service.title, 'Unknown')
        service_rows = db.query(
            service_name.label('name'),
            func.count(Booking.id).label('count')
        ).outerjoin(
            Service, Service.id == Booking.service_id
        ).group_by(
            service_name
        ).order_by(
            func.count(Booking.id).desc()
        ).all()

        return {
            "totalBookings": int(total_bookings),
            "totalRevenue": float(total_revenue),
            "upcomingBookings": int(upcoming),
            "completedBookings": int(completed),
            "cancelledBookings": int(cancelled),
            "statusDistribution": [{"status": s, "count": int(c)} for s, c in status_rows],
            "serviceDistribution": [{"name": n, "count": int(c)} for n, c in service_rows],
            "monthlyTrend": AdminReportService._monthly_trend(db, now),
        }

    @staticmethod
    def _monthly_trend(db: Session, now: datetime, months: int = 6) -> List[Dict]:
        """Revenue per month for the last `months` months, zero-filled"""
        buckets = _months_back(now.date(), months)
        range_start = datetime.combine(buckets[0], datetime.min.time())

        # Bucketed in Python so the query stays portable across SQLite and PostgreSQL
        rows = db.query(Booking.start_at, Booking.total_price).filter(
            Booking.status.in_(REVENUE_STATUSES),
            Booking.start_at >= range_start
        ).all()

        revenue = {(m.year, m.month): 0.0 for m in buckets}
        for start_at, price in rows:
            key = (start_at.year, start_at.month)
            if key in revenue:
                revenue[key] += float(price or 0)

        return [
            {
                "month": FR_MONTHS[m.month - 1],
                "key": m.strftime("%Y-%m"),
                "revenue": round(revenue[(m.year, m.month)], 2),
            }
            for m in buckets
        ]
