# ============================================================================
# FILE: app/api/v1/admin/reports.py
# Admin dashboard data (admin role required)
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import get_db, require_admin
from app.models.user import User
from app.services.admin.admin_report_service import AdminReportService

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/bookings")
def list_all_bookings(
        admin: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return {"bookings": AdminReportService.list_bookings(db)}


@router.get("/users")
def list_all_users(
        admin: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return {"users": AdminReportService.list_users(db)}


@router.get("/stats")
def get_stats(
        admin: User = Depends(require_admin),
        db: Session = Depends(get_db)
):
    return AdminReportService.get_stats(db)
