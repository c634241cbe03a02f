# ============================================================================
# FILE: app/api/v1/public/services.py
# Public service catalogue
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.services.catalog.service_catalog_service import ServiceCatalogService

router = APIRouter(prefix="/services", tags=["Services"])


@router.get("")
def list_services(db: Session = Depends(get_db)):
    """Active services ordered by id"""
    services = ServiceCatalogService.list_active(db)
    return {"services": [s.to_dict() for s in services]}


@router.get("/{service_id}")
def get_service(service_id: int, db: Session = Depends(get_db)):
    service = ServiceCatalogService.get_service(db, service_id)
    return {"service": service.to_dict()}
