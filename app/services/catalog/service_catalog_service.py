# ===== app/services/catalog/service_catalog_service.py =====
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.service import Service


class ServiceCatalogService:
    """Public catalogue of bookable services"""

    @staticmethod
    def list_active(db: Session) -> List[Service]:
        return db.query(Service).filter(Service.active.is_(True)).order_by(Service.id).all()

    @staticmethod
    def get_service(db: Session, service_id: int) -> Service:
        service = db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise NotFoundError("Service not found", details={"service_id": service_id})
        return service
