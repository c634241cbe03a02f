"""Health checks and monitoring endpoints"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from redis import RedisError

from app.config import redis as broker
from app.config.database import get_db
from app.config.settings import get_settings

logger = logging.getLogger(__name__)

health_router = APIRouter()


def _database_status(db: Session) -> str:
    try:
        db.execute(text("SELECT 1"))
        return "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return f"unhealthy: {e.__class__.__name__}"
    finally:
        db.rollback()


def _broker_status() -> str:
    try:
        broker.ping_broker()
        return "healthy"
    except RedisError as e:
        logger.warning(f"Broker health check failed: {e}")
        return f"unhealthy: {e.__class__.__name__}"


@health_router.get("")
async def health_check():
    """Liveness only; touches neither the database nor the broker"""
    return {"status": "healthy", "service": get_settings().APP_NAME}


@health_router.get("/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Database and Celery broker reachability.

    A broker outage only delays emails, so it degrades the status
    while a database outage makes it unhealthy.
    """
    checks = {
        "database": _database_status(db),
        "broker": _broker_status(),
    }

    if checks["database"] != "healthy":
        overall = "unhealthy"
    elif checks["broker"] != "healthy":
        overall = "degraded"
    else:
        overall = "healthy"

    return {"status": overall, "checks": checks}
