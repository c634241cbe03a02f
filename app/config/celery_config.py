# app/config/celery_config.py
"""Celery application setup for background email dispatch"""
from celery import Celery

from app.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure the Celery application"""
    app = Celery(
        "racing_clean",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["app.tasks.email_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        accept_content=["json"],
        result_serializer="json",
        timezone=settings.BUSINESS_TIMEZONE,
        enable_utc=True,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        # Publishing must not stall a request when the broker is down
        broker_connection_retry_on_startup=True,
        task_publish_retry=False,
        task_routes={
            "app.tasks.email_tasks.*": {"queue": "emails"},
        },
    )

    return app


celery_app = create_celery_app()
