"""
Celery worker entry point
Sends the transactional emails queued by the API

    celery -A app.worker worker -Q emails
or
    python -m app.worker
"""
import logging
from celery.signals import setup_logging as celery_setup_logging, task_failure, worker_ready

from app.config.celery_config import celery_app
from app.config.settings import get_settings
from app.utils.my_logging import setup_logging

logger = logging.getLogger(__name__)


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Keep Celery from installing its own handlers; use the app format instead"""
    setup_logging(verbose=get_settings().DEBUG)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    email_tasks = sorted(name for name in celery_app.tasks.keys() if name.startswith("app.tasks."))
    logger.info(f"Email worker ready ({len(email_tasks)} tasks, sending enabled: {get_settings().EMAIL_ENABLED})")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, **kwargs):
    # Fires once retries are exhausted, or for errors that are not retried
    logger.error(f"Task {getattr(sender, 'name', sender)} [{task_id}] failed for good: {exception}")


if __name__ == "__main__":
    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--queues=emails",
        "--concurrency=2",
    ])
