# ===== app/tasks/email_tasks.py =====
from typing import Optional
import logging

from app.config.celery_config import celery_app
from app.services.email.email_service import EmailService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_registration_email(
        self,
        email: str,
        token: str,
        user_name: Optional[str] = None
):
    """
    Send the welcome email with the confirmation link

    Args:
        email: User's email address
        token: Email confirmation token
        user_name: User's display name (optional)
    """
    try:
        logger.info(f"Sending registration email to {email}")

        EmailService.send_registration_email(email=email, token=token, user_name=user_name)

        return {"status": "success", "email": email}

    except Exception as exc:
        logger.error(f"Failed to send registration email to {email}: {exc}")

        # Retry with exponential backoff: 1min, 2min, 4min
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )


@celery_app.task(bind=True, max_retries=3)
def send_booking_confirmation_email(self, data: dict):
    """Booking created. `data` carries the pre-formatted fields shown in the email"""
    try:
        logger.info(f"Sending booking confirmation to {data.get('user_email')}")
        EmailService.send_booking_confirmation(data)
        return {"status": "success", "booking_id": data.get("booking_id")}

    except Exception as exc:
        logger.error(f"Failed to send booking confirmation for {data.get('booking_id')}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))


@celery_app.task(bind=True, max_retries=3)
def send_booking_modification_email(self, data: dict):
    try:
        logger.info(f"Sending booking modification to {data.get('user_email')}")
        EmailService.send_booking_modification(data)
        return {"status": "success", "booking_id": data.get("booking_id")}

    except Exception as exc:
        logger.error(f"Failed to send booking modification for {data.get('booking_id')}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))


@celery_app.task(bind=True, max_retries=3)
def send_booking_cancellation_email(self, data: dict):
    try:
        logger.info(f"Sending booking cancellation to {data.get('user_email')}")
        EmailService.send_booking_cancellation(data)
        return {"status": "success", "booking_id": data.get("booking_id")}

    except Exception as exc:
        logger.error(f"Failed to send booking cancellation for {data.get('booking_id')}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))


@celery_app.task(bind=True, max_retries=3)
def send_appointment_confirmation_email(self, data: dict):
    try:
        logger.info(f"Sending appointment confirmation to {data.get('client_email')}")
        EmailService.send_appointment_confirmation(data)
        return {"status": "success", "appointment_id": data.get("appointment_id")}

    except Exception as exc:
        logger.error(f"Failed to send appointment confirmation for {data.get('appointment_id')}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))


@celery_app.task(bind=True, max_retries=3)
def send_appointment_cancellation_email(self, data: dict):
    try:
        logger.info(f"Sending appointment cancellation to {data.get('client_email')}")
        EmailService.send_appointment_cancellation(data)
        return {"status": "success", "appointment_id": data.get("appointment_id")}

    except Exception as exc:
        logger.error(f"Failed to send appointment cancellation for {data.get('appointment_id')}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))
