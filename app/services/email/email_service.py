# ===== app/services/email/email_service.py =====
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Optional
import logging

from app.config.settings import settings
from app.services.email import templates

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP"""

    @staticmethod
    def _get_smtp_connection():
        """Create and return SMTP connection"""
        try:
            if settings.EMAIL_USE_TLS:
                server = smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=30)
                server.starttls()
            else:
                server = smtplib.SMTP_SSL(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=30)

            if settings.EMAIL_USERNAME and settings.EMAIL_PASSWORD:
                server.login(settings.EMAIL_USERNAME, settings.EMAIL_PASSWORD)

            return server
        except Exception as e:
            logger.error(f"Failed to connect to SMTP server: {e}")
            raise

    @staticmethod
    def send_email(
            to_email: str,
            subject: str,
            html_content: Optional[str] = None,
            plain_text: Optional[str] = None,
            bcc: Optional[List[str]] = None
    ) -> bool:
        """
        Send an email using SMTP

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            plain_text: Plain text version (fallback for non-HTML clients)
            bcc: List of BCC email addresses

        Returns:
            bool: True if sent, False if email is disabled by configuration
        """
        if not settings.EMAIL_ENABLED:
            logger.info(f"Email disabled, skipping '{subject}' to {to_email}")
            return False

        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>"
        msg['To'] = to_email

        if plain_text:
            msg.attach(MIMEText(plain_text, 'plain', 'utf-8'))
        if html_content:
            msg.attach(MIMEText(html_content, 'html', 'utf-8'))

        recipients = [to_email] + (bcc or [])

        try:
            server = EmailService._get_smtp_connection()
            try:
                server.sendmail(settings.EMAIL_FROM_ADDRESS, recipients, msg.as_string())
            finally:
                server.quit()

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise

    # ------------------------------------------------------------------
    # Account emails
    # ------------------------------------------------------------------

    @staticmethod
    def send_registration_email(email: str, token: str, user_name: Optional[str] = None) -> bool:
        """Welcome email with the email-confirmation link"""
        confirm_link = f"{settings.FRONTEND_URL}/confirm-email?token={token}"
        name = user_name or "Client"

        return EmailService.send_email(
            to_email=email,
            subject=f"Bienvenue chez {settings.BUSINESS_NAME}",
            html_content=templates.registration_email(name, email, confirm_link),
            plain_text=(
                f"Bonjour {name},\n\nMerci pour votre inscription sur {settings.BUSINESS_NAME}. "
                f"Pour confirmer votre adresse e-mail, cliquez sur le lien suivant : {confirm_link}\n\n"
                "Si vous n'avez pas demandé cet e-mail, ignorez-le."
            )
        )

    # ------------------------------------------------------------------
    # Booking emails
    # ------------------------------------------------------------------

    @staticmethod
    def send_booking_confirmation(data: dict) -> bool:
        return EmailService.send_email(
            to_email=data["user_email"],
            subject=f"Réservation confirmée - {settings.BUSINESS_NAME}",
            html_content=templates.booking_confirmation_email(data),
            plain_text=(
                f"Bonjour {data.get('user_name')},\n\nVotre réservation pour {data.get('service')} "
                f"le {data.get('date')} à {data.get('time')} a été confirmée.\n\nMerci."
            )
        )

    @staticmethod
    def send_booking_modification(data: dict) -> bool:
        return EmailService.send_email(
            to_email=data["user_email"],
            subject=f"Réservation modifiée - {settings.BUSINESS_NAME}",
            html_content=templates.booking_modification_email(data),
            plain_text=f"Bonjour {data.get('user_name')},\n\nVotre réservation a été modifiée."
        )

    @staticmethod
    def send_booking_cancellation(data: dict) -> bool:
        return EmailService.send_email(
            to_email=data["user_email"],
            subject=f"Réservation annulée - {settings.BUSINESS_NAME}",
            html_content=templates.booking_cancellation_email(data),
            plain_text=(
                f"Bonjour {data.get('user_name')},\n\nVotre réservation du {data.get('date')} "
                f"à {data.get('time')} a été annulée."
            )
        )

    # ------------------------------------------------------------------
    # Advisory appointment emails
    # ------------------------------------------------------------------

    @staticmethod
    def send_appointment_confirmation(data: dict) -> bool:
        return EmailService.send_email(
            to_email=data["client_email"],
            subject=f"Votre rendez-vous ({data.get('appointment_id')}) est confirmé",
            html_content=templates.appointment_confirmation_email(data),
            plain_text=(
                f"Bonjour {data.get('client_name') or ''},\n\n"
                f"Votre rendez-vous du {data.get('date_time')} est confirmé."
            )
        )

    @staticmethod
    def send_appointment_cancellation(data: dict) -> bool:
        # Plain text only
        return EmailService.send_email(
            to_email=data["client_email"],
            subject=f"Votre rendez-vous ({data.get('appointment_id')}) a été annulé",
            plain_text=(
                f"Bonjour {data.get('client_name') or ''},\n\n"
                f"Votre rendez-vous prévu le {data.get('date_time')} a été annulé. "
                f"Si vous souhaitez reprogrammer, rendez-vous sur {settings.FRONTEND_URL}"
            )
        )
