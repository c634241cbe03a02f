import email

import pytest

from app.config.settings import settings
from app.models import Booking, User
from app.services.booking.booking_service import BookingService
from app.services.email import templates
from app.services.email.email_service import EmailService
from app.services.notification import booking_notifier
from app.tasks import email_tasks
from conftest import at


class FakeSMTP:
    def __init__(self):
        self.sent = []
        self.closed = False

    def sendmail(self, from_addr, recipients, raw):
        self.sent.append((from_addr, recipients, raw))

    def quit(self):
        self.closed = True


def _bodies(raw: str) -> str:
    message = email.message_from_string(raw)
    return "".join(part.get_payload(decode=True).decode("utf-8") for part in message.walk()
                   if not part.is_multipart())


@pytest.fixture
def smtp(monkeypatch):
    server = FakeSMTP()
    monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
    monkeypatch.setattr(EmailService, "_get_smtp_connection", staticmethod(lambda: server))
    return server


def test_disabled_email_is_skipped():
    assert settings.EMAIL_ENABLED is False
    assert EmailService.send_email("alice@example.com", "Sujet", "<p>Bonjour</p>") is False


def test_send_email_includes_bcc_and_both_parts(smtp):
    assert EmailService.send_email(
        "alice@example.com", "Sujet", "<p>Bonjour</p>", plain_text="Bonjour", bcc=["copie@example.com"]
    ) is True

    from_addr, recipients, raw = smtp.sent[0]
    assert from_addr == settings.EMAIL_FROM_ADDRESS
    assert recipients == ["alice@example.com", "copie@example.com"]
    assert "<p>Bonjour</p>" in _bodies(raw)
    assert smtp.closed


def test_registration_task_sends_confirmation_link(smtp):
    result = email_tasks.send_registration_email(email="new@example.com", token="abc123", user_name="Nina")

    assert result == {"status": "success", "email": "new@example.com"}
    assert f"{settings.FRONTEND_URL}/confirm-email?token=abc123" in _bodies(smtp.sent[0][2])


def test_smtp_failure_propagates_to_the_task(monkeypatch):
    def refuse():
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
    monkeypatch.setattr(EmailService, "_get_smtp_connection", staticmethod(refuse))

    with pytest.raises(ConnectionRefusedError):
        EmailService.send_booking_cancellation({"user_email": "alice@example.com", "date": "07/01/2030"})


def test_templates_escape_customer_input():
    html = templates.booking_confirmation_email({
        "user_name": "<script>alert(1)</script>",
        "service": "Lavage",
        "date": "07/01/2030",
        "time": "10:00",
    })

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_booking_payload_is_formatted_for_customers(db, catalog, users, sent_emails):
    booking = BookingService.create_booking(
        db, user=db.get(User, users.alice), service_id=catalog.detail, start_at=at(10),
        vehicle_type="SUV", license_plate="AB-123-CD"
    )

    name, kwargs = sent_emails[-1]
    data = kwargs["data"]
    assert name == "send_booking_confirmation_email"
    assert data["booking_id"] == booking.id
    assert data["user_email"] == "alice@example.com"
    assert data["user_name"] == "Alice"
    assert data["date"] == "07/01/2030"
    assert data["time"] == "10:00"
    assert data["duration"] == "1h 30m"
    assert data["price"] == "80.00 €"
    assert data["vehicle_type"] == "SUV"


def test_booking_email_renders_from_payload(smtp, db, catalog, users):
    booking = BookingService.create_booking(
        db, user=db.get(User, users.alice), service_id=catalog.wash, start_at=at(10)
    )
    payload = booking_notifier._booking_payload(db.get(Booking, booking.id))

    email_tasks.send_booking_confirmation_email(data=payload)

    body = _bodies(smtp.sent[0][2])
    assert "Lavage" in body
    assert "07/01/2030" in body


def test_payload_failure_never_fails_the_booking(monkeypatch, db, catalog, users, sent_emails):
    def broken_payload(booking):
        raise AttributeError("service relationship not loaded")

    monkeypatch.setattr(booking_notifier, "_booking_payload", broken_payload)
    alice = db.get(User, users.alice)

    booking = BookingService.create_booking(db, user=alice, service_id=catalog.wash, start_at=at(10))
    assert booking.id is not None

    cancelled = BookingService.update_booking(db, booking.id, alice, {"status": "cancelled"})
    assert cancelled.status == "cancelled"

    assert db.query(Booking).count() == 1
    assert db.get(Booking, booking.id).status == "cancelled"
    assert sent_emails == []


def test_notifier_reports_failure_instead_of_raising(monkeypatch, db, catalog, users):
    monkeypatch.setattr(booking_notifier, "_booking_payload", lambda booking: {})
    booking = BookingService.create_booking(
        db, user=db.get(User, users.alice), service_id=catalog.wash, start_at=at(10)
    )

    # An empty payload has no user_email key
    assert booking_notifier.booking_confirmed(booking) is False
    assert booking_notifier.booking_modified(booking) is False
