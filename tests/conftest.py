import os

# Settings are read at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("BUSINESS_TIMEZONE", "Europe/Paris")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import date, datetime, time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.config.database import build_engine, create_tables, get_db
from app.main import app
from app.models import BusinessHours, Resource, Service, User, UserRole
from app.services.notification import booking_notifier

# Monday; every test date is far enough in the future to never be "past"
MONDAY = date(2030, 1, 7)
SUNDAY = date(2030, 1, 6)
PASSWORD = "Password123!"


def at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Records queued emails as (task_name, kwargs) instead of touching the broker"""
    calls = []

    def fake_enqueue(task, **kwargs):
        calls.append((task.name.rsplit(".", 1)[-1], kwargs))
        return True

    monkeypatch.setattr(booking_notifier, "_enqueue", fake_enqueue)
    return calls


def _seed(session_factory, build):
    """Run `build(session)`, commit, and return plain ids so no transaction stays open"""
    session = session_factory()
    try:
        objects = build(session)
        session.commit()
        return SimpleNamespace(**{name: obj.id for name, obj in objects.items()})
    finally:
        session.close()


@pytest.fixture
def seed(session_factory):
    return lambda build: _seed(session_factory, build)


@pytest.fixture
def catalog(seed):
    """A 60 and a 90 minute service, one capacity-1 bay, Monday 09:00-18:00"""
    def build(session):
        wash = Service(code="WASH", title="Lavage", duration_minutes=60, price=35, active=True)
        detail = Service(code="DETAIL", title="Détailing", duration_minutes=90, price=80, active=True)
        retired = Service(code="OLD", title="Ancien", duration_minutes=30, price=10, active=False)
        bay = Resource(name="Baie 1", capacity=1, active=True)
        session.add_all([wash, detail, retired, bay])
        session.add(BusinessHours(weekday=1, start_time=time(9, 0), end_time=time(18, 0)))
        session.flush()
        return {"wash": wash, "detail": detail, "retired": retired, "bay": bay}

    return seed(build)


@pytest.fixture
def users(seed):
    def build(session):
        alice = User(email="alice@example.com", hashed_password=User.hash_password(PASSWORD),
                     first_name="Alice", accept_terms=True)
        bob = User(email="bob@example.com", hashed_password=User.hash_password(PASSWORD),
                   first_name="Bob", accept_terms=True)
        admin = User(email="admin@example.com", hashed_password=User.hash_password(PASSWORD),
                     first_name="Admin", role=UserRole.ADMIN, accept_terms=True)
        session.add_all([alice, bob, admin])
        session.flush()
        return {"alice": alice, "bob": bob, "admin": admin}

    return seed(build)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def login(client, email: str, password: str = PASSWORD) -> dict:
    """Bearer headers for `email`"""
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
