# ===== app/scripts/seed_catalog.py =====
"""
Seed services, resources and weekly business hours for local runs.

Usage:
    python -m app.scripts.seed_catalog
"""
from datetime import time

from app.config.database import SessionLocal, create_tables
from app.models import BusinessHours, Resource, Service

SERVICES = [
    {"code": "EXT", "title": "Lavage extérieur", "duration_minutes": 60, "price": 35},
    {"code": "INT", "title": "Nettoyage intérieur", "duration_minutes": 90, "price": 60},
    {"code": "FULL", "title": "Formule complète", "duration_minutes": 180, "price": 120},
]

RESOURCES = [
    {"name": "Baie 1", "capacity": 1},
    {"name": "Baie 2", "capacity": 1},
]

# Monday to Saturday (0 = Sunday), split shift
OPEN_DAYS = range(1, 7)
SHIFTS = [(time(9, 0), time(12, 30)), (time(13, 30), time(18, 0))]


def seed_catalog():
    create_tables()
    db = SessionLocal()

    try:
        if db.query(Service).count():
            print("Catalog already seeded, nothing to do")
            return

        db.add_all(Service(active=True, **data) for data in SERVICES)
        db.add_all(Resource(active=True, **data) for data in RESOURCES)
        db.add_all(
            BusinessHours(weekday=day, start_time=start, end_time=end)
            for day in OPEN_DAYS
            for start, end in SHIFTS
        )
        db.commit()
        print("✅ Services, resources and business hours seeded successfully!")

    except Exception as e:
        db.rollback()
        print("❌ Error seeding catalog:", e)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_catalog()
