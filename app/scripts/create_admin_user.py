#!/usr/bin/env python3
"""
Bootstrap script to create the first admin account.
Run this once to set up your initial admin.

Usage:
    python -m app.scripts.create_admin_user
"""
from getpass import getpass

from sqlalchemy.orm import Session
from app.config.database import SessionLocal
from app.core.exceptions import BookingPlatformError
from app.models.user import UserRole
from app.services.user.user_service import UserService


def create_admin_user():
    """Create an admin user from interactive input."""
    db: Session = SessionLocal()

    try:
        print("=" * 80)
        print("Creating Admin User")
        print("=" * 80)

        email = input("Email: ").strip()
        password = getpass("Password (min 8 chars): ").strip()
        first_name = input("First name: ").strip() or None
        last_name = input("Last name: ").strip() or None

        if not email:
            print("❌ Error: Email is required")
            return

        existing_user = UserService.get_user_by_email(db, email)
        if existing_user:
            print(f"❌ Error: User with email {email} already exists")
            return

        user = UserService.create_user(
            db=db,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            accept_terms=True,
            role=UserRole.ADMIN,
            is_verified=True
        )
        print(f"✅ Admin created: {user.email} (ID: {user.id})")

    except BookingPlatformError as e:
        db.rollback()
        print(f"❌ Error: {e.message}")
    finally:
        db.close()


if __name__ == "__main__":
    create_admin_user()
