# ============================================================================
# FILE: app/services/user/user_service.py
# User business logic - registration, authentication, profile
# ============================================================================
from datetime import date
from typing import Any, Dict, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.models.user import User, UserRole
from app.services.notification import booking_notifier

logger = logging.getLogger(__name__)

# Profile fields a user may edit on their own account
PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone",
    "birth_date",
    "address",
    "city",
    "postal_code",
    "country",
    "accept_newsletter",
)

MIN_PASSWORD_LENGTH = 8


class UserService:
    """Service layer for user operations."""

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.lower().strip()

    @staticmethod
    def create_user(
            db: Session,
            email: str,
            password: str,
            first_name: Optional[str] = None,
            last_name: Optional[str] = None,
            phone: Optional[str] = None,
            accept_terms: bool = False,
            accept_newsletter: bool = False,
            role: UserRole = UserRole.DEFAULT,
            is_verified: bool = False
    ) -> User:
        """
        Create a new user with hashed password.
        Raises ConflictError if email already exists.
        """
        email = UserService._normalize_email(email)

        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        existing_user = db.query(User).filter(User.email == email).first()
        if existing_user:
            raise ConflictError("Email already registered", code="email_taken")

        user = User(
            email=email,
            hashed_password=User.hash_password(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
            accept_terms=accept_terms,
            accept_newsletter=accept_newsletter,
            is_verified=is_verified,
            email_token=None if is_verified else User.generate_email_token(),
            is_active=True
        )

        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Email already registered", code="email_taken")
        db.refresh(user)

        logger.info(f"User {user.id} registered ({user.role.value})")
        return user

    @staticmethod
    def register(db: Session, **fields) -> User:
        """Create a customer account and queue the welcome email"""
        user = UserService.create_user(db, **fields)
        booking_notifier.registration(user.email, user.email_token, user.display_name)
        return user

    @staticmethod
    def authenticate_user(
            db: Session,
            email: str,
            password: str
    ) -> User:
        """
        Authenticate a user by email and password.
        Raises AuthenticationError on unknown email, inactive account or bad password.
        """
        user = db.query(User).filter(User.email == UserService._normalize_email(email)).first()

        if not user or not user.is_active or not user.verify_password(password):
            logger.info(f"Failed login attempt for {email}")
            raise AuthenticationError("Invalid email or password", code="invalid_credentials")

        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get a user by their ID."""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get a user by their email."""
        return db.query(User).filter(User.email == UserService._normalize_email(email)).first()

    @staticmethod
    def confirm_email(db: Session, token: str) -> User:
        if not token:
            raise ValidationError("Token required")

        user = db.query(User).filter(User.email_token == token).first()
        if not user:
            raise NotFoundError("Invalid or expired token")

        user.is_verified = True
        user.email_token = None
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.id} confirmed their email")
        return user

    @staticmethod
    def update_profile(db: Session, user: User, changes: Dict[str, Any]) -> User:
        updated = False
        for field in PROFILE_FIELDS:
            if field in changes:
                value = changes[field]
                if field == "birth_date" and isinstance(value, str):
                    try:
                        value = date.fromisoformat(value)
                    except ValueError:
                        raise ValidationError("Invalid birth date (YYYY-MM-DD required)")
                setattr(user, field, value)
                updated = True

        if not updated:
            raise ValidationError("Nothing to update")

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def change_password(db: Session, user: User, old_password: str, new_password: str) -> None:
        if not user.verify_password(old_password):
            raise ValidationError("Current password is incorrect", code="invalid_password")
        if len(new_password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user.hashed_password = User.hash_password(new_password)
        db.commit()
        logger.info(f"User {user.id} changed their password")
