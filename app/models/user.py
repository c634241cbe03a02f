# ============================================================================
# FILE: app/models/user.py
# Customer / admin accounts
# ============================================================================
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, Enum as SQLEnum
from sqlalchemy.sql import func
from passlib.context import CryptContext
import enum
import secrets

from app.models.base import Base

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    """Platform roles. Only admins can act on other people's bookings."""
    ADMIN = "admin"
    DEFAULT = "default"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    birth_date = Column(Date, nullable=True)

    # Address
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=True)

    role = Column(
        SQLEnum(
            UserRole,
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles]
        ),
        default=UserRole.DEFAULT,
        nullable=False,
        index=True
    )

    accept_terms = Column(Boolean, default=False, nullable=False)
    accept_newsletter = Column(Boolean, default=False, nullable=False)

    # Email confirmation
    is_verified = Column(Boolean, default=False, nullable=False)
    email_token = Column(String(64), nullable=True, index=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    def verify_password(self, plain_password: str) -> bool:
        """Verify a plain password against the hashed password."""
        return pwd_context.verify(plain_password, self.hashed_password)

    @staticmethod
    def hash_password(plain_password: str) -> str:
        """Hash a plain password."""
        return pwd_context.hash(plain_password)

    @staticmethod
    def generate_email_token() -> str:
        return secrets.token_hex(32)

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def display_name(self) -> str:
        return self.first_name or "Client"

    def to_safe_dict(self) -> dict:
        """Profile without credentials or tokens"""
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "birthDate": self.birth_date.isoformat() if self.birth_date else None,
            "country": self.country,
            "city": self.city,
            "address": self.address,
            "postalCode": self.postal_code,
            "role": self.role.value if self.role else UserRole.DEFAULT.value,
            "acceptTerms": bool(self.accept_terms),
            "acceptNewsletter": bool(self.accept_newsletter),
            "isVerified": bool(self.is_verified),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
