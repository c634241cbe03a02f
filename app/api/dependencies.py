# ============================================================================
# FILE: app/api/dependencies.py
# Authentication dependencies for JWT sessions (cookie or Bearer header)
# ============================================================================
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from app.config.database import get_db
from app.config.settings import settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.models.user import User

from app.services.user.user_service import UserService

# ============================================================================
# Security Schemes
# ============================================================================

# auto_error=False: the session cookie is an accepted alternative
jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter your JWT access token",
    auto_error=False
)


# ============================================================================
# JWT Token Functions
# ============================================================================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary with claims (should include 'sub' with user_id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access"
    })

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def create_user_token(user: User) -> str:
    return create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
    })


def verify_access_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Raises:
        AuthenticationError: If token is invalid, expired or not an access token
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise AuthenticationError(f"Could not validate credentials: {str(e)}", code="invalid_token")

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type", code="invalid_token")

    return payload


# ============================================================================
# Authentication Dependencies
# ============================================================================

def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def get_current_user(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(jwt_security),
        db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.

    Usage in routes:
        @router.get("/me")
        def me(current_user: User = Depends(get_current_user)):
            return current_user.to_safe_dict()

    Raises:
        AuthenticationError: no token, bad token, or unknown/inactive user
    """
    token = _extract_token(request, credentials)
    if not token:
        raise AuthenticationError("Authentication required")

    payload = verify_access_token(token)

    user_id_str: Optional[str] = payload.get("sub")
    try:
        user_id = int(user_id_str)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid user ID in token", code="invalid_token")

    user = UserService.get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    # Make the user id available to the request logging middleware
    request.state.user_id = user.id
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency for admin-only routes"""
    if not current_user.is_admin():
        raise AuthorizationError("Admin access required")
    return current_user
