# ============================================================================
# FILE: app/api/v1/public/auth.py
# Authentication endpoints - register, login, logout, profile, password
# ============================================================================
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import date

from app.api.dependencies import get_db, get_current_user, create_user_token
from app.config.settings import settings
from app.services.user.user_service import UserService
from app.models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ============================================================================
# Pydantic Schemas
# ============================================================================

class RegisterRequest(BaseModel):
    """Request body for user registration."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "firstName": "Jean",
                "lastName": "Dupont",
                "email": "jean@example.com",
                "password": "SecurePass123!",
                "phone": "0600000000",
                "acceptTerms": True,
                "acceptNewsletter": False
            }
        }
    )

    first_name: Optional[str] = Field(None, alias="firstName", max_length=100)
    last_name: Optional[str] = Field(None, alias="lastName", max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    phone: Optional[str] = Field(None, max_length=30)
    accept_terms: bool = Field(False, alias="acceptTerms")
    accept_newsletter: bool = Field(False, alias="acceptNewsletter")


class LoginRequest(BaseModel):
    """Request body for login."""
    email: EmailStr
    password: str


class ConfirmEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """All fields optional - only send what you want to update."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, alias="firstName", max_length=100)
    last_name: Optional[str] = Field(None, alias="lastName", max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    birth_date: Optional[date] = Field(None, alias="birthDate")
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, alias="postalCode", max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    accept_newsletter: Optional[bool] = Field(None, alias="acceptNewsletter")


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field(..., alias="oldPassword")
    new_password: str = Field(..., alias="newPassword", min_length=8)


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create a customer account. A welcome email with the confirmation
    link is queued; the account can log in right away.
    """
    user = UserService.register(
        db,
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
        accept_terms=request.accept_terms,
        accept_newsletter=request.accept_newsletter
    )

    return {"message": "Registration successful", "user": user.to_safe_dict()}


@router.post("/login")
def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Verify credentials; the JWT is returned in the body and set as an httpOnly cookie."""
    user = UserService.authenticate_user(db, request.email, request.password)
    token = create_user_token(user)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )

    return {
        "access_token": token,
        "token_type": "bearer",
        "user": user.to_safe_dict()
    }


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return {"user": current_user.to_safe_dict()}


@router.post("/confirm-email")
def confirm_email(request: ConfirmEmailRequest, db: Session = Depends(get_db)):
    user = UserService.confirm_email(db, request.token)
    return {"message": "Email confirmed", "user": user.to_safe_dict()}


@router.put("/profile")
def update_profile(
        request: ProfileUpdateRequest,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    user = UserService.update_profile(db, current_user, request.model_dump(exclude_unset=True))
    return {"user": user.to_safe_dict()}


@router.post("/change-password")
def change_password(
        request: ChangePasswordRequest,
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    UserService.change_password(db, current_user, request.old_password, request.new_password)
    return {"message": "Password updated"}
