# app/core/exceptions.py
"""
Domain exceptions raised by the service layer.

Each exception knows the HTTP status and the machine-readable code it is
rendered with, so routers never have to translate them by hand.
"""
from typing import Any, Dict, Optional


class BookingPlatformError(Exception):
    """Base class for all errors surfaced to API clients"""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(
            self,
            message: str,
            details: Optional[Dict[str, Any]] = None,
            code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if code:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(BookingPlatformError):
    """Malformed or missing input (bad date format, missing serviceId...)"""
    status_code = 400
    code = "validation_error"


class AuthenticationError(BookingPlatformError):
    """No session, or a session that can't be verified"""
    status_code = 401
    code = "authentication_required"


class AuthorizationError(BookingPlatformError):
    """Caller is authenticated but lacks ownership or admin rights"""
    status_code = 403
    code = "forbidden"


class NotFoundError(BookingPlatformError):
    """Referenced service, resource or booking is absent or inactive"""
    status_code = 404
    code = "not_found"


class ConflictError(BookingPlatformError):
    """Write would violate a uniqueness or capacity rule"""
    status_code = 409
    code = "conflict"


class SlotUnavailableError(ConflictError):
    """Resource capacity would be exceeded for the requested window"""
    code = "slot_unavailable"


class InternalError(BookingPlatformError):
    """Store or infrastructure failure"""
    status_code = 500
    code = "internal_error"
