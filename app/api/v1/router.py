"""
API v1 router setup
Organized into: public, dashboard (JWT) and admin routes
"""
from fastapi import APIRouter

from app.api.v1.public import auth, services, availability
from app.api.v1.dashboard import bookings, appointments
from app.api.v1.admin import reports

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    auth.router,
    # No prefix needed - auth.router already has "/auth" prefix
    tags=["Authentication"]
)
api_v1_router.include_router(services.router)
api_v1_router.include_router(availability.router)

# ============================================================================
# DASHBOARD ROUTES (JWT cookie or Bearer token required)
# ============================================================================
api_v1_router.include_router(bookings.router)
api_v1_router.include_router(appointments.router)

# ============================================================================
# ADMIN ROUTES (JWT + admin role required)
# ============================================================================
api_v1_router.include_router(reports.router)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required (services, availability, auth)",
            "dashboard": "JWT in the access_token cookie or a Bearer header",
            "admin": "JWT + admin role required"
        }
    }
