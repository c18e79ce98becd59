"""API v1 router configuration."""

from fastapi import APIRouter

from agenda.api.v1.endpoints import (
    appointments,
    auth,
    availability,
    customers,
    health,
    notifications,
    professionals,
    reports,
    services,
    tenants,
    units,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(tenants.router, prefix="/tenants", tags=["Tenants"])
api_router.include_router(units.router, prefix="/units", tags=["Units"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(professionals.router, prefix="/professionals", tags=["Professionals"])
api_router.include_router(customers.router, prefix="/customers", tags=["Customers"])
api_router.include_router(services.router, prefix="/services", tags=["Services"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
api_router.include_router(availability.router, prefix="/availability", tags=["Availability"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
