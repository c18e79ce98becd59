"""FastAPI dependencies."""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from agenda.config import Settings
from agenda.core.auth_client import AuthClient
from agenda.core.exceptions import ForbiddenException, UnauthorizedException
from agenda.database import Database
from agenda.schemas.auth import AuthUser
from agenda.schemas.users import UserRole
from agenda.services.appointment_service import AppointmentService
from agenda.services.auth_service import AuthService
from agenda.services.availability_service import AvailabilityService
from agenda.services.catalog_service import CatalogService
from agenda.services.customer_service import CustomerService
from agenda.services.notification_service import NotificationService
from agenda.services.professional_service import ProfessionalService
from agenda.services.report_service import ReportService
from agenda.services.schedule_service import ScheduleService
from agenda.services.tenant_service import TenantService
from agenda.services.unit_service import UnitService
from agenda.services.user_service import UserService

# Security
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Storage handle created at startup."""
    return request.app.state.database


def get_auth_client(request: Request) -> AuthClient:
    """Auth backend client created at startup."""
    return request.app.state.auth_client


SettingsDep = Annotated[Settings, Depends(get_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]
AuthClientDep = Annotated[AuthClient, Depends(get_auth_client)]


def get_auth_service(
    database: DatabaseDep, client: AuthClientDep, settings: SettingsDep
) -> AuthService:
    """Get auth service instance."""
    return AuthService(database, client, settings)


async def get_access_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """
    Extract the bearer token.

    Raises:
        UnauthorizedException: If no bearer token was sent
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Not authenticated")
    return credentials.credentials


async def get_current_user(
    request: Request,
    token: Annotated[str, Depends(get_access_token)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthUser:
    """
    Resolve the authenticated staff member.

    The user is kept on the request state and its tenant and id are bound
    into the log context for the rest of the request.

    Args:
        request: Incoming request
        token: Bearer access token
        auth_service: Auth service

    Returns:
        The user row behind the token

    Raises:
        UnauthorizedException: If the token is invalid or the user unknown
    """
    user = await auth_service.authenticate(token)
    request.state.user = user
    structlog.contextvars.bind_contextvars(tenant_id=str(user.tenant_id), user_id=str(user.id))
    return user


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> AuthUser:
    """
    Dependency to ensure current user has admin role.

    Raises:
        ForbiddenException: If user is not admin
    """
    if current_user.role != UserRole.ADMIN:
        raise ForbiddenException("Admin access required")
    return current_user


def get_tenant_service(database: DatabaseDep) -> TenantService:
    """Get tenant service instance."""
    return TenantService(database)


def get_unit_service(database: DatabaseDep) -> UnitService:
    """Get unit service instance."""
    return UnitService(database)


def get_user_service(database: DatabaseDep) -> UserService:
    """Get user service instance."""
    return UserService(database)


def get_professional_service(database: DatabaseDep) -> ProfessionalService:
    """Get professional service instance."""
    return ProfessionalService(database)


def get_schedule_service(database: DatabaseDep) -> ScheduleService:
    """Get schedule service instance."""
    return ScheduleService(database)


def get_customer_service(database: DatabaseDep) -> CustomerService:
    """Get customer service instance."""
    return CustomerService(database)


def get_catalog_service(database: DatabaseDep) -> CatalogService:
    """Get catalog service instance."""
    return CatalogService(database)


def get_appointment_service(database: DatabaseDep, settings: SettingsDep) -> AppointmentService:
    """Get appointment service instance."""
    return AppointmentService(database, settings)


def get_availability_service(database: DatabaseDep) -> AvailabilityService:
    """Get availability service instance."""
    return AvailabilityService(database)


def get_report_service(database: DatabaseDep, settings: SettingsDep) -> ReportService:
    """Get report service instance."""
    return ReportService(database, timezone=settings.timezone)


def get_notification_service(database: DatabaseDep) -> NotificationService:
    """Get notification service instance."""
    return NotificationService(database)


# Type aliases for dependency injection
AccessToken = Annotated[str, Depends(get_access_token)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
AdminUser = Annotated[AuthUser, Depends(require_admin)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TenantServiceDep = Annotated[TenantService, Depends(get_tenant_service)]
UnitServiceDep = Annotated[UnitService, Depends(get_unit_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ProfessionalServiceDep = Annotated[ProfessionalService, Depends(get_professional_service)]
ScheduleServiceDep = Annotated[ScheduleService, Depends(get_schedule_service)]
CustomerServiceDep = Annotated[CustomerService, Depends(get_customer_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]
AppointmentServiceDep = Annotated[AppointmentService, Depends(get_appointment_service)]
AvailabilityServiceDep = Annotated[AvailabilityService, Depends(get_availability_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
