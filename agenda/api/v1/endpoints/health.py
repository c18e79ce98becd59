"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from agenda.database import CredentialTier
from agenda.dependencies import DatabaseDep, SettingsDep
from agenda.schemas.config import AppConfig

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response model."""

    status: str
    version: str
    environment: str
    database: str
    service_database: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Basic health check",
)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        Basic health status
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Detailed health check",
)
async def detailed_health_check(
    settings: SettingsDep, database: DatabaseDep
) -> DetailedHealthResponse:
    """
    Detailed health check with the status of both storage tiers.

    Returns:
        Detailed health status including dependencies
    """
    user_db = await database.check_connection(CredentialTier.USER)
    service_db = await database.check_connection(CredentialTier.SERVICE)

    return DetailedHealthResponse(
        status="healthy" if user_db and service_db else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database="healthy" if user_db else "unhealthy",
        service_database="healthy" if service_db else "unhealthy",
    )


@router.get(
    "/ping",
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Simple ping",
)
async def ping() -> dict[str, str]:
    """Simple ping endpoint."""
    return {"message": "pong"}


@router.get(
    "/config",
    response_model=AppConfig,
    tags=["Health"],
    summary="Public locale and feature flags",
)
async def app_config(settings: SettingsDep) -> AppConfig:
    """Timezone, locale, currency and enabled features."""
    return settings.app_config()
