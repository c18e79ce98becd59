"""Service catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from agenda.dependencies import AdminUser, CatalogServiceDep, CurrentUser
from agenda.schemas.services import ServiceCreate, ServiceResponse, ServiceUpdate

router = APIRouter()


@router.post(
    "/",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Services"],
    summary="Create service (admin only)",
)
async def create_service(
    data: ServiceCreate, admin_user: AdminUser, service: CatalogServiceDep
) -> ServiceResponse:
    """
    Add a bookable service.

    - **duration_minutes**: Length of an appointment (15-480)
    - **base_price**: Price estimate copied onto appointments
    """
    return await service.create_service(admin_user.tenant_id, data)


@router.get(
    "/",
    response_model=list[ServiceResponse],
    tags=["Services"],
    summary="List active services",
)
async def list_services(
    current_user: CurrentUser, service: CatalogServiceDep
) -> list[ServiceResponse]:
    """List the tenant's active services ordered by name."""
    return await service.list_services(current_user.tenant_id)


@router.get(
    "/{service_id}",
    response_model=ServiceResponse,
    tags=["Services"],
    summary="Get service",
)
async def get_service(
    service_id: UUID, current_user: CurrentUser, service: CatalogServiceDep
) -> ServiceResponse:
    """Get a service by ID."""
    return await service.get_service(current_user.tenant_id, service_id)


@router.patch(
    "/{service_id}",
    response_model=ServiceResponse,
    tags=["Services"],
    summary="Update service (admin only)",
)
async def update_service(
    service_id: UUID, data: ServiceUpdate, admin_user: AdminUser, service: CatalogServiceDep
) -> ServiceResponse:
    """Update a service."""
    return await service.update_service(admin_user.tenant_id, service_id, data)


@router.delete(
    "/{service_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Services"],
    summary="Delete service (admin only)",
)
async def delete_service(
    service_id: UUID, admin_user: AdminUser, service: CatalogServiceDep
) -> None:
    """Delete a service."""
    await service.delete_service(admin_user.tenant_id, service_id)
