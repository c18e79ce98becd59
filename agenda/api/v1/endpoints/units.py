"""Unit endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from agenda.dependencies import (
    AdminUser,
    CurrentUser,
    ProfessionalServiceDep,
    UnitServiceDep,
)
from agenda.schemas.professionals import ProfessionalResponse
from agenda.schemas.units import UnitCreate, UnitResponse, UnitUpdate

router = APIRouter()


@router.post(
    "/",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Units"],
    summary="Create unit (admin only)",
)
async def create_unit(
    data: UnitCreate, admin_user: AdminUser, service: UnitServiceDep
) -> UnitResponse:
    """
    Create a unit for the admin's tenant.

    - **name**: Unit name
    - **address**: Street address
    - **timezone**: IANA zone schedules are expressed in
    """
    return await service.create_unit(admin_user.tenant_id, data)


@router.get("/", response_model=list[UnitResponse], tags=["Units"], summary="List units")
async def list_units(current_user: CurrentUser, service: UnitServiceDep) -> list[UnitResponse]:
    """List the tenant's units ordered by name."""
    return await service.list_units(current_user.tenant_id)


@router.get("/{unit_id}", response_model=UnitResponse, tags=["Units"], summary="Get unit")
async def get_unit(
    unit_id: UUID, current_user: CurrentUser, service: UnitServiceDep
) -> UnitResponse:
    """Get a unit by ID."""
    return await service.get_unit(current_user.tenant_id, unit_id)


@router.patch(
    "/{unit_id}",
    response_model=UnitResponse,
    tags=["Units"],
    summary="Update unit (admin only)",
)
async def update_unit(
    unit_id: UUID, data: UnitUpdate, admin_user: AdminUser, service: UnitServiceDep
) -> UnitResponse:
    """Update a unit."""
    return await service.update_unit(admin_user.tenant_id, unit_id, data)


@router.delete(
    "/{unit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Units"],
    summary="Delete unit (admin only)",
)
async def delete_unit(unit_id: UUID, admin_user: AdminUser, service: UnitServiceDep) -> None:
    """Delete a unit."""
    await service.delete_unit(admin_user.tenant_id, unit_id)


@router.get(
    "/{unit_id}/professionals",
    response_model=list[ProfessionalResponse],
    tags=["Units"],
    summary="List active professionals of a unit",
)
async def list_unit_professionals(
    unit_id: UUID, current_user: CurrentUser, service: ProfessionalServiceDep
) -> list[ProfessionalResponse]:
    """List the unit's active professionals ordered by name."""
    return await service.list_professionals(current_user.tenant_id, unit_id)
