"""Tenant endpoints."""

from fastapi import APIRouter

from agenda.dependencies import AdminUser, CurrentUser, TenantServiceDep
from agenda.schemas.tenants import TenantResponse, TenantUpdate

router = APIRouter()


@router.get(
    "/me",
    response_model=TenantResponse,
    tags=["Tenants"],
    summary="Get the current user's tenant",
)
async def get_my_tenant(current_user: CurrentUser, service: TenantServiceDep) -> TenantResponse:
    """Return the tenant the authenticated user belongs to."""
    return await service.get_tenant(current_user.tenant_id)


@router.patch(
    "/me",
    response_model=TenantResponse,
    tags=["Tenants"],
    summary="Update the current tenant (admin only)",
)
async def update_my_tenant(
    data: TenantUpdate, admin_user: AdminUser, service: TenantServiceDep
) -> TenantResponse:
    """
    Update the tenant's name, plan or status.

    Args:
        data: Fields to change
        admin_user: Authenticated admin
        service: Tenant service

    Returns:
        Updated tenant
    """
    return await service.update_tenant(admin_user.tenant_id, data)
