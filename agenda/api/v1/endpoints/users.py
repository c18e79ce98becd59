"""User management endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from agenda.dependencies import AdminUser, CurrentUser, UserServiceDep
from agenda.schemas.users import UserCreate, UserResponse, UserUpdate

router = APIRouter()


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Users"],
    summary="Create staff user (admin only)",
)
async def create_user(
    data: UserCreate, admin_user: AdminUser, service: UserServiceDep
) -> UserResponse:
    """
    Add a staff member to the admin's tenant.

    Args:
        data: User details; ``id`` links an existing auth identity
        admin_user: Authenticated admin
        service: User service

    Returns:
        Created user
    """
    return await service.create_user(admin_user.tenant_id, data)


@router.get("/", response_model=list[UserResponse], tags=["Users"], summary="List users")
async def list_users(current_user: CurrentUser, service: UserServiceDep) -> list[UserResponse]:
    """List the tenant's users ordered by name."""
    return await service.list_users(current_user.tenant_id)


@router.get("/{user_id}", response_model=UserResponse, tags=["Users"], summary="Get user")
async def get_user(
    user_id: UUID, current_user: CurrentUser, service: UserServiceDep
) -> UserResponse:
    """Get a user of the tenant by ID."""
    return await service.get_user(user_id, current_user.tenant_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    tags=["Users"],
    summary="Update user (admin only)",
)
async def update_user(
    user_id: UUID, data: UserUpdate, admin_user: AdminUser, service: UserServiceDep
) -> UserResponse:
    """Update a user."""
    return await service.update_user(admin_user.tenant_id, user_id, data)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Users"],
    summary="Delete user (admin only)",
)
async def delete_user(user_id: UUID, admin_user: AdminUser, service: UserServiceDep) -> None:
    """Delete a user."""
    await service.delete_user(admin_user.tenant_id, user_id)
