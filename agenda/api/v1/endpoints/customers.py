"""Customer endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from agenda.dependencies import CurrentUser, CustomerServiceDep
from agenda.schemas.common import PaginationParams
from agenda.schemas.customers import (
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
    CustomerUpdate,
)

router = APIRouter()


@router.post(
    "/",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Customers"],
    summary="Create customer",
)
async def create_customer(
    data: CustomerCreate, current_user: CurrentUser, service: CustomerServiceDep
) -> CustomerResponse:
    """Create a customer; consent flags default to reminders and notifications on."""
    return await service.create_customer(current_user.tenant_id, data)


@router.get(
    "/",
    response_model=CustomerListResponse,
    tags=["Customers"],
    summary="List customers",
)
async def list_customers(
    current_user: CurrentUser,
    service: CustomerServiceDep,
    params: Annotated[PaginationParams, Query()],
) -> CustomerListResponse:
    """
    List customers with pagination.

    Args:
        current_user: Authenticated user
        service: Customer service
        params: page, limit and ``search`` (matches name or email)

    Returns:
        Paginated customers
    """
    return await service.list_customers(current_user.tenant_id, params)


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    tags=["Customers"],
    summary="Get customer",
)
async def get_customer(
    customer_id: UUID, current_user: CurrentUser, service: CustomerServiceDep
) -> CustomerResponse:
    """Get a customer by ID."""
    return await service.get_customer(current_user.tenant_id, customer_id)


@router.patch(
    "/{customer_id}",
    response_model=CustomerResponse,
    tags=["Customers"],
    summary="Update customer",
)
async def update_customer(
    customer_id: UUID,
    data: CustomerUpdate,
    current_user: CurrentUser,
    service: CustomerServiceDep,
) -> CustomerResponse:
    """Update a customer."""
    return await service.update_customer(current_user.tenant_id, customer_id, data)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Customers"],
    summary="Delete customer",
)
async def delete_customer(
    customer_id: UUID, current_user: CurrentUser, service: CustomerServiceDep
) -> None:
    """Delete a customer."""
    await service.delete_customer(current_user.tenant_id, customer_id)
