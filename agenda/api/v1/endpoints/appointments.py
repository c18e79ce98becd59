"""Appointment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from agenda.dependencies import AppointmentServiceDep, CurrentUser
from agenda.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)

router = APIRouter()


@router.post(
    "/",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Appointments"],
    summary="Create new appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentResponse:
    """
    Book an appointment.

    The end is derived from the service's duration. Repeating a request with
    the same ``idempotency_key`` returns the original appointment.

    Args:
        data: Appointment creation data
        current_user: Authenticated user
        service: Appointment service

    Returns:
        Created appointment

    Raises:
        ConflictException: If the professional is busy in that interval
    """
    return await service.create_appointment(current_user.tenant_id, data)


@router.get(
    "/",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="List appointments",
)
async def list_appointments(
    current_user: CurrentUser,
    service: AppointmentServiceDep,
    filters: Annotated[AppointmentFilters, Query()],
) -> AppointmentListResponse:
    """
    List the tenant's appointments with filtering, latest first.

    Args:
        current_user: Authenticated user
        service: Appointment service
        filters: unit, professional, customer, status, from/to (on start),
            page and limit

    Returns:
        Paginated list of appointments
    """
    return await service.list_appointments(current_user.tenant_id, filters)


@router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentResponse:
    """Get a specific appointment with customer, professional, service and unit names."""
    return await service.get_appointment(current_user.tenant_id, appointment_id)


@router.patch(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Update appointment",
)
async def update_appointment(
    appointment_id: UUID,
    data: AppointmentUpdate,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentResponse:
    """
    Reschedule or edit an appointment.

    A new interval is checked against the professional's other bookings.
    """
    return await service.update_appointment(current_user.tenant_id, appointment_id, data)


@router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    tags=["Appointments"],
    summary="Update appointment status",
)
async def update_appointment_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> AppointmentResponse:
    """Confirm, cancel, complete or mark an appointment as no-show."""
    return await service.update_status(current_user.tenant_id, appointment_id, data)


@router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Appointments"],
    summary="Delete appointment",
)
async def delete_appointment(
    appointment_id: UUID,
    current_user: CurrentUser,
    service: AppointmentServiceDep,
) -> None:
    """Delete an appointment."""
    await service.delete_appointment(current_user.tenant_id, appointment_id)
