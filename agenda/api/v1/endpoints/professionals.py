"""Professional endpoints, including each professional's calendar."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, status

from agenda.dependencies import (
    AdminUser,
    CurrentUser,
    ProfessionalServiceDep,
    ScheduleServiceDep,
)
from agenda.schemas.professionals import (
    ProfessionalCreate,
    ProfessionalResponse,
    ProfessionalUpdate,
)
from agenda.schemas.schedule import (
    ScheduleRuleCreate,
    ScheduleRuleResponse,
    ScheduleRuleUpdate,
    TimeOffCreate,
    TimeOffResponse,
    TimeOffUpdate,
)

router = APIRouter()


@router.post(
    "/",
    response_model=ProfessionalResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Professionals"],
    summary="Create professional (admin only)",
)
async def create_professional(
    data: ProfessionalCreate, admin_user: AdminUser, service: ProfessionalServiceDep
) -> ProfessionalResponse:
    """Create a professional in one of the tenant's units."""
    return await service.create_professional(admin_user.tenant_id, data)


@router.get(
    "/",
    response_model=list[ProfessionalResponse],
    tags=["Professionals"],
    summary="List active professionals of a unit",
)
async def list_professionals(
    current_user: CurrentUser,
    service: ProfessionalServiceDep,
    unit_id: UUID = Query(..., description="Unit to list"),
) -> list[ProfessionalResponse]:
    """List a unit's active professionals ordered by name."""
    return await service.list_professionals(current_user.tenant_id, unit_id)


@router.get(
    "/{professional_id}",
    response_model=ProfessionalResponse,
    tags=["Professionals"],
    summary="Get professional",
)
async def get_professional(
    professional_id: UUID, current_user: CurrentUser, service: ProfessionalServiceDep
) -> ProfessionalResponse:
    """Get a professional by ID."""
    return await service.get_professional(current_user.tenant_id, professional_id)


@router.patch(
    "/{professional_id}",
    response_model=ProfessionalResponse,
    tags=["Professionals"],
    summary="Update professional (admin only)",
)
async def update_professional(
    professional_id: UUID,
    data: ProfessionalUpdate,
    admin_user: AdminUser,
    service: ProfessionalServiceDep,
) -> ProfessionalResponse:
    """Update a professional."""
    return await service.update_professional(admin_user.tenant_id, professional_id, data)


@router.delete(
    "/{professional_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Professionals"],
    summary="Delete professional (admin only)",
)
async def delete_professional(
    professional_id: UUID, admin_user: AdminUser, service: ProfessionalServiceDep
) -> None:
    """Delete a professional."""
    await service.delete_professional(admin_user.tenant_id, professional_id)


# ============================================================================
# Schedule rules
# ============================================================================


@router.post(
    "/{professional_id}/schedule-rules",
    response_model=ScheduleRuleResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Schedule"],
    summary="Add a weekly availability window",
)
async def create_schedule_rule(
    professional_id: UUID,
    data: ScheduleRuleCreate,
    admin_user: AdminUser,
    service: ScheduleServiceDep,
) -> ScheduleRuleResponse:
    """
    Add a recurring window to the professional's calendar.

    - **day_of_week**: 0 = Sunday ... 6 = Saturday
    - **start_time** / **end_time**: ``HH:MM`` in the unit's timezone
    - **slot_minutes**: Step between slot starts
    """
    return await service.create_rule(admin_user.tenant_id, professional_id, data)


@router.get(
    "/{professional_id}/schedule-rules",
    response_model=list[ScheduleRuleResponse],
    tags=["Schedule"],
    summary="List schedule rules",
)
async def list_schedule_rules(
    professional_id: UUID, current_user: CurrentUser, service: ScheduleServiceDep
) -> list[ScheduleRuleResponse]:
    """List the calendar's rules ordered by day of week."""
    return await service.list_rules(current_user.tenant_id, professional_id)


@router.patch(
    "/{professional_id}/schedule-rules/{rule_id}",
    response_model=ScheduleRuleResponse,
    tags=["Schedule"],
    summary="Update schedule rule",
)
async def update_schedule_rule(
    professional_id: UUID,
    rule_id: UUID,
    data: ScheduleRuleUpdate,
    admin_user: AdminUser,
    service: ScheduleServiceDep,
) -> ScheduleRuleResponse:
    """Update a schedule rule."""
    return await service.update_rule(admin_user.tenant_id, professional_id, rule_id, data)


@router.delete(
    "/{professional_id}/schedule-rules/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Schedule"],
    summary="Delete schedule rule",
)
async def delete_schedule_rule(
    professional_id: UUID,
    rule_id: UUID,
    admin_user: AdminUser,
    service: ScheduleServiceDep,
) -> None:
    """Delete a schedule rule."""
    await service.delete_rule(admin_user.tenant_id, professional_id, rule_id)


# ============================================================================
# Time off
# ============================================================================


@router.post(
    "/{professional_id}/time-off",
    response_model=TimeOffResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Schedule"],
    summary="Block an interval",
)
async def create_time_off(
    professional_id: UUID,
    data: TimeOffCreate,
    current_user: CurrentUser,
    service: ScheduleServiceDep,
) -> TimeOffResponse:
    """Block [start, end) on the professional's calendar."""
    return await service.create_time_off(current_user.tenant_id, professional_id, data)


@router.get(
    "/{professional_id}/time-off",
    response_model=list[TimeOffResponse],
    tags=["Schedule"],
    summary="List time off",
)
async def list_time_off(
    professional_id: UUID,
    current_user: CurrentUser,
    service: ScheduleServiceDep,
    start: datetime | None = Query(None, description="Only entries ending after this"),
    end: datetime | None = Query(None, description="Only entries starting before this"),
) -> list[TimeOffResponse]:
    """List time off, optionally only entries intersecting [start, end)."""
    return await service.list_time_off(current_user.tenant_id, professional_id, start, end)


@router.patch(
    "/{professional_id}/time-off/{time_off_id}",
    response_model=TimeOffResponse,
    tags=["Schedule"],
    summary="Update time off",
)
async def update_time_off(
    professional_id: UUID,
    time_off_id: UUID,
    data: TimeOffUpdate,
    current_user: CurrentUser,
    service: ScheduleServiceDep,
) -> TimeOffResponse:
    """Update a time-off entry."""
    return await service.update_time_off(
        current_user.tenant_id, professional_id, time_off_id, data
    )


@router.delete(
    "/{professional_id}/time-off/{time_off_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Schedule"],
    summary="Delete time off",
)
async def delete_time_off(
    professional_id: UUID,
    time_off_id: UUID,
    current_user: CurrentUser,
    service: ScheduleServiceDep,
) -> None:
    """Delete a time-off entry."""
    await service.delete_time_off(current_user.tenant_id, professional_id, time_off_id)
