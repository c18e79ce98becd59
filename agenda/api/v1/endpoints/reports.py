"""Reporting endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from agenda.dependencies import AdminUser, ReportServiceDep
from agenda.schemas.reports import AppointmentReport, ReportFilters

router = APIRouter()


@router.get(
    "/appointments",
    response_model=AppointmentReport,
    tags=["Reports"],
    summary="Appointment report (admin only)",
)
async def appointment_report(
    admin_user: AdminUser,
    service: ReportServiceDep,
    filters: Annotated[ReportFilters, Query()],
) -> AppointmentReport:
    """Appointment counts by status, professional, unit and date for ``from``..``to``."""
    return await service.get_appointment_report(admin_user.tenant_id, filters)
