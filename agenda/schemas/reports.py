"""Report schemas."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from agenda.schemas.appointments import AppointmentStatus


class ReportFilters(BaseModel):
    """Filters for the appointment report."""

    model_config = ConfigDict(populate_by_name=True)

    from_date: date = Field(..., alias="from")
    to_date: date = Field(..., alias="to")
    unit_id: UUID | None = None
    professional_id: UUID | None = None
    status: AppointmentStatus | None = None

    @model_validator(mode="after")
    def validate_range(self) -> "ReportFilters":
        """Validate the range is not inverted."""
        if self.from_date > self.to_date:
            raise ValueError("from must not be after to")
        return self


class AppointmentReport(BaseModel):
    """Appointment counts for a date range."""

    total: int
    by_status: dict[str, int]
    by_professional: dict[str, int]
    by_unit: dict[str, int]
    by_date: dict[str, int]
