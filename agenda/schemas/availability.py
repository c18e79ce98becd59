"""Availability request/response schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel


class AvailabilityRequest(BaseModel):
    """Which unit, service and local day to compute availability for."""

    unit_id: UUID
    service_id: UUID
    date: date
    professional_id: UUID | None = None


class AvailabilitySlot(BaseModel):
    """A bookable (or blocked) slot."""

    start: datetime
    end: datetime
    available: bool
    professional_id: UUID | None = None


class AvailabilityResponse(BaseModel):
    """Slots for every eligible professional, ordered by start."""

    date: date
    unit_id: UUID
    service_id: UUID
    timezone: str
    slots: list[AvailabilitySlot]
