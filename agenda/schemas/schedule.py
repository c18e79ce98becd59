"""Schedule rule and time-off schemas for request/response validation."""

import re
from datetime import datetime, time
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AwareDatetime,
    BaseModel,
    BeforeValidator,
    Field,
    PlainSerializer,
    model_validator,
)

from agenda.schemas.common import TIME_PATTERN, PartialUpdate


def _parse_clock(value: Any) -> Any:
    """Accept ``HH:MM`` strings as wall-clock times."""
    if isinstance(value, str):
        if not re.fullmatch(TIME_PATTERN, value):
            raise ValueError("Time must be in HH:MM format")
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
    return value


ClockTime = Annotated[
    time,
    BeforeValidator(_parse_clock),
    PlainSerializer(lambda value: value.strftime("%H:%M"), return_type=str, when_used="json"),
]


class ScheduleRuleCreate(BaseModel):
    """Schema for creating a recurring availability window."""

    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday, 6 = Saturday")
    start_time: ClockTime
    end_time: ClockTime
    slot_minutes: int = Field(default=15, ge=15, le=120)

    @model_validator(mode="after")
    def validate_window(self) -> "ScheduleRuleCreate":
        """Validate start time is before end time."""
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class ScheduleRuleUpdate(PartialUpdate):
    """Schema for updating a schedule rule."""

    day_of_week: int | None = Field(None, ge=0, le=6)
    start_time: ClockTime | None = None
    end_time: ClockTime | None = None
    slot_minutes: int | None = Field(None, ge=15, le=120)

    @model_validator(mode="after")
    def validate_window(self) -> "ScheduleRuleUpdate":
        """Validate start time is before end time when both are given."""
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class ScheduleRuleResponse(BaseModel):
    """Schema for schedule rule response."""

    id: UUID
    calendar_id: UUID
    day_of_week: int
    start_time: ClockTime
    end_time: ClockTime
    slot_minutes: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TimeOffCreate(BaseModel):
    """Schema for blocking a calendar interval."""

    start: AwareDatetime
    end: AwareDatetime
    reason: str = Field(..., min_length=5, max_length=200)

    @model_validator(mode="after")
    def validate_interval(self) -> "TimeOffCreate":
        """Validate start is before end."""
        if self.start >= self.end:
            raise ValueError("start must be before end")
        return self


class TimeOffUpdate(PartialUpdate):
    """Schema for updating a time-off entry."""

    start: AwareDatetime | None = None
    end: AwareDatetime | None = None
    reason: str | None = Field(None, min_length=5, max_length=200)

    @model_validator(mode="after")
    def validate_interval(self) -> "TimeOffUpdate":
        """Validate start is before end when both are given."""
        if self.start and self.end and self.start >= self.end:
            raise ValueError("start must be before end")
        return self


class TimeOffResponse(BaseModel):
    """Schema for time-off response."""

    id: UUID
    calendar_id: UUID
    start: datetime
    end: datetime
    reason: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
