"""Availability endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from agenda.dependencies import AvailabilityServiceDep, CurrentUser
from agenda.schemas.availability import AvailabilityRequest, AvailabilityResponse

router = APIRouter()


@router.get(
    "/",
    response_model=AvailabilityResponse,
    tags=["Availability"],
    summary="Bookable slots for a day",
)
async def get_availability(
    current_user: CurrentUser,
    service: AvailabilityServiceDep,
    request: Annotated[AvailabilityRequest, Query()],
) -> AvailabilityResponse:
    """
    Slots of a unit's professionals for a service on a local date.

    Every candidate slot is returned with an ``available`` flag.
    """
    return await service.get_availability(current_user.tenant_id, request)
