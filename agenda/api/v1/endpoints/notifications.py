"""Notification queue endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from agenda.dependencies import AdminUser, CurrentUser, NotificationServiceDep
from agenda.schemas.notifications import (
    NotificationCreate,
    NotificationResponse,
    NotificationUpdate,
)

router = APIRouter()


@router.post(
    "/",
    response_model=NotificationResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Notifications"],
    summary="Queue notification",
)
async def create_notification(
    data: NotificationCreate, current_user: CurrentUser, service: NotificationServiceDep
) -> NotificationResponse:
    """Queue a notification as pending."""
    return await service.create_notification(current_user.tenant_id, data)


@router.get(
    "/pending",
    response_model=list[NotificationResponse],
    tags=["Notifications"],
    summary="List due notifications (admin only)",
)
async def list_pending_notifications(
    admin_user: AdminUser, service: NotificationServiceDep
) -> list[NotificationResponse]:
    """Pending notifications of the tenant whose scheduled time has come."""
    return await service.list_pending(admin_user.tenant_id)


@router.patch(
    "/{notification_id}",
    response_model=NotificationResponse,
    tags=["Notifications"],
    summary="Record delivery outcome (admin only)",
)
async def update_notification(
    notification_id: UUID,
    data: NotificationUpdate,
    admin_user: AdminUser,
    service: NotificationServiceDep,
) -> NotificationResponse:
    """Mark a notification sent or failed."""
    return await service.update_notification(notification_id, data, admin_user.tenant_id)
