"""
Notifications Router

Endpoints:
- GET /notifications/me - Current user's notifications
- GET /notifications/user/{user_id} - A user's notifications (owner or admin)
- GET /notifications - Admin: all notifications
- POST /notifications - Admin: create a notification
- POST /notifications/broadcast - Admin: publish a message to several users
- PATCH /notifications/{notification_id}/read - Mark as read (owner or admin)
- DELETE /notifications/{notification_id} - Admin: delete a notification
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_current_admin, get_current_user
from app.core.database import get_db
from app.core.exceptions import AppError
from app.modules.notifications import repository, service
from app.modules.notifications.schemas import (
    NotificationBroadcast,
    NotificationBroadcastResponse,
    NotificationCreate,
    NotificationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(e: AppError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


@router.get("/me", response_model=list[NotificationResponse])
async def get_my_notifications(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[NotificationResponse]:
    notifications = await repository.list_for_user(db, user.id)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get("/user/{user_id}", response_model=list[NotificationResponse])
async def get_user_notifications(
    user_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[NotificationResponse]:
    try:
        notifications = await service.list_for_user(db, user, user_id)
    except AppError as e:
        raise _http_error(e) from e
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get("", response_model=list[NotificationResponse])
async def get_all_notifications(
    _admin: AuthenticatedUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> list[NotificationResponse]:
    notifications = await repository.list_all(db)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    data: NotificationCreate,
    _admin: AuthenticatedUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> NotificationResponse:
    try:
        notification = await service.create_notification(db, data)
    except AppError as e:
        raise _http_error(e) from e
    return NotificationResponse.model_validate(notification)


@router.post(
    "/broadcast",
    response_model=NotificationBroadcastResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def broadcast_notification(
    data: NotificationBroadcast,
    admin: AuthenticatedUser = Depends(get_current_admin),
) -> NotificationBroadcastResponse:
    """Publish through the notification stream; rows are created asynchronously."""
    published = await service.broadcast(data)
    logger.info(f"Admin {admin.id} broadcast a notification to {published} users")
    return NotificationBroadcastResponse(requested=len(set(data.user_ids)), published=published)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_as_read(
    notification_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationResponse:
    try:
        notification = await service.mark_as_read(db, user, notification_id)
    except AppError as e:
        raise _http_error(e) from e
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    _admin: AuthenticatedUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Response:
    try:
        await service.delete_notification(db, notification_id)
    except AppError as e:
        raise _http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
