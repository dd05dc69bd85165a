"""
Notification Service

Read-side rules for notifications: users see and acknowledge their own,
admins see and manage everything.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser
from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.modules.notifications import repository
from app.modules.notifications.models import Notification
from app.modules.notifications.producer import notify_users
from app.modules.notifications.schemas import NotificationBroadcast, NotificationCreate
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


def _ensure_can_access(user: AuthenticatedUser, owner_id: int) -> None:
    if not user.is_admin and user.id != owner_id:
        raise PermissionDeniedError("You can only access your own notifications.")


async def list_for_user(
    db: AsyncSession, user: AuthenticatedUser, user_id: int
) -> list[Notification]:
    _ensure_can_access(user, user_id)
    return await repository.list_for_user(db, user_id)


async def create_notification(db: AsyncSession, data: NotificationCreate) -> Notification:
    """
    Create a notification row directly, bypassing the stream.

    Raises:
        NotFoundError: Unknown user
    """
    if await UserRepository.get_by_id(db, data.user_id) is None:
        raise NotFoundError("User not found.", error_code="USER_NOT_FOUND")

    return await repository.create(
        db,
        user_id=data.user_id,
        message=data.message,
        redirect_link=data.redirect_link,
    )


async def broadcast(data: NotificationBroadcast) -> int:
    """Publish a message to every listed user. Returns how many were published."""
    recipients = [{"user_id": user_id} for user_id in dict.fromkeys(data.user_ids)]
    return await notify_users(recipients, data.message, data.redirect_link)


async def mark_as_read(
    db: AsyncSession, user: AuthenticatedUser, notification_id: int
) -> Notification:
    """
    Mark a notification as read. Marking it again is a no-op.

    Raises:
        NotFoundError: Unknown notification
        PermissionDeniedError: Caller is neither the owner nor an admin
    """
    notification = await repository.get_by_id(db, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found.", error_code="NOTIFICATION_NOT_FOUND")

    _ensure_can_access(user, notification.user_id)
    return await repository.mark_as_read(db, notification)


async def delete_notification(db: AsyncSession, notification_id: int) -> None:
    """
    Raises:
        NotFoundError: Unknown notification
    """
    if not await repository.delete_by_id(db, notification_id):
        raise NotFoundError("Notification not found.", error_code="NOTIFICATION_NOT_FOUND")
    logger.info(f"Notification {notification_id} deleted")
