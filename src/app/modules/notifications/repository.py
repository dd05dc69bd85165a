"""
Notification Repository

Database operations for notification rows. Functions return None when a row
does not exist and leave the decision to the caller.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Notification


async def create(
    db: AsyncSession,
    *,
    user_id: int,
    message: str,
    redirect_link: str = "/",
) -> Notification:
    """Insert an unread notification and commit."""
    notification = Notification(
        user_id=user_id,
        message=message,
        redirect_link=redirect_link,
        read=False,
    )
    db.add(notification)
    await db.commit()
    await db.refresh(notification)
    return notification


async def get_by_id(db: AsyncSession, notification_id: int) -> Notification | None:
    return await db.get(Notification, notification_id)


async def list_for_user(db: AsyncSession, user_id: int) -> list[Notification]:
    """A user's notifications, newest first."""
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return list(result.scalars().all())


async def list_all(db: AsyncSession) -> list[Notification]:
    result = await db.execute(
        select(Notification).order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return list(result.scalars().all())


async def mark_as_read(db: AsyncSession, notification: Notification) -> Notification:
    """Set read=True. A notification that is already read is left untouched."""
    if not notification.read:
        notification.read = True
        await db.commit()
        await db.refresh(notification)
    return notification


async def delete_by_id(db: AsyncSession, notification_id: int) -> bool:
    """Delete a notification. Returns False when it did not exist."""
    result = await db.execute(delete(Notification).where(Notification.id == notification_id))
    await db.commit()
    return result.rowcount > 0
