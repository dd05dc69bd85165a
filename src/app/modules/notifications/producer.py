"""
Notification Producer

Publishes NotificationEvents to the notification stream. Publishing is
best-effort: a broker failure is logged and reported as False, it never
fails the action that triggered the notification.

Each publish opens its own connection, declares the stream and consumer
group, appends one entry and closes the connection. The XADD reply confirms
the entry reached the broker before the connection is closed.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from redis.exceptions import RedisError

from app.core.config import settings
from app.core.redis import create_redis_client, ensure_consumer_group
from app.modules.notifications.schemas import NotificationEvent

logger = logging.getLogger(__name__)

PAYLOAD_FIELD = "payload"


async def send_notification_event(event: NotificationEvent) -> bool:
    """
    Publish one event.

    Returns:
        True if the broker accepted the entry, False otherwise
    """
    timeout = settings.notification_publish_timeout_seconds
    client = create_redis_client(socket_timeout=timeout, socket_connect_timeout=timeout)

    try:
        await ensure_consumer_group(
            client, settings.notification_stream, settings.notification_consumer_group
        )
        entry_id = await client.xadd(settings.notification_stream, {PAYLOAD_FIELD: event.to_payload()})
        logger.info(f"Notification event {entry_id} published for user {event.user_id}")
        return True
    except RedisError as e:
        logger.error(f"Failed to publish notification for user {event.user_id}: {e}")
        return False
    finally:
        try:
            await client.aclose()
        except RedisError as e:
            logger.warning(f"Error closing notification publisher connection: {e}")


async def notify_users(
    users: Iterable[Mapping[str, Any]],
    message: str,
    redirect_link: str = "/",
) -> int:
    """
    Publish the same message to several users, one event each.

    ``users`` holds mappings with a ``user_id`` key. Recipients are handled
    sequentially and a failure for one does not stop the others.

    Returns:
        Number of events published
    """
    published = 0

    for user in users:
        user_id = user.get("user_id")
        if user_id is None:
            logger.error(f"Skipping recipient without user_id: {user}")
            continue

        try:
            event = NotificationEvent(user_id=user_id, message=message, redirect_link=redirect_link)
        except ValueError as e:
            logger.error(f"Skipping notification for user {user_id}: {e}")
            continue

        if await send_notification_event(event):
            published += 1

    logger.info(f"Notified {published} users")
    return published
