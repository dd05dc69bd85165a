"""
Notification Consumer

Turns events from the notification stream into Notification rows.

The consumer reads through a consumer group, one entry at a time:
1. On (re)connect it first re-drives its own pending entries (read id "0"),
   i.e. entries delivered before a crash but never acknowledged
2. It then blocks for new entries (read id ">")

Every entry is acknowledged once processing has been attempted, whether it
produced a row, was dropped (unknown user) or failed (malformed payload,
database error). Failed entries are logged and not retried.

Delivery is at-least-once: a crash between the insert and the XACK
re-delivers the entry and can create a duplicate row.

Run it in-process (started by the application lifespan) or standalone:

    python scripts/run_notification_consumer.py
"""

import asyncio
import logging
import socket
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import async_session_maker, close_db
from app.core.redis import create_redis_client, ensure_consumer_group
from app.modules.notifications import repository
from app.modules.notifications.producer import PAYLOAD_FIELD
from app.modules.notifications.schemas import NotificationEvent
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class NotificationConsumer:
    """Single long-lived subscriber of the notification stream."""

    def __init__(
        self,
        *,
        client_factory: Callable[[], Redis] | None = None,
        session_factory: Callable[[], AsyncSession] = async_session_maker,
        consumer_name: str | None = None,
    ):
        self.stream = settings.notification_stream
        self.group = settings.notification_consumer_group
        self.consumer_name = consumer_name or f"{socket.gethostname()}-consumer"
        self._client_factory = client_factory or self._default_client
        self._session_factory = session_factory
        self._client: Redis | None = None
        self._running = False
        self._pending = True

    @staticmethod
    def _default_client() -> Redis:
        # The read timeout must outlast the XREADGROUP block
        block_seconds = settings.notification_block_ms / 1000
        return create_redis_client(socket_timeout=block_seconds + 5)

    @property
    def running(self) -> bool:
        return self._running

    async def connect(self) -> None:
        self._client = self._client_factory()
        await ensure_consumer_group(self._client, self.stream, self.group)
        # Re-drive anything delivered to us but never acknowledged
        self._pending = True
        logger.info(f"Notification consumer '{self.consumer_name}' listening on '{self.stream}'")

    async def close(self) -> None:
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.warning(f"Error closing notification consumer connection: {e}")
            self._client = None

    def stop(self) -> None:
        """Ask the loop to exit after the current read."""
        self._running = False

    async def process(self, fields: dict[str, Any] | None) -> bool:
        """
        Persist the event carried by one stream entry.

        Returns:
            True if a row was created, False if the event was dropped

        Raises:
            Database errors from the insert
        """
        payload = (fields or {}).get(PAYLOAD_FIELD)
        if payload is None:
            logger.error(f"Stream entry without payload, dropping: {fields}")
            return False

        try:
            event = NotificationEvent.from_payload(payload)
        except PydanticValidationError as e:
            logger.error(f"Malformed notification payload, dropping: {e}")
            return False

        async with self._session_factory() as db:
            user = await UserRepository.get_by_id(db, event.user_id)
            if user is None:
                logger.error(f"Unknown user {event.user_id}, notification dropped")
                return False

            notification = await repository.create(
                db,
                user_id=event.user_id,
                message=event.message,
                redirect_link=event.redirect_link,
            )

        logger.info(f"Notification {notification.id} created for user {event.user_id}")
        return True

    async def handle_message(self, message_id: str, fields: dict[str, Any] | None) -> bool:
        """Process one entry, then acknowledge it regardless of the outcome."""
        created = False
        try:
            created = await self.process(fields)
        except Exception as e:
            logger.error(f"Error processing notification entry {message_id}: {e}", exc_info=True)
        finally:
            await self._client.xack(self.stream, self.group, message_id)
        return created

    async def read_once(self) -> int:
        """
        Read and handle at most one entry.

        Returns:
            Number of entries handled (0 or 1)
        """
        last_id = "0" if self._pending else ">"
        response = await self._client.xreadgroup(
            groupname=self.group,
            consumername=self.consumer_name,
            streams={self.stream: last_id},
            count=1,
            block=None if self._pending else settings.notification_block_ms,
        )

        entries = _entries(response)
        if not entries:
            if self._pending:
                logger.debug("No pending notification entries left")
                self._pending = False
            return 0

        for message_id, fields in entries:
            await self.handle_message(message_id, fields)
        return len(entries)

    async def run(self) -> None:
        """
        Consume until stop() is called or the task is cancelled.

        Broker errors and unexpected failures are logged, drop the connection
        and retry after a delay.
        """
        self._running = True
        try:
            while self._running:
                try:
                    if self._client is None:
                        await self.connect()
                    await self.read_once()
                except RedisError as e:
                    logger.error(
                        f"Notification consumer broker error: {e}. "
                        f"Retrying in {settings.notification_retry_delay_seconds}s"
                    )
                    await self.close()
                    await asyncio.sleep(settings.notification_retry_delay_seconds)
                except Exception as e:
                    logger.error(
                        f"Unexpected notification consumer error: {e}. "
                        f"Retrying in {settings.notification_retry_delay_seconds}s",
                        exc_info=True,
                    )
                    await self.close()
                    await asyncio.sleep(settings.notification_retry_delay_seconds)
        finally:
            self._running = False
            await self.close()
            logger.info("Notification consumer stopped")


def _entries(response: Any) -> list[tuple[str, dict[str, Any] | None]]:
    """Flatten an XREADGROUP reply (RESP2 list or RESP3 dict) into entries."""
    if not response:
        return []

    if isinstance(response, dict):
        streams = response.values()
        return [entry for value in streams for entry in (value[0] if value else [])]

    return [entry for _stream, stream_entries in response for entry in stream_entries]


async def main() -> None:
    """Standalone entry point."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    consumer = NotificationConsumer()
    try:
        await consumer.run()
    finally:
        await close_db()
