"""
Unit tests for the notification producer.
"""

import json
from unittest.mock import patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from app.modules.notifications.producer import notify_users, send_notification_event
from app.modules.notifications.schemas import NotificationEvent


class TestNotificationEvent:
    def test_wire_format_uses_camel_case(self):
        event = NotificationEvent(user_id=4, message="Hello", redirect_link="/x")

        assert json.loads(event.to_payload()) == {
            "userId": 4,
            "message": "Hello",
            "redirectLink": "/x",
        }

    def test_parse_wire_format(self):
        event = NotificationEvent.from_payload(
            '{"userId": 4, "message": "Hello", "redirectLink": "/x"}'
        )

        assert event.user_id == 4
        assert event.redirect_link == "/x"


class TestSendNotificationEvent:
    """Tests for send_notification_event."""

    @pytest.mark.asyncio
    async def test_publishes_and_closes(self, mock_stream_client):
        event = NotificationEvent(user_id=4, message="Hello", redirect_link="/x")

        with patch(
            "app.modules.notifications.producer.create_redis_client",
            return_value=mock_stream_client,
        ):
            assert await send_notification_event(event) is True

        mock_stream_client.xgroup_create.assert_awaited_once()
        stream, fields = mock_stream_client.xadd.await_args.args
        assert stream == "notifications"
        assert json.loads(fields["payload"])["userId"] == 4
        mock_stream_client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_group_is_tolerated(self, mock_stream_client):
        mock_stream_client.xgroup_create.side_effect = ResponseError(
            "BUSYGROUP Consumer Group name already exists"
        )

        with patch(
            "app.modules.notifications.producer.create_redis_client",
            return_value=mock_stream_client,
        ):
            assert await send_notification_event(
                NotificationEvent(user_id=4, message="Hello")
            )

        mock_stream_client.xadd.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_broker_failure_returns_false(self, mock_stream_client):
        mock_stream_client.xadd.side_effect = RedisConnectionError("Connection refused")

        with patch(
            "app.modules.notifications.producer.create_redis_client",
            return_value=mock_stream_client,
        ):
            assert await send_notification_event(
                NotificationEvent(user_id=4, message="Hello")
            ) is False

        mock_stream_client.aclose.assert_awaited_once()


class TestNotifyUsers:
    """Tests for notify_users fan-out."""

    @pytest.mark.asyncio
    async def test_failure_for_one_user_does_not_stop_others(self, mock_stream_client):
        mock_stream_client.xadd.side_effect = [
            RedisConnectionError("Connection reset"),
            "1700000000000-1",
        ]

        with patch(
            "app.modules.notifications.producer.create_redis_client",
            return_value=mock_stream_client,
        ):
            published = await notify_users(
                [{"user_id": 1}, {"user_id": 2}], "Cours déplacé", "/etudiant/planning"
            )

        assert published == 1
        assert mock_stream_client.xadd.await_count == 2
        user_ids = [
            json.loads(call.args[1]["payload"])["userId"]
            for call in mock_stream_client.xadd.await_args_list
        ]
        assert user_ids == [1, 2]

    @pytest.mark.asyncio
    async def test_empty_recipient_list(self, mock_stream_client):
        with patch(
            "app.modules.notifications.producer.create_redis_client",
            return_value=mock_stream_client,
        ):
            assert await notify_users([], "Hello") == 0

        mock_stream_client.xadd.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recipient_without_user_id_is_skipped(self, mock_stream_client):
        with patch(
            "app.modules.notifications.producer.create_redis_client",
            return_value=mock_stream_client,
        ):
            published = await notify_users([{"id": 1}, {"user_id": 2}], "Nouveau cours", "/x")

        assert published == 1
        payload = json.loads(mock_stream_client.xadd.await_args.args[1]["payload"])
        assert payload["userId"] == 2

    @pytest.mark.asyncio
    async def test_overlong_redirect_link_is_not_published(self, mock_stream_client):
        with patch(
            "app.modules.notifications.producer.create_redis_client",
            return_value=mock_stream_client,
        ):
            published = await notify_users([{"user_id": 1}], "Nouveau cours", "/" + "a" * 500)

        assert published == 0
        mock_stream_client.xadd.assert_not_awaited()
