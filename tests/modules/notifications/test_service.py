"""
Unit tests for the notification read side (service + repository).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.modules.notifications import repository, service
from app.modules.notifications.schemas import NotificationBroadcast, NotificationCreate


class TestRepositoryMarkAsRead:
    @pytest.mark.asyncio
    async def test_mark_as_read_twice(self, mock_db, make_notification):
        """The second call leaves the row read and does not write again."""
        notification = make_notification()

        await repository.mark_as_read(mock_db, notification)
        await repository.mark_as_read(mock_db, notification)

        assert notification.read is True
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_is_unread(self, mock_db):
        notification = await repository.create(
            mock_db, user_id=3, message="Nouveau support de cours"
        )

        assert notification.read is False
        assert notification.redirect_link == "/"
        mock_db.add.assert_called_once_with(notification)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_db):
        mock_db.execute.return_value = MagicMock(rowcount=0)

        assert await repository.delete_by_id(mock_db, 42) is False


class TestMarkAsRead:
    """Tests for service.mark_as_read."""

    @pytest.mark.asyncio
    async def test_owner_marks_as_read(self, mock_db, student_user, make_notification):
        notification = make_notification(user_id=student_user.id)
        mock_db.get.return_value = notification

        result = await service.mark_as_read(mock_db, student_user, notification.id)
        again = await service.mark_as_read(mock_db, student_user, notification.id)

        assert result.read is True
        assert again.read is True

    @pytest.mark.asyncio
    async def test_admin_marks_any(self, mock_db, admin_user, make_notification):
        mock_db.get.return_value = make_notification(user_id=7)

        assert (await service.mark_as_read(mock_db, admin_user, 1)).read is True

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, mock_db, student_user, make_notification):
        mock_db.get.return_value = make_notification(user_id=7)

        with pytest.raises(PermissionDeniedError):
            await service.mark_as_read(mock_db, student_user, 1)

    @pytest.mark.asyncio
    async def test_missing_notification(self, mock_db, student_user):
        mock_db.get.return_value = None

        with pytest.raises(NotFoundError):
            await service.mark_as_read(mock_db, student_user, 1)


class TestListAndCreate:
    @pytest.mark.asyncio
    async def test_list_for_other_user_is_forbidden(self, mock_db, student_user):
        with pytest.raises(PermissionDeniedError):
            await service.list_for_user(mock_db, student_user, 7)

    @pytest.mark.asyncio
    async def test_create_for_unknown_user(self, mock_db):
        with patch("app.modules.notifications.service.UserRepository") as mock_users:
            mock_users.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await service.create_notification(
                    mock_db, NotificationCreate(user_id=999999, message="x")
                )

    @pytest.mark.asyncio
    async def test_create_defaults_redirect_link(self, mock_db, make_user):
        with patch("app.modules.notifications.service.UserRepository") as mock_users:
            mock_users.get_by_id = AsyncMock(return_value=make_user(id=3))

            notification = await service.create_notification(
                mock_db, NotificationCreate(user_id=3, message="Bonjour")
            )

        assert notification.redirect_link == "/"
        assert notification.read is False

    @pytest.mark.asyncio
    async def test_broadcast_deduplicates_recipients(self):
        with patch(
            "app.modules.notifications.service.notify_users",
            new_callable=AsyncMock,
            return_value=2,
        ) as mock_notify:
            published = await service.broadcast(
                NotificationBroadcast(user_ids=[1, 2, 1], message="Salle changée")
            )

        assert published == 2
        recipients = mock_notify.await_args.args[0]
        assert recipients == [{"user_id": 1}, {"user_id": 2}]
