"""
Fixtures for notification tests.
"""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.modules.notifications.models import Notification


@pytest.fixture
def mock_stream_client():
    """A Redis client double covering the stream commands we use."""
    client = MagicMock()
    client.xgroup_create = AsyncMock(return_value=True)
    client.xadd = AsyncMock(return_value="1700000000000-0")
    client.xreadgroup = AsyncMock(return_value=[])
    client.xack = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def session_factory(mock_db):
    """Stand-in for async_session_maker yielding mock_db."""

    @asynccontextmanager
    async def _factory():
        yield mock_db

    return _factory


@pytest.fixture
def make_notification():
    def _make(**overrides) -> Notification:
        values = {
            "id": 1,
            "user_id": 1,
            "message": "Nouveau cours disponible",
            "redirect_link": "/etudiant/modules",
            "read": False,
            "created_at": datetime.now(UTC),
        }
        values.update(overrides)
        return Notification(**values)

    return _make
