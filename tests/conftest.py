"""
Shared test fixtures.

Environment is set before the application settings are first imported.
"""

import os

os.environ["PYTHON_ENV"] = "test"
os.environ["ENCRYPTION_KEY"] = "0123456789abcdef" * 4
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["RESEND_API_KEY"] = ""
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["NOTIFICATION_CONSUMER_ENABLED"] = "false"

from datetime import UTC, datetime  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from app.core.auth import AuthenticatedUser  # noqa: E402
from app.modules.users.models import User, UserRole  # noqa: E402


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def make_user():
    """Factory for unsaved User instances."""

    def _make(**overrides) -> User:
        values = {
            "id": 1,
            "email": "awa.diallo@example.com",
            "first_name": "Awa",
            "last_name": "Diallo",
            "role": UserRole.STUDENT,
            "is_account_active": False,
            "password_hash": None,
            "phone": None,
            "created_at": datetime.now(UTC),
        }
        values.update(overrides)
        return User(**values)

    return _make


@pytest.fixture
def admin_user() -> AuthenticatedUser:
    return AuthenticatedUser(id=100, email="admin@example.com", role="admin", name="Admin Ruche")


@pytest.fixture
def teacher_user() -> AuthenticatedUser:
    return AuthenticatedUser(id=20, email="prof@example.com", role="teacher", name="Paul Martin")


@pytest.fixture
def student_user() -> AuthenticatedUser:
    return AuthenticatedUser(id=1, email="awa.diallo@example.com", role="student", name="Awa Diallo")
