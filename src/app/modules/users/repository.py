"""
User Repository

Database operations for user management.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        first_name: str,
        last_name: str,
        role: UserRole,
        password_hash: str | None = None,
        phone: str | None = None,
        is_account_active: bool = False,
    ) -> User:
        """Create a new user record (flushed, not committed)."""
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            password_hash=password_hash,
            phone=phone,
            is_account_active=is_account_active,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        """Get a user by ID, or None if not found."""
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Get a user by email address, or None if not found."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_activation_hash(db: AsyncSession, token_hash: str) -> User | None:
        """Get the user holding an activation token hash."""
        result = await db.execute(select(User).where(User.activation_token == token_hash))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_role(db: AsyncSession, role: UserRole) -> list[User]:
        """List users holding a role, ordered by id."""
        result = await db.execute(select(User).where(User.role == role).order_by(User.id))
        return list(result.scalars().all())

    @staticmethod
    async def set_activation_token(
        db: AsyncSession,
        user: User,
        *,
        token_hash: str,
        expires_at: datetime,
        sent_at: datetime,
    ) -> None:
        """Store a new activation token hash, replacing any previous one."""
        user.activation_token = token_hash
        user.activation_expires_at = expires_at
        user.last_resend_at = sent_at
        await db.commit()

    @staticmethod
    async def activate(db: AsyncSession, user: User, password_hash: str) -> None:
        """Set the password, activate the account and clear the activation token."""
        user.password_hash = password_hash
        user.is_account_active = True
        user.activation_token = None
        user.activation_expires_at = None
        await db.commit()

    @staticmethod
    async def update_password(db: AsyncSession, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        await db.commit()
