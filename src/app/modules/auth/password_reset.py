"""
Password Reset Tokens

Reset tokens live in a process-local store:

    ISSUED -> REDEEMED   (redeem, mark_used)
    ISSUED -> EXPIRED    (validate after expiry evicts the entry)

Both end states are terminal. The store does not survive a restart and is not
shared between instances; a multi-instance deployment needs a shared store
with TTL support behind the same interface.

Requesting a new token does not revoke earlier ones for the same user.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.email import send_password_reset_email
from app.core.exceptions import (
    AlreadyUsedError,
    ExpiredTokenError,
    InvalidTokenError,
    NotFoundError,
    TransportError,
)
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


@dataclass
class PasswordResetEntry:
    user_id: int
    email: str
    expires_at: datetime
    used: bool = False


class PasswordResetStore:
    """
    In-memory map of raw reset token -> entry.

    Every method is synchronous, so each runs without interruption on the
    event loop and no locking is needed.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PasswordResetEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, token: str) -> bool:
        return token in self._entries

    def issue(self, user_id: int, email: str, ttl: timedelta) -> str:
        """Mint a new token for a user and return it."""
        token = secrets.token_bytes(TOKEN_BYTES).hex()
        self._entries[token] = PasswordResetEntry(
            user_id=user_id,
            email=email,
            expires_at=datetime.now(UTC) + ttl,
        )
        return token

    def validate(self, token: str) -> tuple[int, str]:
        """
        Check a token without consuming it.

        Returns:
            (user_id, email)

        Raises:
            InvalidTokenError: Unknown token (or already evicted)
            AlreadyUsedError: Token was redeemed
            ExpiredTokenError: Token expired; the entry is evicted
        """
        entry = self._entries.get(token)

        if entry is None:
            raise InvalidTokenError("Invalid password reset token.")

        if entry.used:
            raise AlreadyUsedError("This password reset token has already been used.")

        if datetime.now(UTC) > entry.expires_at:
            del self._entries[token]
            raise ExpiredTokenError("This password reset token has expired.")

        return entry.user_id, entry.email

    def mark_used(self, token: str) -> None:
        """Flag a token as redeemed. Unknown tokens are ignored."""
        entry = self._entries.get(token)
        if entry is not None:
            entry.used = True

    def redeem(self, token: str) -> tuple[int, str]:
        """
        Validate a token and flag it as redeemed in one step.

        There is no await between the check and the flag, so two requests
        replaying the same token cannot both redeem it.

        Raises:
            Same as validate()
        """
        user_id, email = self.validate(token)
        self._entries[token].used = True
        return user_id, email

    def clean_expired(self) -> int:
        """Evict expired entries and return how many were removed."""
        now = datetime.now(UTC)
        expired = [token for token, entry in self._entries.items() if entry.expires_at < now]
        for token in expired:
            del self._entries[token]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()


# Process-wide store
reset_token_store = PasswordResetStore()


async def request_password_reset(db: AsyncSession, email: str) -> None:
    """
    Issue a reset token for ``email`` and email it to the user.

    Raises:
        NotFoundError: No account has this email
        TransportError: The email could not be sent
    """
    user = await UserRepository.get_by_email(db, email)
    if user is None:
        raise NotFoundError("No account found for this email.", error_code="USER_NOT_FOUND")

    token = reset_token_store.issue(
        user_id=user.id,
        email=user.email,
        ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
    )

    sent = await send_password_reset_email(user.email, user.first_name, token)
    if not sent:
        logger.error(f"Failed to send password reset email for user {user.id}")
        raise TransportError("Unable to send the password reset email.")

    logger.info(f"Password reset token issued for user {user.id}")


def validate_reset_token(token: str) -> tuple[int, str]:
    """Validate a reset token against the shared store."""
    return reset_token_store.validate(token)


def mark_token_as_used(token: str) -> None:
    reset_token_store.mark_used(token)


def redeem_reset_token(token: str) -> tuple[int, str]:
    """Validate and consume a reset token from the shared store."""
    return reset_token_store.redeem(token)


def clean_expired_tokens() -> int:
    removed = reset_token_store.clean_expired()
    if removed:
        logger.info(f"Removed {removed} expired password reset tokens")
    return removed
