"""
Auth Service

Business logic for account activation, password reset and login.

Activation flow:
1. An admin (or the public resend endpoint) issues an activation token
2. The raw token is emailed, only its hash is stored on the user
3. The user redeems the token and chooses a password
4. The account becomes active and a welcome notification is published

Password reset flow:
1. request_password_reset (see password_reset.py) emails a reset token
2. reset_password validates it, stores the new hash and marks it used
"""

import logging
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.email import send_activation_email as send_student_activation_email
from app.core.email import send_teacher_activation_email
from app.core.exceptions import (
    AuthenticationError,
    ExpiredTokenError,
    InvalidTokenError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
    ValidationError,
)
from app.core.security import hash_password, verify_password
from app.modules.auth.helpers import validate_password
from app.modules.auth.password_reset import redeem_reset_token, validate_reset_token
from app.modules.auth.tokens import (
    generate_activation_token,
    hash_token,
    verify_activation_token,
)
from app.modules.notifications.producer import send_notification_event
from app.modules.notifications.schemas import NotificationEvent
from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

WELCOME_MESSAGES = {
    UserRole.STUDENT: (
        "Votre inscription à la formation a bien été validée ! Bienvenue sur la plateforme.",
        "/etudiant/modules",
    ),
    UserRole.TEACHER: (
        "Votre compte formateur est activé. Bienvenue sur la plateforme.",
        "/formateur/cours",
    ),
}


async def _issue_activation(db: AsyncSession, user: User) -> None:
    """Store a fresh activation token for ``user`` and email the raw value."""
    activation = generate_activation_token(settings.activation_token_ttl_hours)

    await UserRepository.set_activation_token(
        db,
        user,
        token_hash=activation.hash,
        expires_at=activation.expires_at,
        sent_at=datetime.now(UTC),
    )

    if user.role == UserRole.TEACHER:
        sent = await send_teacher_activation_email(user.email, user.first_name, activation.token)
    else:
        sent = await send_student_activation_email(user.email, user.first_name, activation.token)

    if not sent:
        logger.error(f"Failed to send activation email to user {user.id}")
        raise TransportError("Unable to send the activation email.")

    logger.info(f"Activation email sent to user {user.id}")


async def send_activation_email(db: AsyncSession, user_id: int) -> User:
    """
    Issue an activation token for an inactive account (admin action).

    Raises:
        NotFoundError: Unknown user
        ValidationError: ALREADY_ACTIVE
        TransportError: The email could not be sent
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.", error_code="USER_NOT_FOUND")

    if user.is_account_active:
        raise ValidationError("This account is already active.", error_code="ALREADY_ACTIVE")

    await _issue_activation(db, user)
    return user


async def resend_activation(db: AsyncSession, email: str) -> None:
    """
    Resend an activation link on the user's request.

    Unknown or already active accounts are ignored so the caller cannot tell
    whether an account exists.

    Raises:
        TransportError: The email could not be sent
    """
    user = await UserRepository.get_by_email(db, email)

    if user is None or user.is_account_active:
        logger.info("Activation resend requested for unknown or active account, ignoring")
        return

    await _issue_activation(db, user)


async def _publish_welcome(user: User) -> None:
    welcome = WELCOME_MESSAGES.get(user.role)
    if welcome is None:
        return

    message, redirect_link = welcome
    published = await send_notification_event(
        NotificationEvent(user_id=user.id, message=message, redirect_link=redirect_link)
    )
    if not published:
        logger.warning(f"Welcome notification for user {user.id} was not published")


async def activate_account(db: AsyncSession, token: str, new_password: str) -> User:
    """
    Redeem an activation token and set the account password.

    Raises:
        InvalidTokenError: No account holds this token
        ValidationError: ALREADY_ACTIVE or WEAK_PASSWORD
        ExpiredTokenError: The token has expired
    """
    user = await UserRepository.get_by_activation_hash(db, hash_token(token))
    if user is None:
        raise InvalidTokenError("Invalid activation token.")

    if user.is_account_active:
        raise ValidationError("This account is already active.", error_code="ALREADY_ACTIVE")

    if not verify_activation_token(token, user.activation_token, user.activation_expires_at):
        raise ExpiredTokenError("This activation token has expired.")

    validate_password(new_password)

    await UserRepository.activate(db, user, hash_password(new_password))
    logger.info(f"Account activated: user {user.id} ({user.role.value})")

    await _publish_welcome(user)
    return user


async def reset_password(db: AsyncSession, token: str, new_password: str) -> None:
    """
    Redeem a password reset token.

    Raises:
        InvalidTokenError, ExpiredTokenError, AlreadyUsedError: Token rejected
        ValidationError: WEAK_PASSWORD
        NotFoundError: The account was deleted after the token was issued
    """
    validate_reset_token(token)
    validate_password(new_password)

    # Claim the token before the first await so a replayed request is rejected
    user_id, _email = redeem_reset_token(token)

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found.", error_code="USER_NOT_FOUND")

    await UserRepository.update_password(db, user, hash_password(new_password))

    logger.info(f"Password reset for user {user.id}")


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Check login credentials.

    Raises:
        AuthenticationError: Unknown email or wrong password
        PermissionDeniedError: Account not activated yet
    """
    user = await UserRepository.get_by_email(db, email)

    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise AuthenticationError("Invalid email or password.")

    if not user.is_account_active:
        raise PermissionDeniedError("Your account has not been activated yet.")

    return user
