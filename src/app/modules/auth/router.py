"""
Authentication Router

Endpoints:
- POST /auth/login - Exchange credentials for JWT tokens
- POST /auth/forgot-password - Email a password reset link
- POST /auth/reset-password - Redeem a reset token
- POST /auth/activate - Redeem an activation token and set the password
- POST /auth/activation/resend - Email a new activation link
- POST /auth/users/{user_id}/send-activation - Admin: email an activation link

Token failures (unknown, expired, already used) are reported with a single
generic error so callers cannot tell token states apart. Forgot-password and
activation resend always answer with the same message whether or not the
account exists.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, get_current_admin
from app.core.database import get_db
from app.core.exceptions import TOKEN_ERRORS, AppError, NotFoundError
from app.core.rate_limit import rate_limit
from app.core.security import create_access_token, create_refresh_token
from app.modules.auth import service
from app.modules.auth.password_reset import request_password_reset
from app.modules.auth.schemas import (
    ActivateAccountRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResendActivationRequest,
    ResetPasswordRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account exists for this email, a reset link has been sent."
RESEND_ACTIVATION_MESSAGE = (
    "If an inactive account exists for this email, a new activation link has been sent."
)


def _http_error(e: AppError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


def _token_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": "TOKEN_INVALID_OR_EXPIRED",
            "message": "This link is invalid or has expired.",
        },
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(rate_limit("login", limit=10, window_seconds=60))],
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate user and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account not activated
    """
    try:
        user = await service.authenticate(db, credentials.email, credentials.password)
    except AppError as e:
        raise _http_error(e) from e

    additional_claims = {
        "email": user.email,
        "role": user.role.value,
        "name": user.full_name,
    }

    access_token = create_access_token(
        subject=str(user.id),
        additional_claims=additional_claims,
    )
    refresh_token = create_refresh_token(subject=str(user.id))

    logger.info(f"User logged in: {user.id} (role: {user.role.value})")

    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=UserResponse(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            is_account_active=user.is_account_active,
            created_at=user.created_at,
        ),
    )


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("forgot_password", limit=5, window_seconds=300))],
)
async def forgot_password(
    data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Email a reset link. The response never reveals whether the account exists."""
    try:
        await request_password_reset(db, data.email)
    except NotFoundError:
        logger.info("Password reset requested for unknown email")
    except AppError as e:
        raise _http_error(e) from e

    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.reset_password(db, data.token, data.new_password)
    except TOKEN_ERRORS as e:
        logger.info(f"Rejected password reset token: {e.error_code}")
        raise _token_error() from e
    except AppError as e:
        raise _http_error(e) from e

    return MessageResponse(message="Your password has been reset.")


@router.post("/activate", response_model=MessageResponse)
async def activate(
    data: ActivateAccountRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.activate_account(db, data.token, data.password)
    except TOKEN_ERRORS as e:
        logger.info(f"Rejected activation token: {e.error_code}")
        raise _token_error() from e
    except AppError as e:
        raise _http_error(e) from e

    return MessageResponse(message="Your account has been activated. You can now log in.")


@router.post(
    "/activation/resend",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("activation_resend", limit=3, window_seconds=300))],
)
async def resend_activation(
    data: ResendActivationRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.resend_activation(db, data.email)
    except AppError as e:
        raise _http_error(e) from e

    return MessageResponse(message=RESEND_ACTIVATION_MESSAGE)


@router.post("/users/{user_id}/send-activation", response_model=MessageResponse)
async def send_activation(
    user_id: int,
    admin: AuthenticatedUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Admin: (re)send the activation email for an inactive account."""
    try:
        user = await service.send_activation_email(db, user_id)
    except AppError as e:
        raise _http_error(e) from e

    logger.info(f"Admin {admin.id} sent activation email to user {user.id}")
    return MessageResponse(message=f"Activation email sent to {user.email}.")
