"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.

Each request is authenticated once by get_current_user, which validates the
JWT and builds an immutable AuthenticatedUser. Handlers receive that value
through Depends() and never mutate it or the request state.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import decode_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)


@dataclass(frozen=True)
class AuthenticatedUser:
    """
    Identity of the caller, populated from JWT claims.

    Attributes:
        id: User's integer identifier
        email: User's email address
        role: One of 'student', 'teacher', 'admin'
        name: Display name (optional)
    """

    id: int
    email: str
    role: str
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __str__(self) -> str:
        return f"AuthenticatedUser(id={self.id}, email={self.email}, role={self.role})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> AuthenticatedUser:
    """
    Validate a JWT and extract the caller's identity.

    Raises:
        HTTPException 401: If the token is invalid, expired, of the wrong type
            or missing required claims
    """
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id = int(payload["sub"])
        return AuthenticatedUser(
            id=user_id,
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            name=payload.get("name"),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedUser:
    """
    FastAPI dependency that validates the bearer token.

    Usage:
        @router.get("/me")
        async def me(user: AuthenticatedUser = Depends(get_current_user)):
            ...
    """
    user = _user_from_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.role})")
    return user


def require_roles(*roles: str) -> Callable[..., Awaitable[AuthenticatedUser]]:
    """
    Build a dependency that only admits callers holding one of ``roles``.

    Usage:
        @router.get("/admin-only")
        async def endpoint(admin: AuthenticatedUser = Depends(require_roles("admin"))):
            ...
    """

    async def dependency(
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        if user.role not in roles:
            logger.warning(
                f"Access denied: user {user.id} has role '{user.role}', expected one of {roles}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "FORBIDDEN",
                    "message": "You are not allowed to access this resource.",
                },
            )
        return user

    return dependency


get_current_admin = require_roles("admin")
get_current_teacher = require_roles("teacher")


__all__ = [
    "AuthenticatedUser",
    "get_current_user",
    "require_roles",
    "get_current_admin",
    "get_current_teacher",
]
