"""
Application Errors

Every domain error carries a stable error code and the HTTP status it maps to.
The global handler in main.py renders them as {"error": ..., "message": ...}.
"""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ConfigError(AppError):
    """Raised when a required secret or setting is missing or malformed."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="CONFIGURATION_ERROR", status_code=500)


class ValidationError(AppError):
    """Raised when caller input is rejected."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class FormatError(AppError):
    """Raised when stored ciphertext is not in iv:tag:data form."""

    def __init__(self, message: str = "Invalid encrypted data format."):
        super().__init__(message=message, error_code="INVALID_CIPHERTEXT_FORMAT", status_code=500)


class NotFoundError(AppError):
    """Raised when an entity does not exist."""

    def __init__(self, message: str = "Resource not found.", error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class PermissionDeniedError(AppError):
    """Raised when the authenticated user may not perform an action."""

    def __init__(self, message: str = "You are not allowed to perform this action."):
        super().__init__(message=message, error_code="FORBIDDEN", status_code=403)


class AuthenticationError(AppError):
    """Raised when a credential or an authentication tag fails to verify."""

    def __init__(self, message: str = "Authentication failed."):
        super().__init__(message=message, error_code="AUTHENTICATION_FAILED", status_code=401)


class InvalidTokenError(AppError):
    """Raised when a token is unknown."""

    def __init__(self, message: str = "Invalid token."):
        super().__init__(message=message, error_code="INVALID_TOKEN", status_code=400)


class ExpiredTokenError(AppError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Token has expired."):
        super().__init__(message=message, error_code="TOKEN_EXPIRED", status_code=400)


class AlreadyUsedError(AppError):
    """Raised when a single-use token is presented a second time."""

    def __init__(self, message: str = "Token has already been used."):
        super().__init__(message=message, error_code="TOKEN_ALREADY_USED", status_code=400)


class TransportError(AppError):
    """Raised when the mail transport or the broker cannot be reached."""

    def __init__(self, message: str = "Delivery service unavailable."):
        super().__init__(message=message, error_code="TRANSPORT_ERROR", status_code=503)


# Token failures are reported to clients as a single generic error
TOKEN_ERRORS = (InvalidTokenError, ExpiredTokenError, AlreadyUsedError)


__all__ = [
    "AppError",
    "ConfigError",
    "ValidationError",
    "FormatError",
    "NotFoundError",
    "PermissionDeniedError",
    "AuthenticationError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "AlreadyUsedError",
    "TransportError",
    "TOKEN_ERRORS",
]
