"""
Core infrastructure shared by the Ruche Academie modules.

- config: environment settings
- database / redis: connections and session helpers, stream group setup
- security / crypto: password and token helpers, AES-GCM for bank fields
- exceptions: domain errors translated to HTTP responses by the routers
"""

from app.core.config import get_settings, settings
from app.core.crypto import decrypt, encrypt, mask_bic, mask_iban
from app.core.database import Base, async_session_maker, close_db, get_db, init_db
from app.core.exceptions import TOKEN_ERRORS, AppError
from app.core.redis import (
    close_redis,
    create_redis_client,
    ensure_consumer_group,
    get_redis,
    init_redis,
)
from app.core.security import hash_password, verify_password

__all__ = [
    "settings",
    "get_settings",
    "Base",
    "async_session_maker",
    "get_db",
    "init_db",
    "close_db",
    "init_redis",
    "get_redis",
    "close_redis",
    "create_redis_client",
    "ensure_consumer_group",
    "hash_password",
    "verify_password",
    "encrypt",
    "decrypt",
    "mask_iban",
    "mask_bic",
    "AppError",
    "TOKEN_ERRORS",
]
