"""
Activation Tokens

The raw token (64 hex characters, 256 bits of entropy) is emailed to the user;
only its SHA-256 hash and expiry are stored on the user row. A fast hash is
sufficient because the token cannot be brute forced at this entropy.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

TOKEN_BYTES = 32
DEFAULT_TTL_HOURS = 48


@dataclass(frozen=True)
class ActivationToken:
    """A freshly minted token. ``token`` leaves the server, ``hash`` is persisted."""

    token: str
    hash: str
    expires_at: datetime


def hash_token(token: str) -> str:
    """Hex-encoded SHA-256 of a token."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_activation_token(ttl_hours: int = DEFAULT_TTL_HOURS) -> ActivationToken:
    """Mint a random activation token valid for ``ttl_hours``."""
    token = secrets.token_bytes(TOKEN_BYTES).hex()
    return ActivationToken(
        token=token,
        hash=hash_token(token),
        expires_at=datetime.now(UTC) + timedelta(hours=ttl_hours),
    )


def verify_activation_token(
    presented_token: str | None,
    stored_hash: str | None,
    stored_expires_at: datetime | None,
) -> bool:
    """
    Check a presented token against the stored hash and expiry.

    Returns True only if the hash matches and the expiry has not passed.
    Never raises.
    """
    if not presented_token or not stored_hash or stored_expires_at is None:
        return False

    if not hmac.compare_digest(hash_token(presented_token), stored_hash):
        return False

    if stored_expires_at.tzinfo is None:
        stored_expires_at = stored_expires_at.replace(tzinfo=UTC)

    return stored_expires_at >= datetime.now(UTC)
