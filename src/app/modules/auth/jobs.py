"""
Auth Background Jobs

Periodic eviction of expired password reset tokens. Validation already
rejects expired entries, so this only bounds the memory held by the store.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.scheduler import register_job
from app.modules.auth.password_reset import clean_expired_tokens

logger = logging.getLogger(__name__)

JOB_ID_CLEAN_RESET_TOKENS = "auth_clean_expired_reset_tokens"


async def clean_expired_reset_tokens() -> dict[str, Any]:
    """Evict expired reset tokens and report how many were removed."""
    executed_at = datetime.now(UTC)
    removed = clean_expired_tokens()
    return {"executed_at": executed_at.isoformat(), "removed": removed}


def register_auth_jobs() -> None:
    """Register auth jobs with the scheduler. Call before start_scheduler()."""
    minutes = settings.reset_token_cleanup_minutes
    register_job(
        job_id=JOB_ID_CLEAN_RESET_TOKENS,
        func=clean_expired_reset_tokens,
        trigger=IntervalTrigger(minutes=minutes),
    )
    logger.info(f"Registered job: {JOB_ID_CLEAN_RESET_TOKENS} (interval: {minutes} minutes)")
