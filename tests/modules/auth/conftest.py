"""
Fixtures for auth tests.
"""

import pytest

from app.core import rate_limit
from app.modules.auth.password_reset import reset_token_store


@pytest.fixture(autouse=True)
def clean_auth_state():
    """Isolate the process-wide reset store and in-memory rate limits."""
    reset_token_store.clear()
    rate_limit._memory_store.clear()
    yield
    reset_token_store.clear()
    rate_limit._memory_store.clear()
