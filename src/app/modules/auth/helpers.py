"""
Auth Shared Helpers

Password policy shared by account activation and password reset.
"""

import re

from app.core.exceptions import ValidationError

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = "@$!%*?&._-"

_PASSWORD_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[a-z]"), "one lowercase letter"),
    (re.compile(r"[A-Z]"), "one uppercase letter"),
    (re.compile(r"\d"), "one digit"),
    (re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARS)}]"), "one special character"),
]


def password_problems(password: str) -> list[str]:
    """Return the list of unmet password requirements (empty when valid)."""
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(f"at least {PASSWORD_MIN_LENGTH} characters")
    for pattern, label in _PASSWORD_RULES:
        if not pattern.search(password):
            problems.append(label)
    return problems


def validate_password(password: str) -> None:
    """
    Enforce the password policy.

    Raises:
        ValidationError: WEAK_PASSWORD listing the unmet requirements
    """
    problems = password_problems(password)
    if problems:
        raise ValidationError(
            "Password must contain " + ", ".join(problems) + f" (special: {PASSWORD_SPECIAL_CHARS}).",
            error_code="WEAK_PASSWORD",
        )
