"""
Request-field validators shared by the route handlers.
"""

from __future__ import annotations

import re
from typing import Optional

from api.errors import ValidationError

# local@domain.tld: no whitespace, a single "@", a dot in the domain
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def require_fields(message: str, *values: Optional[str]) -> None:
    """Raise ``ValidationError(message)`` if any value is missing or blank."""
    for value in values:
        if value is None or not str(value).strip():
            raise ValidationError(message)


def require_present(message: str, *values: Optional[str]) -> None:
    """Like ``require_fields`` but only rejects missing or empty values, not blank ones."""
    for value in values:
        if not value:
            raise ValidationError(message)


def validate_signup_fields(username: Optional[str], email: Optional[str], password: Optional[str]) -> None:
    require_fields("All fields are required", username, email)
    require_present("All fields are required", password)
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
