"""Shared validation utilities"""

import re
import uuid
from typing import Optional

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    if not re.match(EMAIL_PATTERN, email):
        raise ValueError("Invalid email format")

    return email


def normalize_options(options: Optional[list[str]]) -> list[str]:
    """
    Clean a choice list: strip whitespace, drop blanks and duplicates.
    Order is preserved.
    """
    cleaned: list[str] = []
    for option in options or []:
        value = option.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned
