"""Input validation helpers shared by the service and the signup client.

This module only uses the standard library so the client can import the exact
same email pattern without pulling in the server stack.
"""

import hashlib
import re

# Permissive, not RFC 5322: something@something.something without whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_ANGLE_BRACKETS = re.compile(r"[<>]")


def is_valid_email(email: str) -> bool:
    """Return True if the email matches the accepted pattern."""
    if not isinstance(email, str):
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def hash_email(email: str) -> str:
    """Hex SHA-256 of the lower-cased email, used as the duplicate key."""
    return hashlib.sha256(email.lower().encode("utf-8")).hexdigest()


def sanitize_input(value, max_length: int = 255) -> str:
    """
    Strip angle brackets and surrounding whitespace from free text.

    Non-string values become an empty string.

    Args:
        value: Raw value from the request body
        max_length: Maximum length kept after cleaning

    Returns:
        Cleaned string, possibly empty
    """
    if not isinstance(value, str):
        return ""
    return _ANGLE_BRACKETS.sub("", value.strip()).strip()[:max_length]


def mask_email(email: str) -> str:
    """Mask an email for display in logs, e.g. ``jo***@example.com``."""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:2]}***@{domain}"
