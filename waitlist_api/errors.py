"""Error taxonomy for the waitlist service.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Storage errors keep their detail in the logs only.
"""

from typing import Optional


class WaitlistError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(WaitlistError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(WaitlistError):
    """The email is already on the waitlist."""

    status_code = 409
    default_message = "Email already registered"


class RateLimited(WaitlistError):
    """Too many join attempts from one client within the current window."""

    status_code = 429
    default_message = "Too many requests. Please try again later."

    def __init__(self, retry_after: int, message: Optional[str] = None):
        self.retry_after = retry_after
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message, "retryAfter": self.retry_after}


class Unauthorized(WaitlistError):
    """Admin shared secret missing or wrong."""

    status_code = 401
    default_message = "Unauthorized"


class StorageError(WaitlistError):
    """Backend storage failed. The message never includes driver detail."""

    status_code = 500
    default_message = "Internal server error"
