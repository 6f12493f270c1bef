"""Validation and duplicate gate for waitlist joins."""

import logging

from sqlalchemy.orm import Session

from waitlist_api.errors import ConflictError, ValidationError
from waitlist_api.services.waitlist_repository import find_by_email_hash
from waitlist_api.validators import hash_email, is_valid_email

logger = logging.getLogger(__name__)


def validate_and_admit(db: Session, email, consent) -> str:
    """
    Check a join request before anything is written.

    The duplicate lookup here is advisory: two racing requests can both pass
    it, and the unique index in ``insert_entry`` settles which one wins.

    Args:
        db: Database session (read only)
        email: Raw email from the request body; surrounding whitespace fails
            the format check rather than being trimmed
        consent: Raw consent value; only the boolean ``True`` is accepted

    Returns:
        The email hash to store with the new entry

    Raises:
        ValidationError: Missing fields, malformed email or non-literal consent
        ConflictError: The email is already registered
    """
    if not email or not isinstance(email, str) or not email.strip() or not consent:
        raise ValidationError("Email and consent are required")

    if not is_valid_email(email):
        raise ValidationError("Invalid email format")

    if consent is not True:
        raise ValidationError("Consent must be explicitly given")

    email_hash = hash_email(email)
    if find_by_email_hash(db, email_hash) is not None:
        logger.info(
            "Duplicate signup",
            extra={"event": "waitlist.duplicate", "email_hash": email_hash[:8]},
        )
        raise ConflictError()

    return email_hash
