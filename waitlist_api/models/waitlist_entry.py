"""Waitlist entry model: the only durable entity of the service."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from waitlist_api.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the table."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class WaitlistEntry(Base):
    """One signup. Rows are append-only."""

    __tablename__ = "waitlist"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    # sha256(lower(email)); the unique index is what closes the duplicate race
    email_hash: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    gamertag: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    primary_game: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Provenance, best effort
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    consent_given: Mapped[bool] = mapped_column(Boolean, nullable=False)
    consent_timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<WaitlistEntry id={self.id} email_hash={self.email_hash[:8]}>"
