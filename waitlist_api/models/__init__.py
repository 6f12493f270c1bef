"""Database models."""

from waitlist_api.models.waitlist_entry import WaitlistEntry, utc_now

__all__ = ["WaitlistEntry", "utc_now"]
