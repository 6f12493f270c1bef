"""Pydantic schemas for request/response validation."""

from waitlist_api.schemas.waitlist import (
    AdminStatsResponse,
    CountResponse,
    DailySignups,
    ExportEntry,
    HealthResponse,
    JoinRequest,
    JoinResponse,
)

__all__ = [
    "AdminStatsResponse",
    "CountResponse",
    "DailySignups",
    "ExportEntry",
    "HealthResponse",
    "JoinRequest",
    "JoinResponse",
]
