"""Waitlist request and response schemas.

Field names on the wire are camelCase to match the landing page's JavaScript.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JoinRequest(BaseModel):
    """Join request body.

    Email and consent are deliberately loose here; the signup gate applies
    the real rules so every rejection maps to a 400 with a clear message.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    gamertag: Optional[str] = None
    primary_game: Optional[str] = Field(default=None, alias="primaryGame")
    consent: Any = None


class JoinResponse(BaseModel):
    """Successful join."""

    success: bool = True
    message: str = "Successfully joined waitlist"
    id: str
    timestamp: datetime


class CountResponse(BaseModel):
    count: int


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    database: str


class ExportEntry(BaseModel):
    """One row of the admin export."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    email: str
    gamertag: Optional[str] = None
    primary_game: Optional[str] = Field(default=None, serialization_alias="primaryGame")
    created_at: datetime = Field(serialization_alias="createdAt")
    referrer: Optional[str] = None


class DailySignups(BaseModel):
    day: str
    count: int


class AdminStatsResponse(BaseModel):
    """Aggregate statistics for the admin dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    total_signups: int = Field(serialization_alias="totalSignups")
    signups_today: int = Field(serialization_alias="signupsToday")
    game_breakdown: dict[str, int] = Field(serialization_alias="gameBreakdown")
    referrer_breakdown: dict[str, int] = Field(serialization_alias="referrerBreakdown")
    signups_by_day: List[DailySignups] = Field(serialization_alias="signupsByDay")
