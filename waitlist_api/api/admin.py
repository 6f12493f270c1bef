"""Admin endpoints gated by the shared ADMIN_PASSWORD secret."""

from datetime import datetime, time

from fastapi import APIRouter, Depends

from waitlist_api.database import DbSession
from waitlist_api.dependencies import require_admin
from waitlist_api.models import utc_now
from waitlist_api.schemas import AdminStatsResponse, DailySignups, ExportEntry
from waitlist_api.services import waitlist_repository

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/export", response_model=list[ExportEntry])
async def export_waitlist(db: DbSession):
    """Every signup with contact fields, newest first."""
    return [
        ExportEntry.model_validate(entry)
        for entry in waitlist_repository.export_entries(db)
    ]


@router.get("/stats", response_model=AdminStatsResponse)
async def waitlist_stats(db: DbSession) -> AdminStatsResponse:
    """Totals, breakdowns by game and referrer, and signups per day."""
    today_start = datetime.combine(utc_now().date(), time.min)

    return AdminStatsResponse(
        total_signups=waitlist_repository.count_entries(db),
        signups_today=waitlist_repository.count_since(db, today_start),
        game_breakdown=waitlist_repository.aggregate_by(db, "primary_game"),
        referrer_breakdown=waitlist_repository.aggregate_by(db, "referrer"),
        signups_by_day=[
            DailySignups(day=day, count=count)
            for day, count in waitlist_repository.signups_per_day(db)
        ],
    )
