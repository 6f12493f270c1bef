"""Public waitlist endpoints: join and count."""

import logging

from fastapi import APIRouter, Depends, Request

from waitlist_api.database import DbSession
from waitlist_api.dependencies import enforce_join_rate_limit
from waitlist_api.models import WaitlistEntry, utc_now
from waitlist_api.schemas import CountResponse, JoinRequest, JoinResponse
from waitlist_api.services import waitlist_repository
from waitlist_api.services.signup_gate import validate_and_admit
from waitlist_api.validators import sanitize_input

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/count", response_model=CountResponse)
async def get_waitlist_count(db: DbSession) -> CountResponse:
    """Number of people on the waitlist."""
    return CountResponse(count=waitlist_repository.count_entries(db))


@router.post("/join", response_model=JoinResponse, status_code=201)
async def join_waitlist(
    data: JoinRequest,
    request: Request,
    db: DbSession,
    client_ip: str = Depends(enforce_join_rate_limit),
) -> JoinResponse:
    """Add an email to the waitlist."""
    email_hash = validate_and_admit(db, data.email, data.consent)

    now = utc_now()
    entry = WaitlistEntry(
        email_hash=email_hash,
        email=data.email,
        gamertag=sanitize_input(data.gamertag) or None,
        primary_game=sanitize_input(data.primary_game) or None,
        ip_address=client_ip[:45] or None,
        user_agent=request.headers.get("User-Agent") or None,
        referrer=request.headers.get("Referer") or None,
        consent_given=True,
        consent_timestamp=now,
        created_at=now,
    )
    entry_id = waitlist_repository.insert_entry(db, entry)

    logger.info(
        f"New waitlist signup: {email_hash[:8]}...",
        extra={"event": "waitlist.joined", "email_hash": email_hash[:8], "entry_id": entry_id},
    )

    return JoinResponse(id=entry_id, timestamp=now)
