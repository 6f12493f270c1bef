"""Health check endpoint used by the signup client's capability probe."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from waitlist_api.database import DbSession
from waitlist_api.errors import StorageError
from waitlist_api.schemas import HealthResponse
from waitlist_api.services import waitlist_repository

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(db: DbSession):
    """Report whether the database is reachable (200) or not (500)."""
    timestamp = datetime.now(timezone.utc)
    try:
        waitlist_repository.ping(db)
    except StorageError:
        return JSONResponse(
            status_code=500,
            content={
                "status": "Error",
                "timestamp": timestamp.isoformat(),
                "database": "Disconnected",
            },
        )

    return HealthResponse(status="OK", timestamp=timestamp, database="Connected")
