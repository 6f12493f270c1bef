"""Test configuration and fixtures for pytest.

Provides fixtures for:
- In-memory SQLite database
- FastAPI test client with database and rate limiter overrides
- A controllable clock for rate limiter tests
- Signup client configuration pointing at temp paths
"""

import os

# Must be set before waitlist_api.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_PASSWORD"] = "test-admin-secret"
os.environ["DEBUG"] = "true"

from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from waitlist_api.database import Base, get_db
from waitlist_api.dependencies import get_rate_limiter
from waitlist_api.models import WaitlistEntry, utc_now
from waitlist_api.services.rate_limiter import FixedWindowRateLimiter, InMemoryRateLimitStore
from waitlist_api.validators import hash_email
from waitlist_client.config import APIConfig, ClientConfig, LocalStoreConfig

TEST_DATABASE_URL = "sqlite:///:memory:"

ADMIN_PASSWORD = "test-admin-secret"


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock) -> FixedWindowRateLimiter:
    """Fresh join rate limiter with the production limits and a fake clock."""
    return FixedWindowRateLimiter(
        store=InMemoryRateLimitStore(),
        max_requests=5,
        window_seconds=15 * 60,
        clock=clock,
    )


@asynccontextmanager
async def noop_lifespan(app: FastAPI):
    """No-op lifespan for testing - no logging reconfiguration or table creation."""
    yield


@pytest.fixture(scope="function")
def test_app(db: Session, rate_limiter) -> Generator[FastAPI, None, None]:
    """Create test app with database and rate limiter overrides."""
    from waitlist_api.main import create_app

    app = create_app(lifespan=noop_lifespan)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter

    yield app

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def test_client(test_app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(test_app)


def create_entry(
    db: Session,
    email: str,
    primary_game: Optional[str] = None,
    referrer: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> WaitlistEntry:
    """Helper to insert a waitlist entry directly."""
    created_at = created_at or utc_now()
    entry = WaitlistEntry(
        email_hash=hash_email(email),
        email=email,
        primary_game=primary_game,
        referrer=referrer,
        consent_given=True,
        consent_timestamp=created_at,
        created_at=created_at,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@pytest.fixture
def entry_factory(db: Session):
    """Fixture factory for inserting waitlist entries."""

    def _create(email: str, **kwargs) -> WaitlistEntry:
        return create_entry(db, email, **kwargs)

    return _create


@pytest.fixture
def client_config(tmp_path: Path) -> ClientConfig:
    """Signup client configuration with a temp local store and no latency."""
    return ClientConfig(
        api=APIConfig(url="http://test-api.coachgg.local/api", timeout=2.0),
        local=LocalStoreConfig(
            path=str(tmp_path / "waitlist.json"),
            simulated_latency_seconds=0.0,
        ),
    )
