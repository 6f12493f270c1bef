"""Shared dependencies for FastAPI routes."""

import hmac
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request

from waitlist_api.config import get_settings
from waitlist_api.errors import RateLimited, Unauthorized
from waitlist_api.middleware.rate_limit import get_client_ip
from waitlist_api.services.rate_limiter import (
    FixedWindowRateLimiter,
    InMemoryRateLimitStore,
)


@lru_cache
def get_rate_limiter() -> FixedWindowRateLimiter:
    """Process-wide join rate limiter configured from settings."""
    settings = get_settings()
    return FixedWindowRateLimiter(
        store=InMemoryRateLimitStore(),
        max_requests=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window_seconds,
        cleanup_interval_seconds=settings.rate_limit_cleanup_interval_seconds,
    )


def enforce_join_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> str:
    """
    Admit the request through the rate limiter or raise RateLimited.

    Returns:
        The client IP used as the rate limit key
    """
    client_ip = get_client_ip(request)
    decision = limiter.admit(client_ip)
    if not decision.allowed:
        raise RateLimited(retry_after=decision.retry_after)
    return client_ip


def require_admin(password: Optional[str] = None) -> None:
    """Check the ``password`` query parameter against ADMIN_PASSWORD."""
    expected = get_settings().admin_password
    if not expected or password is None:
        raise Unauthorized()
    if not hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
        raise Unauthorized()
