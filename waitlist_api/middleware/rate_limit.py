"""Client key extraction for rate limiting.

The join endpoint is limited per client IP. Behind a reverse proxy the socket
peer is the proxy itself, so the first ``X-Forwarded-For`` hop can be trusted
instead when ``TRUST_FORWARDED_FOR`` is enabled.
"""

import logging

from fastapi import Request
from slowapi.util import get_remote_address

from waitlist_api.config import get_settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Get the rate limit key for a request.

    Args:
        request: FastAPI request object

    Returns:
        Client IP address, or "127.0.0.1" when none can be determined
    """
    if get_settings().trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    return get_remote_address(request)
