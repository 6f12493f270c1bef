"""Per-request logging context for the waitlist service.

Every request is tagged with a request ID (the caller's ``X-Request-ID`` or a
fresh UUID) and the client IP used as its rate limit key. Both are held in
context variables so that log lines written while the request is handled,
such as a join or a rate limit denial, carry them without threading them
through every call.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from waitlist_api.middleware.rate_limit import get_client_ip

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
client_ip_var: ContextVar[str] = ContextVar("client_ip", default="")

# Caller-supplied request IDs are echoed into logs and headers
MAX_REQUEST_ID_LENGTH = 64

logger = logging.getLogger("waitlist_api.request")


def _request_id(request: Request) -> str:
    incoming = request.headers.get("X-Request-ID", "").strip()
    if incoming and incoming.isprintable():
        return incoming[:MAX_REQUEST_ID_LENGTH]
    return str(uuid.uuid4())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request ID and client IP for the request, then log its outcome."""

    async def dispatch(self, request: Request, call_next):
        req_id = _request_id(request)
        client_ip = get_client_ip(request)
        id_token = request_id_var.set(req_id)
        ip_token = client_ip_var.set(client_ip)

        start = time.monotonic()
        try:
            response = await call_next(request)
            duration_ms = round((time.monotonic() - start) * 1000, 1)

            # Only server errors are logged above INFO
            level = logging.ERROR if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "%s %s %s %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={
                    "event": "http.request",
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
        finally:
            request_id_var.reset(id_token)
            client_ip_var.reset(ip_token)

        response.headers["X-Request-ID"] = req_id
        return response
