"""Middleware modules for the FastAPI application."""

from waitlist_api.middleware.rate_limit import get_client_ip
from waitlist_api.middleware.request_context import RequestContextMiddleware
from waitlist_api.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "get_client_ip",
    "RequestContextMiddleware",
    "SecurityHeadersMiddleware",
]
