"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from waitlist_api.api import api_router
from waitlist_api.config import get_settings
from waitlist_api.database import init_db
from waitlist_api.errors import RateLimited, WaitlistError
from waitlist_api.logging_config import configure_logging
from waitlist_api.middleware import RequestContextMiddleware, SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application lifecycle events."""
    configure_logging(debug=settings.debug)
    logger.info(f"Starting {settings.app_name} on port {settings.port}")
    init_db()
    logger.info("Database initialized, table \"waitlist\" is ready")
    yield
    logger.info(f"Shutting down {settings.app_name}")


async def waitlist_error_handler(request: Request, exc: WaitlistError) -> JSONResponse:
    """Render taxonomy errors as ``{"error": ...}`` with their status code."""
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies are client errors like any other invalid input."""
    logger.debug(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"event": "http.unhandled_error"},
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WaitlistError, waitlist_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def create_app(lifespan=lifespan) -> FastAPI:
    """Build the application. Tests pass a no-op lifespan."""
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        description="Waitlist signup service for the CoachGG landing page",
        lifespan=lifespan,
    )

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


def run() -> None:
    """Run the service with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "waitlist_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
