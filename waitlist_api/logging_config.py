"""Centralized JSON logging configuration for the waitlist service."""

import json
import logging
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record):
        # Import here to avoid circular imports at module load time
        from waitlist_api.middleware.request_context import client_ip_var, request_id_var

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "service": "waitlist-api",
            "logger": record.name,
            "message": record.getMessage(),
        }

        req_id = request_id_var.get()
        if req_id:
            log_entry["request_id"] = req_id
        client_ip = client_ip_var.get()
        if client_ip:
            log_entry["client_ip"] = client_ip

        for field in (
            "request_id", "event", "email_hash", "entry_id", "client_ip",
            "duration_ms", "status_code", "method", "path", "retry_after",
            "error",
        ):
            val = getattr(record, field, None)
            if val is not None:
                log_entry[field] = val

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def configure_logging(debug: bool = False):
    """Set up JSON-formatted logging for the entire application.

    Args:
        debug: If True, set log level to DEBUG; otherwise INFO.
    """
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # uvicorn's access log duplicates RequestContextMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
