"""Structured Logging — JSON formatter, setup, and per-request access log.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (session_id, editor_id, user_id, error_code, ...) surfaced when present
    - JSON format in production, human-readable in development
    - setup_logging is idempotent: re-running it replaces its own handler
    - Every HTTP request produces exactly one access line, even when the
      handler raised

Design Decisions:
    - JSONFormatter on stdlib logging, no extra dependency
    - setup_logging called once on startup via lifespan
    - Access log as a plain "http" middleware function; identity read from the
      raw X-User-Id header since dependencies have not run yet
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import Request

EXTRA_FIELDS = (
    "session_id", "editor_id", "user_id", "error_code",
    "rounds_count", "zone_group", "path", "method", "status_code",
    "duration_ms",
)

_HANDLER_NAME = "smartshooter"

access_logger = logging.getLogger("smartshooter.access")


class JSONFormatter(logging.Formatter):
    """One JSON object per record; non-scalar extras are stringified."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val if isinstance(val, (int, float, bool)) else str(val)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install (or replace) the application's root handler."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        access_logger.info(
            f"{request.method} {request.url.path} {status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "user_id": request.headers.get("X-User-Id"),
            },
        )
