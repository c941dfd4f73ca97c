"""SmartShooter API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SmartShooterError → structured JSON responses
    - One access log line per request (infrastructure/observability.py)
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event (FastAPI recommended pattern)
    - Three error handler layers live in api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartshooter.api.error_handlers import register_error_handlers
from smartshooter.api.routes import editors, health, sessions, zones
from smartshooter.config import get_settings
from smartshooter.infrastructure.database import init_db
from smartshooter.infrastructure.observability import log_requests, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("SmartShooter API started")
    yield
    await manager.dispose()
    logger.info("SmartShooter API shutting down")


app = FastAPI(
    title="SmartShooter API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

app.include_router(health.router)
app.include_router(zones.router)
app.include_router(sessions.router)
app.include_router(editors.router)

register_error_handlers(app)
