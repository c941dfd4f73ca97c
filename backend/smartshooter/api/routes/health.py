"""Health & Readiness Checks.

Invariants:
    - GET /health/ answers 200 while the process is up and reports how many
      editors are held in memory (they are lost on restart)
    - GET /health/ready answers 503 when the database is unreachable
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import smartshooter.infrastructure.database as database
from smartshooter.api.routes import editors

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {
        "status": "healthy",
        "service": "smartshooter-api",
        "open_editors": len(editors._editors),
    }


@router.get("/ready")
async def readiness_check():
    """Readiness — the DB answers SELECT 1."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
