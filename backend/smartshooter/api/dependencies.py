"""Route Dependencies — caller identity and repository wiring.

Invariants:
    - Identity comes from the X-User-Id header; missing/blank -> NotAuthenticatedError
      before any handler logic runs
    - One SqlSessionRepository per request, bound to that request's DB session
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from smartshooter.core.domain_types import UserId
from smartshooter.core.errors import NotAuthenticatedError
from smartshooter.infrastructure.database import get_db
from smartshooter.infrastructure.session_repository import SqlSessionRepository


async def require_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> UserId:
    if not x_user_id or not x_user_id.strip():
        raise NotAuthenticatedError()
    return UserId(x_user_id.strip())


async def get_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlSessionRepository:
    return SqlSessionRepository(db)
