"""Session Repository — SQLAlchemy implementation of the SessionRepository protocol.

Invariants:
    - load() returns only the caller's sessions, newest date first
    - save(None, ...) inserts; save(id, ...) updates and raises ResourceNotFoundError
      when the id is unknown or owned by someone else
    - Rows are converted through session_from_mapping, so malformed stored
      rounds/zones degrade to empty rather than failing the read
    - Legacy zones are never written here; the editor only writes rounds
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartshooter.core.domain_types import SessionId, UserId
from smartshooter.core.errors import ErrorContext, ResourceNotFoundError
from smartshooter.core.round_normalizer import session_from_mapping
from smartshooter.core.session_types import SessionDraft, SessionRecord
from smartshooter.models.practice_session import PracticeSession

logger = logging.getLogger(__name__)


def to_record(row: PracticeSession) -> SessionRecord:
    return session_from_mapping({
        "id": str(row.id),
        "user_id": row.user_id,
        "date": row.date,
        "training_type": row.training_type,
        "zone_group": row.zone_group,
        "notes": row.notes,
        "rounds": row.rounds,
        "zones": row.zones,
    })


class SqlSessionRepository:
    """Persists practice sessions in the practice_sessions table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _get_row(self, session_id: SessionId) -> PracticeSession | None:
        result = await self._db.execute(
            select(PracticeSession).where(PracticeSession.id == session_id),
        )
        return result.scalar_one_or_none()

    async def load(self, user_id: UserId) -> list[SessionRecord]:
        result = await self._db.execute(
            select(PracticeSession)
            .where(PracticeSession.user_id == user_id)
            .order_by(
                PracticeSession.date.desc(), PracticeSession.created_at.desc(),
            ),
        )
        return [to_record(row) for row in result.scalars().all()]

    async def get(self, session_id: SessionId) -> SessionRecord | None:
        row = await self._get_row(session_id)
        return to_record(row) if row else None

    async def save(
        self, session_id: SessionId | None, user_id: UserId, draft: SessionDraft,
    ) -> SessionId:
        if session_id is None:
            row = PracticeSession(user_id=user_id)
            self._db.add(row)
        else:
            row = await self._get_row(session_id)
            if row is None or row.user_id != user_id:
                raise ResourceNotFoundError(
                    "Session", str(session_id),
                    ErrorContext(session_id=str(session_id)),
                )

        row.date = draft.date
        row.training_type = draft.training_type
        row.zone_group = draft.zone_group
        row.notes = draft.notes
        row.rounds = draft.rounds_payload()
        await self._db.commit()
        await self._db.refresh(row)
        logger.info(
            "Session saved",
            extra={
                "session_id": str(row.id), "user_id": user_id,
                "rounds_count": len(draft.rounds),
            },
        )
        return SessionId(row.id)

    async def delete(self, session_id: SessionId) -> None:
        row = await self._get_row(session_id)
        if row is None:
            return
        await self._db.delete(row)
        await self._db.commit()
