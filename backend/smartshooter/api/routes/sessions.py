"""Session Routes — list, read, create, update and delete practice sessions.

Invariants:
    - Every response's totals come from get_rounds + the aggregation engine, for
      legacy and canonical records alike
    - Create/update run the draft assembler first; a validation issue aborts with
      422 before the repository is touched
    - A session owned by another user is reported as not found
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from smartshooter.api.dependencies import get_repository, require_user_id
from smartshooter.core.aggregation import aggregate_by_zone, aggregate_totals
from smartshooter.core.domain_types import SessionId, UserId
from smartshooter.core.draft_assembler import assemble_draft
from smartshooter.core.errors import (
    DraftValidationError, ErrorContext, ResourceNotFoundError,
)
from smartshooter.core.round_normalizer import get_rounds
from smartshooter.core.session_types import SessionRecord
from smartshooter.infrastructure.session_repository import SqlSessionRepository
from smartshooter.schemas.session import (
    PreviewRequest, SessionDetailOut, SessionDraftIn, SessionSummaryOut,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def summarize(record: SessionRecord) -> SessionSummaryOut:
    return SessionSummaryOut(
        id=record.id,
        date=record.date,
        training_type=record.training_type,
        zone_group=record.zone_group,
        totals=aggregate_totals(get_rounds(record)).to_dict(),
    )


def describe(record: SessionRecord) -> SessionDetailOut:
    rounds = get_rounds(record)
    return SessionDetailOut(
        id=record.id,
        date=record.date,
        training_type=record.training_type,
        zone_group=record.zone_group,
        notes=record.notes,
        totals=aggregate_totals(rounds).to_dict(),
        rounds=[r.to_dict() for r in rounds],
        by_zone={zone: agg.to_dict() for zone, agg in aggregate_by_zone(rounds).items()},
    )


async def get_owned_session(
    session_id: UUID, user_id: UserId, repository: SqlSessionRepository,
) -> SessionRecord:
    """Get a session the caller owns or raise 404. Exported for editor routes."""
    record = await repository.get(SessionId(session_id))
    if record is None or record.user_id != user_id:
        raise ResourceNotFoundError(
            "Session", str(session_id), ErrorContext(session_id=str(session_id)),
        )
    return record


async def _save_draft(
    session_id: UUID | None,
    body: SessionDraftIn,
    user_id: UserId,
    repository: SqlSessionRepository,
) -> SessionDetailOut:
    result = assemble_draft(
        [r.to_round() for r in body.rounds],
        date=body.date,
        training_type=body.training_type,
        zone_group=body.zone_group,
        notes=body.notes,
    )
    if not result.ok:
        raise DraftValidationError(
            result.issue,
            ErrorContext(session_id=str(session_id) if session_id else None),
        )
    saved_id = await repository.save(
        SessionId(session_id) if session_id else None, user_id, result.draft,
    )
    return describe(await get_owned_session(saved_id, user_id, repository))


@router.get("", response_model=list[SessionSummaryOut])
async def list_sessions(
    user_id: UserId = Depends(require_user_id),
    repository: SqlSessionRepository = Depends(get_repository),
):
    """The caller's sessions, newest first, with derived totals."""
    return [summarize(record) for record in await repository.load(user_id)]


@router.post("/preview")
async def preview_totals(body: PreviewRequest):
    """Totals and per-zone aggregates for unsaved rounds."""
    rounds = get_rounds(SessionRecord(
        id="preview", user_id="", date="", training_type="",
        rounds=tuple(r.to_round() for r in body.rounds),
    ))
    return {
        "totals": aggregate_totals(rounds).to_dict(),
        "by_zone": {
            zone: agg.to_dict() for zone, agg in aggregate_by_zone(rounds).items()
        },
    }


@router.get("/{session_id}", response_model=SessionDetailOut)
async def get_session(
    session_id: UUID,
    user_id: UserId = Depends(require_user_id),
    repository: SqlSessionRepository = Depends(get_repository),
):
    return describe(await get_owned_session(session_id, user_id, repository))


@router.post(
    "", response_model=SessionDetailOut, status_code=status.HTTP_201_CREATED,
)
async def create_session(
    body: SessionDraftIn,
    user_id: UserId = Depends(require_user_id),
    repository: SqlSessionRepository = Depends(get_repository),
):
    return await _save_draft(None, body, user_id, repository)


@router.put("/{session_id}", response_model=SessionDetailOut)
async def update_session(
    session_id: UUID,
    body: SessionDraftIn,
    user_id: UserId = Depends(require_user_id),
    repository: SqlSessionRepository = Depends(get_repository),
):
    await get_owned_session(session_id, user_id, repository)
    return await _save_draft(session_id, body, user_id, repository)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: UUID,
    user_id: UserId = Depends(require_user_id),
    repository: SqlSessionRepository = Depends(get_repository),
):
    await get_owned_session(session_id, user_id, repository)
    await repository.delete(SessionId(session_id))
    logger.info("Session deleted", extra={"session_id": str(session_id)})
