"""Editor Routes — in-memory grid/list editors, one per open edit modal.

Invariants:
    - _editors is the single source for editor state; DELETE discards it unconditionally
    - An editor is only reachable by the user who opened it
    - Every mutating call answers with the full editor snapshot (grid + live totals)
    - Save failures (validation, DB) keep the editor so the user can retry;
      a successful save closes it

Design Decisions:
    - _editors as module-level dict: single-process uvicorn, editors are lost on
      restart exactly like a closed modal
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from smartshooter.api.dependencies import get_repository, require_user_id
from smartshooter.api.routes.sessions import describe, get_owned_session
from smartshooter.config import get_settings
from smartshooter.core.domain_types import EditorId, UserId
from smartshooter.core.errors import ErrorContext, ResourceNotFoundError
from smartshooter.infrastructure.session_repository import SqlSessionRepository
from smartshooter.schemas.session import (
    CellPatch, DirectionUpdate, EditorCreate, EditorUpdate, RoundMove, RoundPatch,
)
from smartshooter.services.session_editor import SessionEditor

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/editors", tags=["editors"])

_editors: dict[EditorId, SessionEditor] = {}


def get_editor_or_404(editor_id: UUID, user_id: UserId) -> SessionEditor:
    editor = _editors.get(EditorId(editor_id))
    if editor is None or editor.user_id != user_id:
        raise ResourceNotFoundError(
            "Editor", str(editor_id), ErrorContext(editor_id=str(editor_id)),
        )
    return editor


@router.post("", status_code=status.HTTP_201_CREATED)
async def open_editor(
    body: EditorCreate,
    user_id: UserId = Depends(require_user_id),
    repository: SqlSessionRepository = Depends(get_repository),
):
    """Open an editor, hydrated from a saved session when session_id is given."""
    settings = get_settings()
    if body.session_id:
        record = await get_owned_session(body.session_id, user_id, repository)
        editor = SessionEditor.from_record(record, user_id, settings)
    else:
        editor = SessionEditor.new(
            user_id, settings, mode=body.mode, zone_group=body.zone_group,
        )
    _editors[editor.id] = editor
    logger.info(
        f"Editor opened in {editor.mode.value} mode",
        extra={"editor_id": str(editor.id), "user_id": user_id},
    )
    return editor.snapshot()


@router.get("/{editor_id}")
async def get_editor(editor_id: UUID, user_id: UserId = Depends(require_user_id)):
    return get_editor_or_404(editor_id, user_id).snapshot()


@router.patch("/{editor_id}")
async def update_editor(
    editor_id: UUID,
    body: EditorUpdate,
    user_id: UserId = Depends(require_user_id),
):
    """Header fields and grid settings (round count, zone group, direction mode)."""
    editor = get_editor_or_404(editor_id, user_id)
    editor.update(body.header_fields(), body.grid_fields())
    return editor.snapshot()


@router.put("/{editor_id}/direction")
async def set_global_direction(
    editor_id: UUID,
    body: DirectionUpdate,
    user_id: UserId = Depends(require_user_id),
):
    editor = get_editor_or_404(editor_id, user_id)
    editor.set_direction(None, body.direction)
    return editor.snapshot()


@router.post("/{editor_id}/direction/toggle")
async def toggle_direction(
    editor_id: UUID,
    bucket: int | None = None,
    user_id: UserId = Depends(require_user_id),
):
    """Flip ltr/rtl; bucket is required in per-round mode."""
    editor = get_editor_or_404(editor_id, user_id)
    editor.toggle_direction(bucket)
    return editor.snapshot()


@router.put("/{editor_id}/directions/{bucket}")
async def set_bucket_direction(
    editor_id: UUID,
    bucket: int,
    body: DirectionUpdate,
    user_id: UserId = Depends(require_user_id),
):
    """Per-round direction; in global mode this sets the shared direction."""
    editor = get_editor_or_404(editor_id, user_id)
    editor.set_direction(bucket, body.direction)
    return editor.snapshot()


@router.patch("/{editor_id}/cells/{bucket}")
async def edit_cell(
    editor_id: UUID,
    bucket: int,
    body: CellPatch,
    user_id: UserId = Depends(require_user_id),
):
    editor = get_editor_or_404(editor_id, user_id)
    editor.edit_cell(bucket, body.zone, body.patch())
    return editor.snapshot()


@router.post("/{editor_id}/rounds", status_code=status.HTTP_201_CREATED)
async def add_round(editor_id: UUID, user_id: UserId = Depends(require_user_id)):
    editor = get_editor_or_404(editor_id, user_id)
    editor.add_round()
    return editor.snapshot()


@router.patch("/{editor_id}/rounds/{idx}")
async def update_round(
    editor_id: UUID,
    idx: int,
    body: RoundPatch,
    user_id: UserId = Depends(require_user_id),
):
    editor = get_editor_or_404(editor_id, user_id)
    editor.update_round(idx, body.patch())
    return editor.snapshot()


@router.delete("/{editor_id}/rounds/{idx}")
async def delete_round(
    editor_id: UUID, idx: int, user_id: UserId = Depends(require_user_id),
):
    editor = get_editor_or_404(editor_id, user_id)
    editor.delete_round(idx)
    return editor.snapshot()


@router.post("/{editor_id}/rounds/{idx}/move")
async def move_round(
    editor_id: UUID,
    idx: int,
    body: RoundMove,
    user_id: UserId = Depends(require_user_id),
):
    editor = get_editor_or_404(editor_id, user_id)
    editor.move_round(idx, up=body.direction == "up")
    return editor.snapshot()


@router.post("/{editor_id}/save")
async def save_editor(
    editor_id: UUID,
    user_id: UserId = Depends(require_user_id),
    repository: SqlSessionRepository = Depends(get_repository),
):
    """Validate, persist, then close the editor. Errors keep it open."""
    editor = get_editor_or_404(editor_id, user_id)
    session_id = await editor.save(repository)
    _editors.pop(editor.id, None)
    return describe(await get_owned_session(session_id, user_id, repository))


@router.delete("/{editor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_editor(editor_id: UUID, user_id: UserId = Depends(require_user_id)):
    """Discard an editor and all unsaved edits."""
    editor = get_editor_or_404(editor_id, user_id)
    _editors.pop(editor.id, None)
