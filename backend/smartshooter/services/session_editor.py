"""Session Editor — one edit session: header fields, grid/list round state, save orchestration.

Invariants:
    - The editor exclusively owns its grid/list state until saved or closed
    - Preview totals go through get_rounds + aggregate_totals, same as persisted display
    - A failed validation or failed save leaves every field untouched
    - At most one save in flight per editor (SaveInProgressError otherwise)
    - Grid operations in list mode (and vice versa) raise InvalidEditError
    - A rejected update applies none of its fields

Design Decisions:
    - Opening an existing session picks grid mode only if the saved rounds
      survive a hydrate -> flatten round-trip unchanged in every field but
      idx; anything else (custom zone names, partial buckets, legacy zones,
      hand-edited orders) opens in list mode so nothing is pruned
    - Shell-side class around the pure core: the repository is passed into
      save() rather than held, so the editor outlives any one DB session
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date as date_cls
from uuid import UUID, uuid4

from smartshooter.config import Settings
from smartshooter.core import rounds_editor
from smartshooter.core.aggregation import (
    SessionTotals, ZoneAggregate, aggregate_by_zone, aggregate_totals,
)
from smartshooter.core.domain_types import (
    DirectionMode, EditorId, EditorMode, SessionId, UserId,
)
from smartshooter.core.draft_assembler import (
    DraftResult, assemble_draft, flatten, renumber,
)
from smartshooter.core.errors import (
    DraftValidationError, ErrorContext, InvalidEditError, SaveInProgressError,
)
from smartshooter.core.repository_protocols import SessionRepository
from smartshooter.core.round_normalizer import get_rounds
from smartshooter.core.session_types import Round, SessionRecord
from smartshooter.core.zone_grid import GridCell, GridEditor
from smartshooter.core.zone_presets import group_for_zone, resolve_zone_group

logger = logging.getLogger(__name__)


def _today() -> str:
    return date_cls.today().isoformat()


def _tally(r: Round) -> tuple:
    return (r.zone, r.attempts, r.made, r.type, r.duration_sec, r.notes)


def _same_rounds(a: list[Round], b: list[Round]) -> bool:
    return [_tally(r) for r in a] == [_tally(r) for r in b]


def _list_rounds(saved: list[Round], training_type: str) -> list[Round]:
    """List-mode starting rounds: the saved ones renumbered, or one empty round."""
    if saved:
        return renumber(saved)
    return rounds_editor.add_round([], training_type)


@dataclass
class SessionEditor:
    """In-memory editor for a new or existing practice session."""

    user_id: UserId
    grid: GridEditor
    mode: EditorMode = EditorMode.GRID
    session_id: SessionId | None = None
    date: str = field(default_factory=_today)
    training_type: str = "catch_and_shoot"
    notes: str | None = None
    rounds: list[Round] = field(default_factory=list)
    saving: bool = False
    id: EditorId = field(default_factory=lambda: EditorId(uuid4()))

    # ─── Construction ────────────────────────────────────────────

    @classmethod
    def new(
        cls,
        user_id: UserId,
        settings: Settings,
        mode: EditorMode = EditorMode.GRID,
        zone_group: str | None = None,
    ) -> "SessionEditor":
        grid = GridEditor(
            zone_group=zone_group or settings.default_zone_group,
            rounds_count=settings.default_rounds_count,
            training_type=settings.default_training_type,
            autofill_first_zone=settings.grid_autofill_first_zone,
            max_rounds=settings.max_rounds_count,
        )
        rounds = []
        if mode is EditorMode.LIST:
            rounds = rounds_editor.add_round([], settings.default_training_type)
        return cls(
            user_id=user_id, grid=grid, mode=mode,
            training_type=settings.default_training_type, rounds=rounds,
        )

    @classmethod
    def from_record(
        cls, record: SessionRecord, user_id: UserId, settings: Settings,
    ) -> "SessionEditor":
        saved = get_rounds(record)
        group = record.zone_group or (
            group_for_zone(saved[0].zone) if saved else None
        )
        grid = GridEditor.from_rounds(
            saved,
            zone_group=resolve_zone_group(group),
            training_type=record.training_type or settings.default_training_type,
            autofill_first_zone=settings.grid_autofill_first_zone,
            max_rounds=settings.max_rounds_count,
        )
        lossless = bool(saved) and _same_rounds(
            saved,
            flatten(grid.cells.cells(), grid.rounds_count, grid.zone_group, grid.direction_for),
        )
        mode = EditorMode.GRID if lossless else EditorMode.LIST
        return cls(
            user_id=user_id,
            grid=grid,
            mode=mode,
            session_id=SessionId(UUID(record.id)) if record.id else None,
            date=record.date or _today(),
            training_type=record.training_type or settings.default_training_type,
            notes=record.notes,
            rounds=[] if lossless else _list_rounds(saved, record.training_type),
        )

    # ─── Derived ─────────────────────────────────────────────────

    def current_rounds(self) -> list[Round]:
        """Rounds as they would be saved, before validation."""
        if self.mode is EditorMode.GRID:
            return flatten(
                self.grid.cells.cells(), self.grid.rounds_count,
                self.grid.zone_group, self.grid.direction_for,
            )
        return list(self.rounds)

    def _preview_record(self) -> SessionRecord:
        return SessionRecord(
            id="preview", user_id=self.user_id, date=self.date,
            training_type=self.training_type, notes=self.notes,
            rounds=tuple(self.current_rounds()),
        )

    def preview_totals(self) -> SessionTotals:
        return aggregate_totals(get_rounds(self._preview_record()))

    def preview_by_zone(self) -> dict[str, ZoneAggregate]:
        return aggregate_by_zone(get_rounds(self._preview_record()))

    def assemble(self) -> DraftResult:
        return assemble_draft(
            self.current_rounds(),
            date=self.date,
            training_type=self.training_type,
            zone_group=self.grid.zone_group,
            notes=self.notes,
        )

    def _context(self) -> ErrorContext:
        return ErrorContext(
            session_id=str(self.session_id) if self.session_id else None,
            editor_id=str(self.id),
        )

    # ─── Header & grid transitions ───────────────────────────────

    def update_header(
        self,
        date: str | None = None,
        training_type: str | None = None,
        notes: str | None = None,
    ) -> None:
        if date is not None:
            self.date = date
        if training_type is not None:
            self.training_type = training_type
            self.grid.set_training_type(training_type)
        if notes is not None:
            self.notes = notes

    def update(self, header: Mapping, grid: Mapping) -> None:
        """Apply header fields and grid settings together, or neither."""
        if grid:
            self._require_mode(EditorMode.GRID)
        self.update_header(**header)
        if grid:
            self.configure_grid(**grid)

    def _require_mode(self, mode: EditorMode) -> None:
        if self.mode is not mode:
            raise InvalidEditError(
                f"Operation requires {mode.value} mode; editor is in {self.mode.value} mode",
                self._context(),
            )

    def configure_grid(
        self,
        rounds_count: int | None = None,
        zone_group: str | None = None,
        direction_mode: DirectionMode | None = None,
        autofill_first_zone: bool | None = None,
    ) -> None:
        self._require_mode(EditorMode.GRID)
        if zone_group is not None:
            self.grid.set_zone_group(zone_group)
        if rounds_count is not None:
            self.grid.set_rounds_count(rounds_count)
        if direction_mode is not None:
            self.grid.set_direction_mode(direction_mode)
        if autofill_first_zone is not None:
            self.grid.autofill_first_zone = autofill_first_zone

    def set_direction(self, bucket: int | None, direction: str) -> None:
        self._require_mode(EditorMode.GRID)
        if not self.grid.set_direction(direction, bucket):
            raise self._bucket_error(bucket)

    def toggle_direction(self, bucket: int | None = None) -> None:
        self._require_mode(EditorMode.GRID)
        if not self.grid.toggle_direction(bucket):
            raise self._bucket_error(bucket)

    def _bucket_error(self, bucket: int | None) -> InvalidEditError:
        message = (
            "Per-round direction mode needs a round number"
            if bucket is None
            else f"Round {bucket} does not exist in this grid"
        )
        return InvalidEditError(message, self._context())

    def edit_cell(self, bucket: int, zone: str, patch: Mapping) -> GridCell:
        self._require_mode(EditorMode.GRID)
        cell = self.grid.edit_cell(bucket, zone, patch)
        if cell is None:
            raise InvalidEditError(
                f"No cell for round {bucket}, zone '{zone}'", self._context(),
            )
        return cell

    # ─── List transitions ────────────────────────────────────────

    def _require_round(self, idx: int) -> None:
        if not any(r.idx == idx for r in self.rounds):
            raise InvalidEditError(f"Round {idx} does not exist", self._context())

    def add_round(self) -> Round:
        self._require_mode(EditorMode.LIST)
        self.rounds = rounds_editor.add_round(self.rounds, self.training_type)
        return self.rounds[-1]

    def update_round(self, idx: int, patch: Mapping) -> None:
        self._require_mode(EditorMode.LIST)
        self._require_round(idx)
        self.rounds = rounds_editor.update_round(self.rounds, idx, patch)

    def delete_round(self, idx: int) -> None:
        self._require_mode(EditorMode.LIST)
        self._require_round(idx)
        self.rounds = rounds_editor.delete_round(self.rounds, idx)

    def move_round(self, idx: int, up: bool) -> None:
        self._require_mode(EditorMode.LIST)
        self._require_round(idx)
        move = rounds_editor.move_round_up if up else rounds_editor.move_round_down
        self.rounds = move(self.rounds, idx)

    # ─── Save ────────────────────────────────────────────────────

    async def save(self, repository: SessionRepository) -> SessionId:
        """Validate and persist. Raises without touching editor state on failure."""
        if self.saving:
            raise SaveInProgressError(self._context())
        result = self.assemble()
        if not result.ok:
            logger.warning(
                f"Draft rejected: {result.issue.code}",
                extra={"editor_id": str(self.id), "error_code": result.issue.code},
            )
            raise DraftValidationError(result.issue, self._context())

        self.saving = True
        try:
            session_id = await repository.save(
                self.session_id, self.user_id, result.draft,
            )
        finally:
            self.saving = False
        self.session_id = session_id
        logger.info(
            "Editor saved session",
            extra={
                "editor_id": str(self.id), "session_id": str(session_id),
                "rounds_count": len(result.draft.rounds),
            },
        )
        return session_id

    def snapshot(self) -> dict:
        totals = self.preview_totals()
        return {
            "id": str(self.id),
            "session_id": str(self.session_id) if self.session_id else None,
            "mode": self.mode.value,
            "date": self.date,
            "training_type": self.training_type,
            "notes": self.notes,
            "grid": self.grid.snapshot() if self.mode is EditorMode.GRID else None,
            "rounds": (
                [r.to_dict() for r in self.rounds]
                if self.mode is EditorMode.LIST else None
            ),
            "totals": totals.to_dict(),
            "by_zone": {
                zone: agg.to_dict() for zone, agg in self.preview_by_zone().items()
            },
            "saving": self.saving,
        }
