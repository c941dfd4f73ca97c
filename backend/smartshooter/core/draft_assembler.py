"""Draft Assembler — grid state back to the canonical round sequence, validated for save.

Invariants:
    - flatten walks buckets 0..rounds_count-1 and, within each, the zone order of
      that bucket's direction; idx is reassigned 0..n-1 in that walk order
    - Positions without a cell are skipped silently
    - validate_draft_rounds reports the FIRST violation only and never raises
    - assemble_draft never mutates its inputs; a failed result carries no draft

Design Decisions:
    - Validation returns a DraftResult (draft or issue) instead of raising, so the
      caller decides how to surface it and editor state stays untouched
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from smartshooter.core.domain_types import Direction
from smartshooter.core.session_types import Round, SessionDraft
from smartshooter.core.zone_grid import GridCell, ZoneGrid
from smartshooter.core.zone_presets import ordered_zones, resolve_zone_group


@dataclass(frozen=True)
class DraftValidationIssue:
    """First rule violated by a draft's rounds."""
    code: str
    message: str
    round_idx: int | None = None
    field: str | None = None

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "round_idx": self.round_idx,
            "field": self.field,
        }


@dataclass(frozen=True)
class DraftResult:
    draft: SessionDraft | None = None
    issue: DraftValidationIssue | None = None

    @property
    def ok(self) -> bool:
        return self.issue is None and self.draft is not None


def flatten(
    cells: Iterable[GridCell],
    rounds_count: int,
    zone_group: object,
    direction_resolver: Callable[[int], Direction],
) -> list[Round]:
    """Grid cells -> ordered rounds with fresh sequential idx."""
    grid = ZoneGrid(cells)
    group = resolve_zone_group(zone_group)
    rounds: list[Round] = []
    for bucket in range(max(0, rounds_count)):
        for zone in ordered_zones(group, direction_resolver(bucket)):
            cell = grid.cell(bucket, zone)
            if cell is None:
                continue
            rounds.append(Round(
                idx=len(rounds), zone=cell.zone, attempts=cell.attempts,
                made=cell.made, type=cell.type,
                duration_sec=cell.duration_sec, notes=cell.notes,
            ))
    return rounds


def validate_draft_rounds(rounds: list[Round]) -> DraftValidationIssue | None:
    """Save-time rules: >= 1 round, named zones, 0 <= made <= attempts."""
    if not rounds:
        return DraftValidationIssue(
            code="NO_ROUNDS", message="Please add at least one round.",
        )
    for r in rounds:
        if not r.zone or not r.zone.strip():
            return DraftValidationIssue(
                code="ZONE_REQUIRED",
                message="Each round must have a zone name.",
                round_idx=r.idx, field="zone",
            )
        if r.attempts < 0 or r.made < 0:
            return DraftValidationIssue(
                code="NEGATIVE_COUNT",
                message=f"Round {r.idx + 1}: attempts and made cannot be negative.",
                round_idx=r.idx,
                field="attempts" if r.attempts < 0 else "made",
            )
        if r.made > r.attempts:
            return DraftValidationIssue(
                code="MADE_EXCEEDS_ATTEMPTS",
                message=(
                    f"Round {r.idx + 1} ({r.zone}): made ({r.made}) "
                    f"cannot exceed attempts ({r.attempts})."
                ),
                round_idx=r.idx, field="made",
            )
    return None


def renumber(rounds: Iterable[Round]) -> list[Round]:
    """Sort by idx (stable) and reassign contiguous idx from 0."""
    ordered = sorted(rounds, key=lambda r: r.idx)
    return [replace(r, idx=i) for i, r in enumerate(ordered)]


def assemble_draft(
    rounds: Iterable[Round],
    date: str,
    training_type: str,
    zone_group: object,
    notes: str | None = None,
) -> DraftResult:
    """Normalize and validate rounds into a SessionDraft ready for save."""
    normalized = renumber(rounds)
    issue = validate_draft_rounds(normalized)
    if issue is not None:
        return DraftResult(issue=issue)
    return DraftResult(draft=SessionDraft(
        date=date,
        training_type=training_type,
        zone_group=resolve_zone_group(zone_group).value,
        notes=notes,
        rounds=tuple(normalized),
    ))
