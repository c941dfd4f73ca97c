"""Draft Assembler — flatten order, validation codes, draft assembly."""

from smartshooter.core.domain_types import Direction
from smartshooter.core.draft_assembler import (
    assemble_draft,
    flatten,
    renumber,
    validate_draft_rounds,
)
from smartshooter.core.round_normalizer import get_rounds
from smartshooter.core.session_types import Round, SessionRecord
from smartshooter.core.zone_grid import GridCell, GridEditor, ensure_grid
from smartshooter.core.zone_presets import ordered_zones


def _ltr(_bucket: int) -> Direction:
    return Direction.LTR


# ─── flatten ─────────────────────────────────────────────────────

def test_flatten_walks_buckets_then_zones():
    grid = ensure_grid([], 2, ordered_zones("3PT"), "spot")
    rounds = flatten(grid.cells(), 2, "3PT", _ltr)
    assert [r.idx for r in rounds] == list(range(10))
    assert [r.zone for r in rounds[:5]] == ordered_zones("3PT")
    assert [r.zone for r in rounds[5:]] == ordered_zones("3PT")
    assert all(r.type == "spot" for r in rounds)


def test_flatten_honours_per_bucket_direction():
    editor = GridEditor(rounds_count=2, direction_mode="per_bucket")
    editor.set_direction("rtl", bucket=1)
    rounds = flatten(editor.cells.cells(), 2, editor.zone_group, editor.direction_for)
    assert rounds[0].zone == "Left Corner"
    assert rounds[5].zone == "Right Corner"
    assert rounds[9].zone == "Left Corner"


def test_flatten_keeps_values_attached_to_zone_under_rtl():
    editor = GridEditor(rounds_count=1)
    editor.edit_cell(0, "Left Corner", {"attempts": 10, "made": 7})
    editor.toggle_direction()
    rounds = flatten(editor.cells.cells(), 1, "3PT", editor.direction_for)
    last = rounds[-1]
    assert (last.zone, last.attempts, last.made, last.idx) == ("Left Corner", 10, 7, 4)


def test_flatten_skips_missing_cells():
    cells = [GridCell(bucket=0, zone="Top of Key 3pt", attempts=4, made=2)]
    rounds = flatten(cells, 3, "3PT", _ltr)
    assert len(rounds) == 1
    assert rounds[0].idx == 0


def test_flatten_then_get_rounds_preserves_order():
    editor = GridEditor(rounds_count=2, direction="rtl")
    editor.edit_cell(1, "Left Wing 3pt", {"attempts": 6, "made": 2})
    rounds = flatten(editor.cells.cells(), 2, "3PT", editor.direction_for)
    record = SessionRecord(
        id="s", user_id="u", date="2024-01-01", training_type="spot",
        rounds=tuple(reversed(rounds)),
    )
    assert get_rounds(record) == rounds


# ─── validation ──────────────────────────────────────────────────

def test_empty_rounds_rejected():
    issue = validate_draft_rounds([])
    assert issue.code == "NO_ROUNDS"
    assert issue.round_idx is None


def test_blank_zone_rejected():
    issue = validate_draft_rounds([
        Round(idx=0, zone="Left Corner", attempts=1, made=0),
        Round(idx=1, zone="   ", attempts=1, made=0),
    ])
    assert (issue.code, issue.round_idx, issue.field) == ("ZONE_REQUIRED", 1, "zone")


def test_negative_counts_rejected():
    issue = validate_draft_rounds([Round(idx=0, zone="A", attempts=5, made=-1)])
    assert (issue.code, issue.field) == ("NEGATIVE_COUNT", "made")


def test_made_exceeding_attempts_rejected_with_round_number():
    issue = validate_draft_rounds([
        Round(idx=0, zone="Left Corner", attempts=5, made=5),
        Round(idx=1, zone="Right Corner", attempts=5, made=6),
    ])
    assert issue.code == "MADE_EXCEEDS_ATTEMPTS"
    assert issue.round_idx == 1
    assert "Round 2" in issue.message


def test_only_first_violation_reported():
    issue = validate_draft_rounds([
        Round(idx=0, zone="", attempts=5, made=9),
        Round(idx=1, zone="A", attempts=-1, made=0),
    ])
    assert issue.code == "ZONE_REQUIRED"


def test_zero_attempt_rounds_are_valid():
    assert validate_draft_rounds([Round(idx=0, zone="A", attempts=0, made=0)]) is None


# ─── assembly ────────────────────────────────────────────────────

def test_renumber_sorts_and_compacts():
    rounds = renumber([
        Round(idx=7, zone="B", attempts=1, made=1),
        Round(idx=2, zone="A", attempts=1, made=0),
    ])
    assert [(r.idx, r.zone) for r in rounds] == [(0, "A"), (1, "B")]


def test_assemble_draft_success():
    result = assemble_draft(
        [Round(idx=3, zone="Left Corner", attempts=10, made=6)],
        date="2024-03-05", training_type="spot", zone_group="mid", notes="hot",
    )
    assert result.ok
    assert result.issue is None
    assert result.draft.zone_group == "MID"
    assert result.draft.rounds[0].idx == 0
    assert result.draft.rounds_payload() == [
        {"idx": 0, "zone": "Left Corner", "attempts": 10, "made": 6},
    ]


def test_assemble_draft_failure_carries_no_draft():
    rounds = [Round(idx=0, zone="A", attempts=1, made=2)]
    result = assemble_draft(rounds, date="2024-03-05", training_type="spot", zone_group="3PT")
    assert not result.ok
    assert result.draft is None
    assert result.issue.code == "MADE_EXCEEDS_ATTEMPTS"
    assert rounds[0].made == 2


def test_round_notes_and_duration_survive_hydrate_and_flatten():
    rounds = [
        Round(idx=i, zone=z, attempts=4, made=1)
        for i, z in enumerate(ordered_zones("3PT"))
    ]
    rounds[2] = Round(
        idx=2, zone="Top of Key 3pt", attempts=4, made=1,
        duration_sec=45, notes="tired legs",
    )
    editor = GridEditor.from_rounds(rounds)
    editor.edit_cell(0, "Top of Key 3pt", {"made": 3})
    flat = flatten(editor.cells.cells(), 1, "3PT", editor.direction_for)
    assert (flat[2].duration_sec, flat[2].notes, flat[2].made) == (45, "tired legs", 3)
    assert flat[0].notes is None
