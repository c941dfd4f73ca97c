"""Rounds List Editor — add, update, delete, reorder."""

from smartshooter.core.rounds_editor import (
    add_round,
    delete_round,
    move_round_down,
    move_round_up,
    update_round,
)
from smartshooter.core.session_types import Round


def _rounds():
    return [
        Round(idx=0, zone="A", attempts=5, made=2),
        Round(idx=1, zone="B", attempts=6, made=3),
        Round(idx=2, zone="C", attempts=7, made=4),
    ]


def test_add_round_appends_blank_with_next_idx():
    rounds = add_round(_rounds(), "spot")
    assert len(rounds) == 4
    assert rounds[-1] == Round(idx=3, zone="", attempts=0, made=0, type="spot")


def test_add_round_to_empty_list():
    assert add_round([], None)[0].idx == 0


def test_update_round_clamps_made():
    rounds = update_round(_rounds(), 1, {"made": 50})
    assert rounds[1].made == 6
    rounds = update_round(rounds, 1, {"attempts": 2})
    assert (rounds[1].attempts, rounds[1].made) == (2, 2)


def test_update_round_sets_text_fields():
    rounds = update_round(_rounds(), 0, {"zone": "Elbow", "notes": "left hand"})
    assert rounds[0].zone == "Elbow"
    assert rounds[0].notes == "left hand"


def test_update_does_not_mutate_input():
    original = _rounds()
    update_round(original, 0, {"attempts": 0})
    assert original[0].attempts == 5


def test_delete_round_by_idx():
    rounds = delete_round(_rounds(), 1)
    assert [r.zone for r in rounds] == ["A", "C"]


def test_move_up_swaps_and_renumbers():
    rounds = move_round_up(_rounds(), 2)
    assert [(r.idx, r.zone) for r in rounds] == [(0, "A"), (1, "C"), (2, "B")]


def test_move_down_swaps_and_renumbers():
    rounds = move_round_down(_rounds(), 0)
    assert [(r.idx, r.zone) for r in rounds] == [(0, "B"), (1, "A"), (2, "C")]


def test_moves_at_edges_are_no_ops():
    assert move_round_up(_rounds(), 0) == _rounds()
    assert move_round_down(_rounds(), 2) == _rounds()
    assert move_round_up(_rounds(), 99) == _rounds()
