"""Rounds List Editor — free-form round editing for sessions outside a zone preset.

Invariants:
    - Every function returns a new list; inputs are never mutated
    - Rounds are addressed by idx, not list position
    - update_round keeps 0 <= made <= attempts
    - move_round_up/down renumber idx to list order afterwards
"""

from collections.abc import Mapping
from dataclasses import replace

from smartshooter.core.coerce import to_count
from smartshooter.core.session_types import Round


def _position(rounds: list[Round], idx: int) -> int:
    for i, r in enumerate(rounds):
        if r.idx == idx:
            return i
    return -1


def add_round(rounds: list[Round], training_type: str | None) -> list[Round]:
    next_idx = max((r.idx for r in rounds), default=-1) + 1
    return [*rounds, Round(
        idx=next_idx, zone="", attempts=0, made=0, type=training_type,
    )]


def delete_round(rounds: list[Round], idx: int) -> list[Round]:
    return [r for r in rounds if r.idx != idx]


def update_round(rounds: list[Round], idx: int, patch: Mapping) -> list[Round]:
    """Patch the round with this idx; made is clamped to the resulting attempts."""
    updated = []
    for r in rounds:
        if r.idx != idx:
            updated.append(r)
            continue
        attempts = to_count(patch.get("attempts", r.attempts))
        made = min(to_count(patch.get("made", r.made)), attempts)
        changes = {
            k: patch[k] for k in ("zone", "type", "notes", "duration_sec")
            if k in patch
        }
        updated.append(replace(r, attempts=attempts, made=made, **changes))
    return updated


def _swap_and_renumber(rounds: list[Round], i: int, j: int) -> list[Round]:
    swapped = list(rounds)
    swapped[i], swapped[j] = swapped[j], swapped[i]
    return [replace(r, idx=k) for k, r in enumerate(swapped)]


def move_round_up(rounds: list[Round], idx: int) -> list[Round]:
    i = _position(rounds, idx)
    if i <= 0:
        return list(rounds)
    return _swap_and_renumber(rounds, i - 1, i)


def move_round_down(rounds: list[Round], idx: int) -> list[Round]:
    i = _position(rounds, idx)
    if i < 0 or i >= len(rounds) - 1:
        return list(rounds)
    return _swap_and_renumber(rounds, i, i + 1)
