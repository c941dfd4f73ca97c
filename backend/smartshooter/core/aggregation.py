"""Aggregation Engine — session and per-zone shot totals.

Invariants:
    - Never raises; every numeric input is coerced (non-finite -> 0) first
    - Per round: attempts floored at 0, made clamped into [0, attempts]
    - accuracy_pct is always within [0, 100]; 0 when attempts <= 0
    - rounds_count is the input length, unfiltered
    - Per-zone pct computed after accumulation, never incrementally
    - aggregate_by_zone keys follow first-occurrence order

Design Decisions:
    - Works on anything exposing zone/attempts/made (Round, GridCell), so the
      editor can preview totals straight from grid cells
"""

from collections.abc import Iterable
from dataclasses import dataclass, asdict
from typing import Protocol

from smartshooter.core.coerce import clamp_attempts, clamp_made, to_number


class ShotTally(Protocol):
    zone: str
    attempts: int
    made: int


@dataclass(frozen=True)
class SessionTotals:
    attempts: int
    made: int
    rounds_count: int
    pct: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ZoneAggregate:
    """Per-zone totals — derived, never persisted."""
    attempts: int = 0
    made: int = 0
    pct: float = 0.0
    rounds_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def accuracy_pct(attempts: object, made: object) -> float:
    """made/attempts as a percentage clamped to [0, 100]."""
    a = to_number(attempts)
    if a <= 0:
        return 0.0
    pct = to_number(made) / a * 100
    return float(max(0.0, min(100.0, pct)))


def _clamped(tally: ShotTally) -> tuple[float | int, float | int]:
    a = clamp_attempts(getattr(tally, "attempts", 0))
    return a, clamp_made(getattr(tally, "made", 0), a)


def aggregate_totals(rounds: Iterable[ShotTally]) -> SessionTotals:
    """Sum clamped attempts/made across rounds."""
    attempts = 0
    made = 0
    count = 0
    for r in rounds:
        a, m = _clamped(r)
        attempts += a
        made += m
        count += 1
    return SessionTotals(
        attempts=attempts, made=made, rounds_count=count,
        pct=accuracy_pct(attempts, made),
    )


def aggregate_by_zone(rounds: Iterable[ShotTally]) -> dict[str, ZoneAggregate]:
    """Group clamped tallies by exact zone label."""
    by_zone: dict[str, ZoneAggregate] = {}
    for r in rounds:
        zone = getattr(r, "zone", "")
        agg = by_zone.setdefault(zone, ZoneAggregate())
        a, m = _clamped(r)
        agg.attempts += a
        agg.made += m
        agg.rounds_count += 1

    for agg in by_zone.values():
        agg.pct = accuracy_pct(agg.attempts, agg.made)
    return by_zone
