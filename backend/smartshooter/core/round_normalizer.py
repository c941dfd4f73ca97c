"""Round Normalizer — one canonical, idx-ordered round sequence per session.

Invariants:
    - Pure: the input session is never mutated, results are fresh lists
    - Non-empty rounds always win over the legacy zones map
    - Rounds are sorted by idx with a stable sort (ties keep input order)
    - Legacy zones synthesize one round per entry in insertion order, with
      attempts >= 0 and made clamped into [0, attempts]
    - Never raises — a session with neither representation yields []

Design Decisions:
    - Representation resolved once (resolve_representation) and dispatched on,
      instead of presence checks scattered through consumers
    - The same get_rounds call feeds live editor previews and persisted-record
      display so totals cannot disagree between the two
"""

from collections.abc import Mapping

from smartshooter.core.session_types import (
    LegacyZoneStat,
    LegacyZonesRepresentation,
    Round,
    RoundsRepresentation,
    SessionRecord,
    SessionRepresentation,
)


def resolve_representation(session: SessionRecord) -> SessionRepresentation | None:
    """Pick the authoritative representation for a session record."""
    if session.rounds:
        return RoundsRepresentation(rounds=tuple(session.rounds))
    if session.zones is not None:
        return LegacyZonesRepresentation(
            zones=dict(session.zones), training_type=session.training_type,
        )
    return None


def get_rounds(session: SessionRecord) -> list[Round]:
    """Canonical round sequence for a session, ordered by idx."""
    representation = resolve_representation(session)
    if isinstance(representation, RoundsRepresentation):
        return sorted(representation.rounds, key=lambda r: r.idx)
    if isinstance(representation, LegacyZonesRepresentation):
        return _rounds_from_legacy(representation)
    return []


def _rounds_from_legacy(rep: LegacyZonesRepresentation) -> list[Round]:
    rounds = []
    for idx, (zone, stat) in enumerate(rep.zones.items()):
        attempts = max(0, stat.attempts)
        rounds.append(Round(
            idx=idx,
            zone=zone,
            attempts=attempts,
            made=max(0, min(stat.made, attempts)),
            type=rep.training_type,
        ))
    return rounds


def session_from_mapping(data: Mapping) -> SessionRecord:
    """Build a SessionRecord from a loosely-shaped document.

    Accepts both snake_case and the camelCase keys older documents use.
    Non-list rounds become empty; non-mapping zones become None.
    """
    raw_rounds = data.get("rounds")
    rounds: tuple[Round, ...] = ()
    if isinstance(raw_rounds, (list, tuple)):
        rounds = tuple(
            Round.from_mapping(r, default_idx=i)
            for i, r in enumerate(raw_rounds)
            if isinstance(r, Mapping)
        )

    raw_zones = data.get("zones")
    zones = None
    if isinstance(raw_zones, Mapping):
        zones = {
            str(label): LegacyZoneStat.from_mapping(stat)
            for label, stat in raw_zones.items()
        }

    notes = data.get("notes")
    zone_group = data.get("zone_group", data.get("zoneGroup"))
    return SessionRecord(
        id=str(data.get("id") or ""),
        user_id=str(data.get("user_id", data.get("userId")) or ""),
        date=str(data.get("date") or ""),
        training_type=str(
            data.get("training_type", data.get("trainingType")) or "",
        ),
        notes=str(notes) if notes is not None else None,
        rounds=rounds,
        zones=zones,
        zone_group=str(zone_group) if zone_group else None,
    )
