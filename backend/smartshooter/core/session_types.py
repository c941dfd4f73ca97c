"""Session Types — the practice-session data model shared by core and shell.

Invariants:
    - Round.idx is the position within a session (contiguous from 0 once normalized)
    - Round and SessionRecord are immutable; edits produce new instances
    - Exactly one representation is authoritative at read time: non-empty rounds
      beat the legacy zones map (see round_normalizer.resolve_representation)
    - from_mapping constructors never raise on ill-typed fields

Design Decisions:
    - Frozen dataclasses over Pydantic models: core stays free of validation
      machinery; Pydantic lives at the API boundary (schemas/)
    - Legacy zones kept as a plain dict of LegacyZoneStat, iterated in
      insertion order
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, asdict

from smartshooter.core.coerce import to_number


def _int_or_zero(value: object) -> int:
    return int(to_number(value))


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class Round:
    """One attempts/made tally for a single zone within a session."""
    idx: int
    zone: str
    attempts: int
    made: int
    type: str | None = None
    duration_sec: int | None = None
    notes: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping, default_idx: int = 0) -> "Round":
        duration = data.get("duration_sec", data.get("durationSec"))
        return cls(
            idx=_int_or_zero(data.get("idx", default_idx)),
            zone=str(data.get("zone") or ""),
            attempts=_int_or_zero(data.get("attempts")),
            made=_int_or_zero(data.get("made")),
            type=_optional_str(data.get("type")),
            duration_sec=(
                _int_or_zero(duration) if duration is not None else None
            ),
            notes=_optional_str(data.get("notes")),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        for optional in ("type", "duration_sec", "notes"):
            if data[optional] is None:
                del data[optional]
        return data


@dataclass(frozen=True)
class LegacyZoneStat:
    """Flat per-zone tally from the pre-rounds schema."""
    attempts: int = 0
    made: int = 0

    @classmethod
    def from_mapping(cls, data: object) -> "LegacyZoneStat":
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            attempts=_int_or_zero(data.get("attempts")),
            made=_int_or_zero(data.get("made")),
        )


@dataclass(frozen=True)
class SessionRecord:
    """A full practice log as stored by the persistence collaborator."""
    id: str
    user_id: str
    date: str
    training_type: str
    notes: str | None = None
    rounds: tuple[Round, ...] = ()
    zones: dict[str, LegacyZoneStat] | None = None
    zone_group: str | None = None


@dataclass(frozen=True)
class RoundsRepresentation:
    """Canonical representation — an explicit list of rounds."""
    rounds: tuple[Round, ...]


@dataclass(frozen=True)
class LegacyZonesRepresentation:
    """Legacy representation — one flat tally per zone label."""
    zones: dict[str, LegacyZoneStat]
    training_type: str


SessionRepresentation = RoundsRepresentation | LegacyZonesRepresentation


@dataclass(frozen=True)
class SessionDraft:
    """Editor output handed to SessionRepository.save."""
    date: str
    training_type: str
    zone_group: str
    notes: str | None = None
    rounds: tuple[Round, ...] = field(default_factory=tuple)

    def rounds_payload(self) -> list[dict]:
        return [r.to_dict() for r in self.rounds]
