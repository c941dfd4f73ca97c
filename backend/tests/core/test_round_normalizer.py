"""Round Normalizer — canonical rounds vs legacy zones, purity, loose documents."""

from smartshooter.core.round_normalizer import (
    get_rounds,
    resolve_representation,
    session_from_mapping,
)
from smartshooter.core.session_types import (
    LegacyZoneStat,
    LegacyZonesRepresentation,
    Round,
    RoundsRepresentation,
    SessionRecord,
)


def _session(**overrides) -> SessionRecord:
    fields = {
        "id": "s1", "user_id": "u", "date": "2025-08-24",
        "training_type": "spot",
    }
    fields.update(overrides)
    return SessionRecord(**fields)


# ─── Canonical rounds ────────────────────────────────────────────

def test_rounds_sorted_by_idx():
    session = _session(rounds=(
        Round(idx=2, zone="right_wing", attempts=10, made=7),
        Round(idx=0, zone="top_key", attempts=5, made=3),
    ))
    rounds = get_rounds(session)
    assert [r.idx for r in rounds] == [0, 2]
    assert sorted(rounds, key=lambda r: r.zone) == sorted(session.rounds, key=lambda r: r.zone)


def test_sort_is_stable_for_duplicate_idx():
    first = Round(idx=1, zone="A", attempts=1, made=1)
    second = Round(idx=1, zone="B", attempts=2, made=1)
    zero = Round(idx=0, zone="C", attempts=3, made=0)
    rounds = get_rounds(_session(rounds=(first, second, zero)))
    assert [r.zone for r in rounds] == ["C", "A", "B"]


def test_input_session_not_mutated():
    original = (
        Round(idx=1, zone="B", attempts=4, made=2),
        Round(idx=0, zone="A", attempts=3, made=1),
    )
    session = _session(rounds=original)
    get_rounds(session)
    assert session.rounds == original


def test_rounds_win_over_legacy_zones():
    session = _session(
        rounds=(Round(idx=0, zone="A", attempts=10, made=5),),
        zones={"top_key": LegacyZoneStat(attempts=99, made=99)},
    )
    assert isinstance(resolve_representation(session), RoundsRepresentation)
    assert [r.zone for r in get_rounds(session)] == ["A"]


# ─── Legacy zones ────────────────────────────────────────────────

def test_legacy_zones_become_one_round_each():
    session = _session(zones={
        "top_key": LegacyZoneStat(attempts=10, made=6),
        "right_wing": LegacyZoneStat(attempts=8, made=5),
    })
    rounds = get_rounds(session)
    assert [r.zone for r in rounds] == ["top_key", "right_wing"]
    assert [r.idx for r in rounds] == [0, 1]
    assert sum(r.attempts for r in rounds) == 18
    assert sum(r.made for r in rounds) == 11
    assert all(r.type == "spot" for r in rounds)


def test_legacy_zones_are_clamped():
    session = _session(zones={
        "paint": LegacyZoneStat(attempts=-5, made=3),
        "wing": LegacyZoneStat(attempts=4, made=9),
    })
    rounds = get_rounds(session)
    assert (rounds[0].attempts, rounds[0].made) == (0, 0)
    assert (rounds[1].attempts, rounds[1].made) == (4, 4)


def test_empty_rounds_fall_back_to_zones():
    session = _session(rounds=(), zones={"x": LegacyZoneStat(attempts=1, made=1)})
    assert isinstance(resolve_representation(session), LegacyZonesRepresentation)
    assert len(get_rounds(session)) == 1


def test_no_representation_yields_empty_list():
    session = _session()
    assert resolve_representation(session) is None
    assert get_rounds(session) == []


def test_empty_zones_map_yields_empty_list():
    assert get_rounds(_session(zones={})) == []


# ─── Loose documents ─────────────────────────────────────────────

def test_session_from_mapping_reads_camel_case_document():
    record = session_from_mapping({
        "id": "abc",
        "userId": "u1",
        "date": "2025-08-24",
        "trainingType": "catch_and_shoot",
        "zoneGroup": "MID",
        "rounds": [
            {"idx": 1, "zone": "Free Throw", "attempts": "10", "made": 7, "durationSec": 90},
            "garbage",
            {"idx": 0, "zone": "Left Elbow", "attempts": 5, "made": None},
        ],
    })
    assert record.user_id == "u1"
    assert record.training_type == "catch_and_shoot"
    assert record.zone_group == "MID"
    assert len(record.rounds) == 2
    assert record.rounds[0].attempts == 10
    assert record.rounds[0].duration_sec == 90
    assert record.rounds[1].made == 0
    assert [r.zone for r in get_rounds(record)] == ["Left Elbow", "Free Throw"]


def test_session_from_mapping_tolerates_bad_shapes():
    record = session_from_mapping({
        "id": "abc", "user_id": "u", "date": "2025-08-24",
        "training_type": "spot", "rounds": "nope", "zones": ["not", "a", "map"],
    })
    assert record.rounds == ()
    assert record.zones is None
    assert get_rounds(record) == []


def test_session_from_mapping_legacy_zone_stats():
    record = session_from_mapping({
        "id": "abc", "userId": "u", "date": "2025-08-24", "trainingType": "spot",
        "zones": {"top_key": {"attempts": 10, "made": 6}, "corner": None},
    })
    assert record.zones["top_key"] == LegacyZoneStat(attempts=10, made=6)
    assert record.zones["corner"] == LegacyZoneStat()
    assert sum(r.attempts for r in get_rounds(record)) == 10
