"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SessionId, EditorId wrap UUIDs; UserId wraps the caller-supplied identity string
    - All closed vocabularies encoded as str Enums — no raw string matching
    - TrainingType is open at the data level (Session.training_type is a str);
      the enum lists the values the editor offers

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SessionId = NewType("SessionId", UUID)
EditorId = NewType("EditorId", UUID)
UserId = NewType("UserId", str)


# ─── Enums ───────────────────────────────────────────────────────

class ZoneGroup(str, Enum):
    """Zone presets — five zones sharing a court area."""
    THREE_POINT = "3PT"
    MIDRANGE = "MID"
    PAINT = "PAINT"


class Direction(str, Enum):
    """Traversal order of a zone group's labels."""
    LTR = "ltr"
    RTL = "rtl"


class DirectionMode(str, Enum):
    """Whether the grid shares one direction or keeps one per bucket."""
    GLOBAL = "global"
    PER_BUCKET = "per_bucket"


class TrainingType(str, Enum):
    SPOT = "spot"
    CATCH_AND_SHOOT = "catch_and_shoot"
    OFF_DRIBBLE = "off_dribble"
    RUN_HALF_COURT = "run_half_court"


DEFAULT_ZONE_GROUP = ZoneGroup.THREE_POINT
DEFAULT_DIRECTION = Direction.LTR
DEFAULT_TRAINING_TYPE = TrainingType.CATCH_AND_SHOOT


class EditorMode(str, Enum):
    """Grid entry over a zone preset, or a free-form round list."""
    GRID = "grid"
    LIST = "list"
