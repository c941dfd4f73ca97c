"""Session Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - SessionDraftIn.date is a real calendar date in YYYY-MM-DD form
    - Round counts are NOT range-checked here: made > attempts and negatives are
      reported by the draft assembler with the offending round index
    - CellPatch must change at least one of attempts/made/type

Design Decisions:
    - Literal / Enum types over free strings where the vocabulary is closed
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

from datetime import date as date_cls
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from smartshooter.core.domain_types import Direction, DirectionMode, EditorMode
from smartshooter.core.session_types import Round


class RoundIn(BaseModel):
    """One round as sent by a client."""
    idx: int = Field(0, ge=0)
    zone: str = Field("", max_length=100)
    attempts: int = 0
    made: int = 0
    type: str | None = Field(None, max_length=40)
    duration_sec: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=500)

    def to_round(self) -> Round:
        return Round(**self.model_dump())


class SessionDraftIn(BaseModel):
    """Create/update payload — header fields plus the round list."""
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    training_type: str = Field("catch_and_shoot", min_length=1, max_length=40)
    zone_group: str = Field("3PT", max_length=10)
    notes: str | None = Field(None, max_length=500)
    rounds: list[RoundIn] = Field(default_factory=list)

    @field_validator("date")
    @classmethod
    def check_calendar_date(cls, v: str) -> str:
        date_cls.fromisoformat(v)  # ValueError -> 400 validation error
        return v

    @field_validator("training_type")
    @classmethod
    def strip_training_type(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("training_type cannot be empty or whitespace")
        return v


class PreviewRequest(BaseModel):
    rounds: list[RoundIn] = Field(default_factory=list)


class TotalsOut(BaseModel):
    attempts: int
    made: int
    rounds_count: int
    pct: float


class ZoneAggregateOut(BaseModel):
    attempts: int
    made: int
    pct: float
    rounds_count: int


class SessionSummaryOut(BaseModel):
    """List row — header fields plus derived totals."""
    id: str
    date: str
    training_type: str
    zone_group: str | None = None
    totals: TotalsOut


class SessionDetailOut(SessionSummaryOut):
    notes: str | None = None
    rounds: list[dict]
    by_zone: dict[str, ZoneAggregateOut]


# --- Editor -------------------------------------------------------------------

class EditorCreate(BaseModel):
    """Open an editor — empty, or hydrated from a saved session."""
    session_id: UUID | None = None
    mode: EditorMode = EditorMode.GRID
    zone_group: str | None = Field(None, max_length=10)


class EditorUpdate(BaseModel):
    """Header and grid settings; every field optional."""
    date: str | None = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    training_type: str | None = Field(None, min_length=1, max_length=40)
    notes: str | None = Field(None, max_length=500)
    rounds_count: int | None = Field(None, ge=1)
    zone_group: str | None = Field(None, max_length=10)
    direction_mode: DirectionMode | None = None
    autofill_first_zone: bool | None = None

    @field_validator("date")
    @classmethod
    def check_calendar_date(cls, v: str | None) -> str | None:
        if v is not None:
            date_cls.fromisoformat(v)
        return v

    def header_fields(self) -> dict:
        return self.model_dump(
            include={"date", "training_type", "notes"}, exclude_none=True,
        )

    def grid_fields(self) -> dict:
        return self.model_dump(
            include={
                "rounds_count", "zone_group", "direction_mode",
                "autofill_first_zone",
            },
            exclude_none=True,
        )


class DirectionUpdate(BaseModel):
    direction: Direction


class CellPatch(BaseModel):
    """Edit one grid cell, addressed by bucket (path) and zone (body)."""
    zone: str = Field(min_length=1, max_length=100)
    attempts: int | None = None
    made: int | None = None
    type: str | None = Field(None, max_length=40)

    @model_validator(mode="after")
    def require_change(self):
        if self.attempts is None and self.made is None and self.type is None:
            raise ValueError("cell patch requires attempts, made or type")
        return self

    def patch(self) -> dict:
        return self.model_dump(
            include={"attempts", "made", "type"}, exclude_none=True,
        )


class RoundPatch(BaseModel):
    zone: str | None = Field(None, max_length=100)
    attempts: int | None = None
    made: int | None = None
    type: str | None = Field(None, max_length=40)
    duration_sec: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=500)

    def patch(self) -> dict:
        return self.model_dump(exclude_none=True)


class RoundMove(BaseModel):
    direction: Literal["up", "down"]
