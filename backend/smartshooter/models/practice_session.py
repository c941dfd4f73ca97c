"""Practice Session ORM — persists one practice log and its rounds.

Invariants:
    - id is UUID primary key (server-default)
    - rounds stores the canonical, idx-ordered round list as written by the editor
    - zones is legacy (pre-rounds documents); written only by imports, never by the editor
    - date is an ISO calendar date string (YYYY-MM-DD), sortable as text

Design Decisions:
    - JSON columns for rounds/zones: rounds are always read and written as a whole
    - No totals column: totals are derived on read by the aggregation engine
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from smartshooter.db.base import Base


class PracticeSession(Base):
    """Practice session aggregate root — owns its rounds."""
    __tablename__ = "practice_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True,
    )
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    training_type: Mapped[str] = mapped_column(
        String(40), nullable=False, default="catch_and_shoot",
    )
    zone_group: Mapped[str | None] = mapped_column(
        String(10), nullable=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rounds: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    zones: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
