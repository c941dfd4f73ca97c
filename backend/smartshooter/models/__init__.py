"""ORM Models — SQLAlchemy declarative models for persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from smartshooter.models.practice_session import PracticeSession  # noqa: F401
