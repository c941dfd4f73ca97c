"""Database Base — SQLAlchemy declarative base shared by all ORM models.

Invariants:
    - Engine and sessions live in infrastructure/database.py, not here
"""
