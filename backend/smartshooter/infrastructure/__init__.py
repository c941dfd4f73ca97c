"""Infrastructure Layer — persistence and cross-cutting concerns.

Invariants:
    - Infrastructure may use core types but holds no shot-stat rules itself
    - Database exceptions are mapped to core DatabaseError before leaving this layer
"""
