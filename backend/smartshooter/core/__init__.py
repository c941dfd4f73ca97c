"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic; preview helpers never raise

Design Decisions:
    - Functional core separated from imperative shell (grid state, normalization
      and aggregation here; persistence and HTTP in the shell)
"""
