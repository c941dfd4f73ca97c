"""Services Layer — orchestration around the pure core (editor state, save flow).

Invariants:
    - Services call core functions for every rule; they add IO ordering only
"""
