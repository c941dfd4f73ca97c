"""Numeric Coercion — boundary defence for counts coming from loosely-typed records.

Invariants:
    - to_number never raises: non-numeric, NaN and ±inf all become 0
    - bools are not treated as counts (True is not 1 attempt)
    - clamp_made always returns a value in [0, attempts] for attempts >= 0
"""

import math


def to_number(value: object) -> float | int:
    """Coerce any value to a finite number, defaulting to 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return 0
        if not math.isfinite(parsed):
            return 0
        return int(parsed) if parsed.is_integer() else parsed
    return 0


def to_count(value: object) -> int:
    """Coerce to a non-negative integer count (fractions truncated)."""
    return max(0, int(to_number(value)))


def clamp_attempts(attempts: object) -> float | int:
    return max(0, to_number(attempts))


def clamp_made(made: object, attempts: float | int) -> float | int:
    """Clamp made into [0, attempts]. attempts is assumed already clamped."""
    return max(0, min(to_number(made), attempts))
