"""SmartShooter Application Package — practice session logging and shot statistics.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
