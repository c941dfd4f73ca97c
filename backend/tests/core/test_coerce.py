"""Numeric coercion at the aggregation boundary."""

import math

from smartshooter.core.coerce import clamp_made, to_count, to_number


def test_to_number_passes_finite_numbers():
    assert to_number(7) == 7
    assert to_number(2.5) == 2.5


def test_to_number_defends_non_finite_and_garbage():
    assert to_number(math.nan) == 0
    assert to_number(math.inf) == 0
    assert to_number(-math.inf) == 0
    assert to_number(None) == 0
    assert to_number("abc") == 0
    assert to_number([1, 2]) == 0
    assert to_number(True) == 0


def test_to_number_parses_numeric_strings():
    assert to_number(" 12 ") == 12
    assert to_number("1.5") == 1.5
    assert to_number("nan") == 0


def test_to_count_floors_at_zero():
    assert to_count(-4) == 0
    assert to_count("9") == 9
    assert to_count(3.9) == 3


def test_clamp_made_stays_within_attempts():
    assert clamp_made(8, 5) == 5
    assert clamp_made(-1, 5) == 0
    assert clamp_made(3, 5) == 3
