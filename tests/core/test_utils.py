from fractions import Fraction
import math

import pytest

from physquant.core.exceptions import InvalidArgumentError
from physquant.core.utils import (
    confidence_quantile,
    is_integral,
    is_number,
    leading_exponent,
    leading_three_digits,
    pdg_significant_digits,
    round_half_up_to_place,
    to_fraction,
)


@pytest.mark.parametrize("x", [1, 2.5, Fraction(1, 3), -7])
def test_is_number_accepts_reals(x):
    assert is_number(x)

@pytest.mark.parametrize("x", [True, "1", None, 1j, [1]])
def test_is_number_rejects_others(x):
    assert not is_number(x)


def test_to_fraction_uses_shortest_repr():
    assert to_fraction(0.0254) == Fraction(127, 5000)
    assert to_fraction(3) == Fraction(3)
    assert to_fraction(Fraction(2, 7)) == Fraction(2, 7)

@pytest.mark.parametrize("x", [math.inf, math.nan, True, "2"])
def test_to_fraction_rejects(x):
    with pytest.raises(InvalidArgumentError):
        to_fraction(x)


def test_is_integral():
    assert is_integral(3)
    assert is_integral(3.0)
    assert is_integral(Fraction(6, 3))
    assert not is_integral(2.5)
    assert not is_integral(Fraction(1, 2))
    assert not is_integral(math.inf)


def test_confidence_quantile_known_values():
    assert math.isclose(confidence_quantile(0.95, True), 1.959963984540054, rel_tol=1e-12)
    assert math.isclose(confidence_quantile(0.95, False), 1.6448536269514722, rel_tol=1e-12)
    assert math.isclose(confidence_quantile(0.6826894921370859, True), 1.0, rel_tol=1e-9)

@pytest.mark.parametrize("p", [0.0, 1.0, -0.5, 1.5])
def test_confidence_quantile_rejects_levels_outside_open_interval(p):
    with pytest.raises(InvalidArgumentError):
        confidence_quantile(p, True)


@pytest.mark.parametrize(
    "x, exponent",
    [(0.119, -1), (1.0, 0), (999.0, 2), (0.001, -3), (-42.0, 1), (1e-5, -5)],
)
def test_leading_exponent(x, exponent):
    assert leading_exponent(x) == exponent


@pytest.mark.parametrize(
    "x, expected",
    [
        (0.119, (119, -1)),
        (0.367, (367, -1)),
        (12.345, (123, 1)),
        (0.1235, (124, -1)),     # half-up
        (0.9996, (100, 0)),      # carry into the next decade
        (5.0, (500, 0)),
    ],
)
def test_leading_three_digits(x, expected):
    assert leading_three_digits(x) == expected


@pytest.mark.parametrize(
    "error, expected",
    [
        (0.119, (2, -2)),
        (0.354, (2, -2)),
        (0.355, (1, -1)),
        (0.367, (1, -1)),
        (0.949, (1, -1)),
        (0.950, (2, -1)),
        (0.999, (2, -1)),
        (25.0, (2, 0)),
        (7.0, (1, 0)),
    ],
)
def test_pdg_significant_digits(error, expected):
    assert pdg_significant_digits(error) == expected


@pytest.mark.parametrize(
    "x, place, expected",
    [
        (0.827, -2, 0.83),
        (0.825, -2, 0.83),       # ties away from zero
        (0.827, -1, 0.8),
        (0.97, -1, 1.0),
        (1234.5, 0, 1235.0),
        (1234.5, 2, 1200.0),
        (-0.125, -2, -0.13),
    ],
)
def test_round_half_up_to_place(x, place, expected):
    assert round_half_up_to_place(x, place) == expected

@pytest.mark.regression(reason="quantize ran out of digits in the default decimal context")
@pytest.mark.parametrize(
    "x, place",
    [(6.02214076e23, -5), (1e30, -2), (-1.5e40, -10)],
)
def test_round_half_up_to_place_beyond_default_precision(x, place):
    assert round_half_up_to_place(x, place) == x
