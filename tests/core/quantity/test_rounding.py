import math

import pytest

from physquant.core.exceptions import (
    ErrorPropagationError,
    InvalidArgumentError,
    OperationUndefinedError,
    Recovery,
    UnitConversionError,
)
from physquant.core.operations import (
    PdgRounding,
    absolute,
    qceiling,
    qfloor,
    qround,
    qtruncate,
    round_to_pdg,
)
from physquant.core.quantity import make_quantity
from physquant.core.unit import Unit

M = Unit("metre")

# -------------------------------
# PDG rounding
# -------------------------------

def test_pdg_two_digits_for_leading_119():
    r = round_to_pdg(make_quantity(0.827, 0.119))
    assert isinstance(r, PdgRounding)
    assert r.quantity.value == 0.83
    assert r.quantity.absolute_error == 0.12
    assert (r.digits, r.place) == (2, -2)

def test_pdg_one_digit_for_leading_367():
    r = round_to_pdg(make_quantity(0.827, 0.367))
    assert r.quantity.value == 0.8
    assert r.quantity.absolute_error == 0.4
    assert (r.digits, r.place) == (1, -1)

def test_pdg_leading_950_rounds_up_to_next_power_of_ten():
    r = round_to_pdg(make_quantity(5.4321, 0.097))
    assert r.quantity.absolute_error == 0.1
    assert r.quantity.value == 5.43
    assert (r.digits, r.place) == (2, -2)

@pytest.mark.parametrize(
    "value, error, rounded_value, rounded_error",
    [
        (1234.5678, 35.4, 1235.0, 35.0),
        (1234.5678, 35.5, 1230.0, 40.0),
        (0.012345, 0.00123, 0.0123, 0.0012),
        (-7.777, 0.5, -7.8, 0.5),
        (100.0, 2.0, 100.0, 2.0),
    ],
)
def test_pdg_examples(value, error, rounded_value, rounded_error):
    q = round_to_pdg(make_quantity(value, error)).quantity
    assert math.isclose(q.value, rounded_value)
    assert math.isclose(q.absolute_error, rounded_error)

def test_pdg_keeps_unit_and_uses_absolute_error_of_relative_quantity():
    r = round_to_pdg(make_quantity(200, 0.0612, M, relative=True))
    # absolute error 12.24 -> 12
    assert r.quantity.unit == M
    assert r.quantity.absolute_error == 12.0
    assert r.quantity.value == 200.0

def test_pdg_zero_error_rounds_to_integer():
    r = round_to_pdg(make_quantity(12.6))
    assert r.quantity.value == 13.0
    assert r.place == 0
    assert not r.quantity.has_error

def test_pdg_explicit_digits():
    r = round_to_pdg(make_quantity(0.827, 0.367), digits=2)
    assert r.quantity.value == 0.83
    assert r.quantity.absolute_error == 0.37
    assert (r.digits, r.place) == (2, -2)

def test_pdg_explicit_place():
    r = round_to_pdg(make_quantity(0.827, 0.119), place=-1)
    assert r.quantity.value == 0.8
    assert r.quantity.absolute_error == 0.1
    assert (r.digits, r.place) == (1, -1)

def test_pdg_explicit_digits_for_exact_value():
    r = round_to_pdg(make_quantity(123.456), digits=4)
    assert r.quantity.value == 123.5
    assert r.place == -1

def test_pdg_rejects_digits_and_place_together():
    with pytest.raises(InvalidArgumentError):
        round_to_pdg(make_quantity(1, 0.1), digits=1, place=-1)

@pytest.mark.parametrize("digits", [0, -1, 1.5])
def test_pdg_rejects_bad_digits(digits):
    with pytest.raises(InvalidArgumentError):
        round_to_pdg(make_quantity(1, 0.1), digits=digits)

# -------------------------------
# qround & friends
# -------------------------------

@pytest.mark.parametrize(
    "fn, expected",
    [(qround, 2.0), (qfloor, 2.0), (qceiling, 3.0), (qtruncate, 2.0)],
)
def test_integer_rounding(fn, expected):
    q = fn(make_quantity(2.4, 0.1, M))
    assert q.value == expected
    assert q.unit == M
    assert q.absolute_error == 0.1

@pytest.mark.parametrize(
    "fn, expected",
    [(qround, -2.0), (qfloor, -3.0), (qceiling, -2.0), (qtruncate, -2.0)],
)
def test_integer_rounding_negative(fn, expected):
    assert fn(-2.4).value == expected

def test_qround_ties_to_even():
    assert qround(2.5).value == 2.0
    assert qround(3.5).value == 4.0

def test_rounding_to_divisor_in_other_unit():
    q = qfloor(make_quantity(1234, 0, M), make_quantity(1, 0, "kilometre"))
    assert q.value == 1000.0
    assert q.unit == M

def test_rounding_to_number_divisor_uses_own_unit():
    assert qceiling(make_quantity(1234, 0, M), 100).value == 1300.0
    assert math.isclose(qround(make_quantity(0.337, 0), 0.05).value, 0.35)

def test_rounding_divisor_must_be_nonzero_and_compatible():
    with pytest.raises(OperationUndefinedError):
        qround(1.5, 0)
    with pytest.raises(UnitConversionError):
        qround(make_quantity(1, 0, M), make_quantity(1, 0, "second"))

# -------------------------------
# absolute
# -------------------------------

def test_absolute_keeps_unit_and_error():
    q = absolute(make_quantity(-3, 0.2, M))
    assert q.value == 3.0
    assert q.absolute_error == 0.2
    assert q.unit == M
    assert abs(make_quantity(-3, 0.2, M)) == q

def test_absolute_of_exact_zero():
    assert absolute(0).value == 0.0

@pytest.mark.regression(reason="abs has no derivative at zero")
def test_absolute_at_zero_with_error():
    with pytest.raises(ErrorPropagationError) as info:
        absolute(make_quantity(0, 0.1, M))
    assert info.value.offers(Recovery.DROP_UNCERTAINTY)
    q = absolute(make_quantity(0, 0.1, M), recover=Recovery.DROP_UNCERTAINTY)
    assert q.value == 0.0 and not q.has_error and q.unit == M

@pytest.mark.regression(reason="large values rounded to a small place need more than 28 digits")
def test_pdg_large_value_with_small_error():
    r = round_to_pdg(make_quantity(6.02214076e23, 0.0001))
    assert r.quantity.value == 6.02214076e23
    assert r.quantity.absolute_error == 0.0001
    assert (r.digits, r.place) == (2, -5)

    r = round_to_pdg(make_quantity(1e30, 0.119))
    assert r.quantity.value == 1e30
    assert r.quantity.absolute_error == 0.12
