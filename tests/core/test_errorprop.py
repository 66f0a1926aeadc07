import math

import pytest

from physquant.core.errorprop import propagate
from physquant.core.exceptions import ErrorPropagationError, Recovery, recovering
from physquant.core.quantity import make_quantity


def test_no_terms_gives_zero():
    assert propagate() == 0.0


def test_single_term_is_its_magnitude():
    x = make_quantity(3, 0.2)
    assert math.isclose(propagate((x, -4.0)), 0.8)


def test_two_or_more_terms_add_in_quadrature():
    x = make_quantity(1, 0.3)
    y = make_quantity(1, 0.4)
    z = make_quantity(1, 1.2)
    assert math.isclose(propagate((x, 1), (y, 1)), 0.5)
    assert math.isclose(propagate((x, 1), (y, 1), (z, 1)), 1.3)


def test_derivatives_scale_contributions():
    x = make_quantity(1, 0.1)
    y = make_quantity(1, 0.1)
    assert math.isclose(propagate((x, 3), (y, 4)), 0.5)


def test_relative_errors_are_converted_to_absolute():
    x = make_quantity(50, 0.02, relative=True)
    assert math.isclose(propagate((x, 1)), 1.0)


def test_callable_derivative_is_evaluated():
    x = make_quantity(2, 0.1)
    assert math.isclose(propagate((x, lambda: 2 * x.value)), 0.4)


def test_error_free_terms_are_skipped_without_evaluating():
    calls = []

    def derivative():
        calls.append(1)
        return 1 / 0

    exact = make_quantity(0, 0)
    noisy = make_quantity(1, 0.1)
    assert math.isclose(propagate((exact, derivative), (noisy, 2)), 0.2)
    assert calls == []


@pytest.mark.parametrize(
    "derivative",
    [lambda: 1 / 0, lambda: math.log(-1), lambda: math.inf, math.nan, lambda: float("nan")],
)
def test_undefined_derivative_raises(derivative):
    x = make_quantity(0, 0.1)
    with pytest.raises(ErrorPropagationError) as info:
        propagate((x, derivative), operation="trial")
    assert "trial" in str(info.value)
    assert info.value.recoveries == (Recovery.DROP_UNCERTAINTY,)


def test_undefined_derivative_recovery_per_call():
    x = make_quantity(0, 0.1)
    assert propagate((x, lambda: 1 / 0), recover=Recovery.DROP_UNCERTAINTY) == 0.0


def test_undefined_derivative_recovery_for_block():
    x = make_quantity(0, 0.1)
    with recovering(Recovery.DROP_UNCERTAINTY):
        assert propagate((x, lambda: 1 / 0)) == 0.0
    with pytest.raises(ErrorPropagationError):
        propagate((x, lambda: 1 / 0))


def test_other_recovery_does_not_apply():
    x = make_quantity(0, 0.1)
    with pytest.raises(ErrorPropagationError):
        propagate((x, lambda: 1 / 0), recover=Recovery.DROP_UNIT)
