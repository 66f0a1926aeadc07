"""
physquant.core.operations
=========================

Quantity operations: arithmetic, powers and roots, transcendental functions,
rounding, unit conversion and comparisons.

Every operation accepts quantities or plain numbers (coerced by
:func:`~physquant.core.quantity.as_quantity`), validates its arguments, then
computes the value, the unit and the propagated error, in that order. Inputs
are never modified.

Operations that look units up (conversion, dimensionless checks) take an
optional ``catalog``; ``None`` means the default SI catalog. Operations whose
failures can be worked around take ``recover``, see
:mod:`physquant.core.exceptions`.

Examples
--------
>>> from physquant import make_quantity, add, q_eq
>>> d = add(make_quantity(1, 0.1, "kilometre"), make_quantity(250, 5, "metre"))
>>> d.value, round(d.absolute_error, 6)
(1.25, 0.100125)
>>> q_eq(make_quantity(10, 1), 10.5)
True
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Any, Callable, NamedTuple, Optional

from physquant.config import get_settings
from physquant.core.errorprop import propagate
from physquant.core.exceptions import (
    ErrorPropagationError,
    InvalidArgumentError,
    InvalidUnitOperationError,
    OperationUndefinedError,
    Recovery,
    RecoverySpec,
    recovery_allowed,
)
from physquant.core.quantity import NO_ERROR, AbsoluteError, Quantity, as_quantity
from physquant.core.unit import (
    DIMENSIONLESS,
    Unit,
    UnitLike,
    divide_units,
    multiply_units,
    power_unit,
    render_unit,
    root_unit,
    units_equal,
)
from physquant.core.utils import (
    confidence_quantile,
    is_integral,
    is_number,
    leading_exponent,
    pdg_significant_digits,
    round_half_up_to_place,
)
from physquant.logger import logger
from physquant.units.registry import UnitCatalog, get_catalog


# ---------------------------------------------------------------------------
# Shared validation
# ---------------------------------------------------------------------------

def _scaled(q: Quantity, factor: Fraction, unit: UnitLike) -> Quantity:
    f = float(factor)
    return Quantity(q.value * f, q.error.scaled(f), unit)


def _to_unit(q: Quantity, unit: Unit, catalog: Optional[UnitCatalog]) -> Quantity:
    if units_equal(q.unit, unit):
        return q
    return _scaled(q, get_catalog(catalog).conversion_factor(q.unit, unit), unit)


def _require_unitless(
    q: Quantity, operation: str, recover: RecoverySpec, catalog: Optional[UnitCatalog]
) -> Quantity:
    """Return ``q`` as a dimensionless quantity.

    Units that expand to nothing (radian, degree, percent-like units) are
    converted; any other unit raises unless ``DROP_UNIT`` is requested.
    """
    if q.is_unitless:
        return q
    cat = get_catalog(catalog)
    if all(cat.has_unit(f.name) for f in q.unit):
        base, factor = cat.expand(q.unit)
        if not base:
            return _scaled(q, factor, DIMENSIONLESS)
    if recovery_allowed(Recovery.DROP_UNIT, recover):
        logger.debug(f"{operation}: dropping unit '{render_unit(q.unit)}'")
        return q.without_unit()
    raise InvalidUnitOperationError(
        f"{operation} requires a dimensionless argument, got '{render_unit(q.unit)}'",
        recoveries=(Recovery.DROP_UNIT,),
    )


def _require_exact(q: Quantity, operation: str, recover: RecoverySpec) -> Quantity:
    if not q.has_error:
        return q
    if recovery_allowed(Recovery.DROP_UNCERTAINTY, recover):
        logger.debug(f"{operation}: dropping uncertainty {q.error!r}")
        return q.without_error()
    raise OperationUndefinedError(
        f"{operation} must be exact, got an uncertainty of {q.absolute_error!r}",
        recoveries=(Recovery.DROP_UNCERTAINTY,),
    )


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

def convert(x: Any, target: UnitLike, catalog: Optional[UnitCatalog] = None) -> Any:
    """Express ``x`` in ``target``.

    A plain number is treated as dimensionless and a plain number is returned.
    Absolute uncertainties scale with the value; relative ones are unchanged.

    Raises
    ------
    UnitConversionError
        If the base expansions of the two units differ.
    """
    target = Unit(target)
    if is_number(x):
        return float(x) * float(get_catalog(catalog).conversion_factor(DIMENSIONLESS, target))
    q = as_quantity(x)
    return _scaled(q, get_catalog(catalog).conversion_factor(q.unit, target), target)


def convert_to_base(x: Any, catalog: Optional[UnitCatalog] = None) -> Quantity:
    """Express ``x`` in the base units its unit expands to."""
    q = as_quantity(x)
    base, factor = get_catalog(catalog).expand(q.unit)
    return _scaled(q, factor, base)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def add(*operands: Any, catalog: Optional[UnitCatalog] = None) -> Quantity:
    """Sum in the unit of the first operand; errors add in quadrature."""
    if not operands:
        raise InvalidArgumentError("add needs at least one operand")
    first, *rest = (as_quantity(q) for q in operands)
    converted = [first] + [_to_unit(q, first.unit, catalog) for q in rest]
    value = math.fsum(q.value for q in converted)
    error = propagate(*((q, 1.0) for q in converted), operation="add")
    return Quantity(value, AbsoluteError(error), first.unit)


def subtract(*operands: Any, catalog: Optional[UnitCatalog] = None) -> Quantity:
    """``q1 - q2 - ...``; a single operand is negated."""
    if not operands:
        raise InvalidArgumentError("subtract needs at least one operand")
    first, *rest = (as_quantity(q) for q in operands)
    if not rest:
        return Quantity(-first.value, first.error, first.unit)
    converted = [_to_unit(q, first.unit, catalog) for q in rest]
    value = first.value - math.fsum(q.value for q in converted)
    error = propagate((first, 1.0), *((q, -1.0) for q in converted), operation="subtract")
    return Quantity(value, AbsoluteError(error), first.unit)


def _product_error(value: float, operands: list[Quantity], operation: str) -> float:
    if not math.isfinite(value):
        raise OperationUndefinedError(f"{operation} overflows: the result is {value!r}")
    if value == 0.0:
        return 0.0
    error = abs(value) * math.fsum(q.relative_error for q in operands if q.has_error)
    if not math.isfinite(error):
        raise OperationUndefinedError(f"{operation} overflows: the uncertainty is {error!r}")
    return error


def multiply(*operands: Any) -> Quantity:
    quantities = [as_quantity(q) for q in operands]
    value = math.prod(q.value for q in quantities)
    unit = multiply_units(*(q.unit for q in quantities))
    return Quantity(value, AbsoluteError(_product_error(value, quantities, "multiply")), unit)


def divide(*operands: Any) -> Quantity:
    """``q1 / q2 / ...``; a single operand gives its reciprocal."""
    if not operands:
        raise InvalidArgumentError("divide needs at least one operand")
    quantities = [as_quantity(q) for q in operands]
    if len(quantities) == 1:
        quantities.insert(0, as_quantity(1))
    first, *rest = quantities
    if any(q.value == 0.0 for q in rest):
        raise OperationUndefinedError("Division by a quantity with value zero")
    value = first.value
    for q in rest:
        value /= q.value
    unit = divide_units(*(q.unit for q in quantities))
    return Quantity(value, AbsoluteError(_product_error(value, quantities, "divide")), unit)


# ---------------------------------------------------------------------------
# Powers and roots
# ---------------------------------------------------------------------------

def power(
    base: Any,
    exponent: Any,
    *,
    recover: RecoverySpec = None,
    catalog: Optional[UnitCatalog] = None,
) -> Quantity:
    """Raise ``base`` to an exact, dimensionless, integer ``exponent``."""
    x = as_quantity(base)
    e = _require_unitless(as_quantity(exponent), "power exponent", recover, catalog)
    e = _require_exact(e, "power exponent", recover)
    if not is_integral(e.value):
        raise OperationUndefinedError(
            f"power needs an integer exponent, got {e.value!r}; use general_power"
        )
    n = int(e.value)
    if n == 0:
        return Quantity(1.0, NO_ERROR, DIMENSIONLESS)
    if x.value == 0.0 and n < 0:
        raise OperationUndefinedError(f"Cannot raise zero to the negative power {n}")

    try:
        value = x.value ** n
    except OverflowError as exc:
        raise OperationUndefinedError(f"{x.value!r} ** {n} overflows") from exc
    unit = power_unit(x.unit, n)
    error = propagate((x, lambda: n * x.value ** (n - 1)), operation="power", recover=recover)
    return Quantity(value, AbsoluteError(error), unit)


def _real_root(v: float, n: int) -> float:
    if n == 2:
        return math.sqrt(v)
    if n == 3:
        return math.cbrt(v)
    if v < 0:
        return -((-v) ** (1.0 / n))
    return v ** (1.0 / n)


def root(
    radicand: Any,
    degree: Any,
    *,
    recover: RecoverySpec = None,
    catalog: Optional[UnitCatalog] = None,
) -> Quantity:
    """``degree``-th root. Units are expanded to base units when needed.

    Raises
    ------
    OperationUndefinedError
        For an even root of a negative value, or a degree that is not a
        positive integer.
    InvalidUnitOperationError
        If neither the unit nor its base expansion has powers divisible by
        ``degree``.
    """
    x = as_quantity(radicand)
    d = _require_unitless(as_quantity(degree), "root degree", recover, catalog)
    d = _require_exact(d, "root degree", recover)
    if not is_integral(d.value) or d.value <= 0:
        raise OperationUndefinedError(f"Root degree must be a positive integer, got {d.value!r}")
    n = int(d.value)
    if x.value < 0 and n % 2 == 0:
        raise OperationUndefinedError(f"Even root (degree {n}) of negative value {x.value!r}")

    try:
        unit = root_unit(x.unit, n)
    except OperationUndefinedError:
        cat = get_catalog(catalog)
        base, factor = cat.expand(x.unit)
        try:
            unit = root_unit(base, n)
        except OperationUndefinedError as exc:
            if not recovery_allowed(Recovery.DROP_UNIT, recover):
                raise InvalidUnitOperationError(
                    f"Cannot take root of degree {n} of '{render_unit(x.unit)}' "
                    f"(base units '{render_unit(base)}')",
                    recoveries=(Recovery.DROP_UNIT,),
                ) from exc
            logger.debug(f"root: dropping unit '{render_unit(x.unit)}'")
            unit = DIMENSIONLESS
        else:
            x = _scaled(x, factor, base)

    value = _real_root(x.value, n)
    error = propagate((x, lambda: value / (n * x.value)), operation="root", recover=recover)
    return Quantity(value, AbsoluteError(error), unit)


def sqrt(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return root(x, 2, recover=recover, catalog=catalog)


def general_power(
    base: Any,
    exponent: Any,
    *,
    recover: RecoverySpec = None,
    catalog: Optional[UnitCatalog] = None,
) -> Quantity:
    """``base ** exponent`` for any real exponent.

    Exact integers go through :func:`power`, exact :class:`~fractions.Fraction`
    exponents ``p/q`` through ``root(power(base, p), q)`` (so ``metre ** 2``
    to the ``1/2`` keeps its unit). Anything else needs a dimensionless base
    and propagates the error of both base and exponent.
    """
    if isinstance(exponent, int) and not isinstance(exponent, bool):
        return power(base, exponent, recover=recover, catalog=catalog)
    if isinstance(exponent, Fraction):
        raised = power(base, exponent.numerator, recover=recover, catalog=catalog)
        if exponent.denominator == 1:
            return raised
        return root(raised, exponent.denominator, recover=recover, catalog=catalog)

    x = as_quantity(base)
    e = _require_unitless(as_quantity(exponent), "general_power exponent", recover, catalog)
    if not e.has_error and is_integral(e.value):
        return power(x, e, recover=recover, catalog=catalog)

    x = _require_unitless(x, "general_power base", recover, catalog)
    if x.value < 0:
        if e.has_error:
            if not recovery_allowed(Recovery.DROP_UNCERTAINTY, recover):
                raise ErrorPropagationError(
                    "Cannot propagate the exponent's uncertainty for a negative base "
                    f"{x.value!r}: the derivative needs its logarithm",
                    recoveries=(Recovery.DROP_UNCERTAINTY,),
                )
            logger.debug(f"general_power: dropping exponent uncertainty {e.error!r}")
            e = e.without_error()
            if is_integral(e.value):
                return power(x, e, recover=recover, catalog=catalog)
        raise OperationUndefinedError(
            f"Negative base {x.value!r} to non-integer exponent {e.value!r} has no real value"
        )

    b, p = x.value, e.value
    try:
        value = b ** p
    except ZeroDivisionError as exc:
        raise OperationUndefinedError(f"Cannot raise zero to the negative power {p!r}") from exc
    except OverflowError as exc:
        raise OperationUndefinedError(f"{b!r} ** {p!r} overflows") from exc
    error = propagate(
        (x, lambda: p * b ** (p - 1)),
        (e, lambda: value * math.log(b)),
        operation="general_power",
        recover=recover,
    )
    return Quantity(value, AbsoluteError(error), DIMENSIONLESS)


# ---------------------------------------------------------------------------
# Transcendental functions
# ---------------------------------------------------------------------------

class _Function(NamedTuple):
    name: str
    func: Callable[[float], float]
    derivative: Callable[[float], float]


def _apply(fn: _Function, x: Any, recover: RecoverySpec, catalog: Optional[UnitCatalog]) -> Quantity:
    q = _require_unitless(as_quantity(x), fn.name, recover, catalog)
    try:
        value = fn.func(q.value)
    except (ValueError, OverflowError) as exc:
        raise OperationUndefinedError(f"{fn.name} is undefined for {q.value!r}") from exc
    error = propagate((q, lambda: fn.derivative(q.value)), operation=fn.name, recover=recover)
    return Quantity(value, AbsoluteError(error), DIMENSIONLESS)


def _ln(v: float) -> float:
    if v <= 0:
        raise ValueError("math domain error")
    return math.log(v)


_EXP = _Function("exp", math.exp, math.exp)
_LN = _Function("ln", _ln, lambda v: 1.0 / v)
_SIN = _Function("sin", math.sin, math.cos)
_COS = _Function("cos", math.cos, lambda v: -math.sin(v))
_TAN = _Function("tan", math.tan, lambda v: 1.0 / math.cos(v) ** 2)
_ASIN = _Function("asin", math.asin, lambda v: 1.0 / math.sqrt(1.0 - v * v))
_ACOS = _Function("acos", math.acos, lambda v: -1.0 / math.sqrt(1.0 - v * v))
_ATAN = _Function("atan", math.atan, lambda v: 1.0 / (1.0 + v * v))
_SINH = _Function("sinh", math.sinh, math.cosh)
_COSH = _Function("cosh", math.cosh, math.sinh)
_TANH = _Function("tanh", math.tanh, lambda v: 1.0 / math.cosh(v) ** 2)
_ASINH = _Function("asinh", math.asinh, lambda v: 1.0 / math.sqrt(v * v + 1.0))
_ACOSH = _Function("acosh", math.acosh, lambda v: 1.0 / math.sqrt(v * v - 1.0))
_ATANH = _Function("atanh", math.atanh, lambda v: 1.0 / (1.0 - v * v))


def exp(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_EXP, x, recover, catalog)


def ln(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_LN, x, recover, catalog)


def log(
    x: Any,
    base: Any = 10,
    *,
    recover: RecoverySpec = None,
    catalog: Optional[UnitCatalog] = None,
) -> Quantity:
    """Logarithm of ``x`` to ``base``; both may carry an uncertainty."""
    q = _require_unitless(as_quantity(x), "log", recover, catalog)
    b = _require_unitless(as_quantity(base), "log base", recover, catalog)
    if q.value <= 0:
        raise OperationUndefinedError(f"log is undefined for {q.value!r}")
    if b.value <= 0 or b.value == 1:
        raise OperationUndefinedError(f"log base must be positive and not 1, got {b.value!r}")
    ln_x, ln_b = math.log(q.value), math.log(b.value)
    value = ln_x / ln_b
    error = propagate(
        (q, lambda: 1.0 / (q.value * ln_b)),
        (b, lambda: -ln_x / (b.value * ln_b ** 2)),
        operation="log",
        recover=recover,
    )
    return Quantity(value, AbsoluteError(error), DIMENSIONLESS)


def sin(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_SIN, x, recover, catalog)


def cos(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_COS, x, recover, catalog)


def tan(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_TAN, x, recover, catalog)


def asin(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_ASIN, x, recover, catalog)


def acos(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_ACOS, x, recover, catalog)


def atan(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_ATAN, x, recover, catalog)


def sinh(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_SINH, x, recover, catalog)


def cosh(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_COSH, x, recover, catalog)


def tanh(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_TANH, x, recover, catalog)


def asinh(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_ASINH, x, recover, catalog)


def acosh(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_ACOSH, x, recover, catalog)


def atanh(x: Any, *, recover: RecoverySpec = None, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _apply(_ATANH, x, recover, catalog)


def absolute(x: Any, *, recover: RecoverySpec = None) -> Quantity:
    """``|x|``, keeping the unit and the uncertainty.

    Raises
    ------
    ErrorPropagationError
        At zero with a nonzero uncertainty, where ``abs`` has no derivative.
        ``Recovery.DROP_UNCERTAINTY`` returns an exact zero instead.
    """
    q = as_quantity(x)
    if q.value == 0.0 and q.has_error:
        if not recovery_allowed(Recovery.DROP_UNCERTAINTY, recover):
            raise ErrorPropagationError(
                "abs has no derivative at zero; cannot propagate the uncertainty",
                recoveries=(Recovery.DROP_UNCERTAINTY,),
            )
        logger.debug("absolute: dropping uncertainty at zero")
        return Quantity(0.0, NO_ERROR, q.unit)
    return Quantity(abs(q.value), q.error, q.unit)


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def _round_with(
    fn: Callable[[float], float],
    name: str,
    x: Any,
    divisor: Any,
    catalog: Optional[UnitCatalog],
) -> Quantity:
    q = as_quantity(x)
    if isinstance(divisor, Quantity):
        d = _to_unit(divisor, q.unit, catalog).value
    else:
        d = as_quantity(divisor).value
    if d == 0.0:
        raise OperationUndefinedError(f"{name}: divisor must be nonzero")
    return Quantity(fn(q.value / d) * d, AbsoluteError(q.absolute_error), q.unit)


def qround(x: Any, divisor: Any = 1, *, catalog: Optional[UnitCatalog] = None) -> Quantity:
    """Round the value to the nearest multiple of ``divisor`` (ties to even).

    A plain-number divisor is read in the unit of ``x``.
    """
    return _round_with(round, "qround", x, divisor, catalog)


def qfloor(x: Any, divisor: Any = 1, *, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _round_with(math.floor, "qfloor", x, divisor, catalog)


def qceiling(x: Any, divisor: Any = 1, *, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _round_with(math.ceil, "qceiling", x, divisor, catalog)


def qtruncate(x: Any, divisor: Any = 1, *, catalog: Optional[UnitCatalog] = None) -> Quantity:
    return _round_with(math.trunc, "qtruncate", x, divisor, catalog)


class PdgRounding(NamedTuple):
    """Result of :func:`round_to_pdg`: the rounded quantity, its significant
    digits (of the uncertainty, or of the value when exact) and the decimal
    place of the last kept digit."""

    quantity: Quantity
    digits: int
    place: int


def round_to_pdg(x: Any, digits: Optional[int] = None, place: Optional[int] = None) -> PdgRounding:
    """Round value and uncertainty following the Particle Data Group rule.

    The leading three digits of the uncertainty select how many significant
    digits it keeps: 100-354 keep two, 355-949 keep one, 950-999 round up to
    the next power of ten and keep two. The value is rounded to the same
    decimal place. An exact quantity is rounded to an integer.

    Parameters
    ----------
    digits
        Significant digits of the uncertainty to keep, overriding the rule.
    place
        Decimal place to round to (``-2`` for hundredths), overriding the rule.

    Examples
    --------
    >>> r = round_to_pdg(make_quantity(0.827, 0.119))
    >>> r.quantity.value, r.quantity.absolute_error, r.digits, r.place
    (0.83, 0.12, 2, -2)
    """
    if digits is not None and place is not None:
        raise InvalidArgumentError("Give either digits or place, not both")
    if digits is not None and (not isinstance(digits, int) or digits < 1):
        raise InvalidArgumentError(f"digits must be a positive integer, got {digits!r}")

    q = as_quantity(x)
    err = q.absolute_error
    reference = err if err else q.value

    if place is None:
        if digits is not None:
            place = (leading_exponent(reference) if reference else 0) - digits + 1
        elif err:
            digits, place = pdg_significant_digits(err)
        else:
            place = 0

    value = round_half_up_to_place(q.value, place)
    error = round_half_up_to_place(err, place) if err else 0.0
    if digits is None:
        shown = error if err else value
        digits = max(leading_exponent(shown) - place + 1, 1) if shown else 1
    return PdgRounding(Quantity(value, AbsoluteError(error), q.unit), digits, place)


# ---------------------------------------------------------------------------
# Statistical comparisons
# ---------------------------------------------------------------------------

def _confidence(p: Optional[float]) -> float:
    return get_settings().confidence if p is None else p


def _difference(x: Any, y: Any, catalog: Optional[UnitCatalog]) -> tuple[float, float]:
    """``(y - x, combined absolute error)`` in the unit of ``x``."""
    a = as_quantity(x)
    b = _to_unit(as_quantity(y), a.unit, catalog)
    return b.value - a.value, math.hypot(a.absolute_error, b.absolute_error)


def q_eq(x: Any, y: Any, p: Optional[float] = None, *, catalog: Optional[UnitCatalog] = None) -> bool:
    """``x`` and ``y`` agree within the two-sided confidence interval at level ``p``.

    Exact operands compare exactly. Operands with units must be convertible
    (``UnitConversionError`` otherwise); a plain number only matches a
    dimensionless quantity.
    """
    d, err = _difference(x, y, catalog)
    if err == 0.0:
        return d == 0.0
    return abs(d) <= err * confidence_quantile(_confidence(p), True)


def q_ne(x: Any, y: Any, p: Optional[float] = None, *, catalog: Optional[UnitCatalog] = None) -> bool:
    return not q_eq(x, y, p, catalog=catalog)


def q_lt(x: Any, y: Any, p: Optional[float] = None, *, catalog: Optional[UnitCatalog] = None) -> bool:
    """``x < y`` with one-sided confidence ``p``."""
    d, err = _difference(x, y, catalog)
    if err == 0.0:
        return d > 0.0
    return d > err * confidence_quantile(_confidence(p), False)


def q_gt(x: Any, y: Any, p: Optional[float] = None, *, catalog: Optional[UnitCatalog] = None) -> bool:
    d, err = _difference(x, y, catalog)
    if err == 0.0:
        return d < 0.0
    return d < -err * confidence_quantile(_confidence(p), False)


def q_le(x: Any, y: Any, p: Optional[float] = None, *, catalog: Optional[UnitCatalog] = None) -> bool:
    return q_lt(x, y, p, catalog=catalog) or q_eq(x, y, p, catalog=catalog)


def q_ge(x: Any, y: Any, p: Optional[float] = None, *, catalog: Optional[UnitCatalog] = None) -> bool:
    return q_gt(x, y, p, catalog=catalog) or q_eq(x, y, p, catalog=catalog)


# Comparisons against zero; the unit of x does not matter.

def q_eq0(x: Any, p: Optional[float] = None) -> bool:
    q = as_quantity(x)
    if not q.has_error:
        return q.value == 0.0
    return abs(q.value) <= q.absolute_error * confidence_quantile(_confidence(p), True)


def q_ne0(x: Any, p: Optional[float] = None) -> bool:
    return not q_eq0(x, p)


def q_lt0(x: Any, p: Optional[float] = None) -> bool:
    q = as_quantity(x)
    if not q.has_error:
        return q.value < 0.0
    return q.value < -q.absolute_error * confidence_quantile(_confidence(p), False)


def q_gt0(x: Any, p: Optional[float] = None) -> bool:
    q = as_quantity(x)
    if not q.has_error:
        return q.value > 0.0
    return q.value > q.absolute_error * confidence_quantile(_confidence(p), False)


def q_le0(x: Any, p: Optional[float] = None) -> bool:
    return q_lt0(x, p) or q_eq0(x, p)


def q_ge0(x: Any, p: Optional[float] = None) -> bool:
    return q_gt0(x, p) or q_eq0(x, p)


# ---------------------------------------------------------------------------
# Structural equality
# ---------------------------------------------------------------------------

def quantity_equal(a: Any, b: Any) -> bool:
    """Same value, same error encoding and same unit, bit for bit."""
    return as_quantity(a) == as_quantity(b)


def quantity_equal_approx(
    a: Any,
    b: Any,
    rel_tol: Optional[float] = None,
    abs_tol: Optional[float] = None,
) -> bool:
    """Like :func:`quantity_equal` with ``math.isclose`` on value and raw error."""
    settings = get_settings()
    rel_tol = settings.rel_tol if rel_tol is None else rel_tol
    abs_tol = settings.abs_tol if abs_tol is None else abs_tol
    qa, qb = as_quantity(a), as_quantity(b)
    return (
        math.isclose(qa.value, qb.value, rel_tol=rel_tol, abs_tol=abs_tol)
        and math.isclose(qa.error_raw, qb.error_raw, rel_tol=rel_tol, abs_tol=abs_tol)
        and units_equal(qa.unit, qb.unit)
    )


__all__ = [
    "convert",
    "convert_to_base",
    "add",
    "subtract",
    "multiply",
    "divide",
    "power",
    "root",
    "sqrt",
    "general_power",
    "exp",
    "ln",
    "log",
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "sinh",
    "cosh",
    "tanh",
    "asinh",
    "acosh",
    "atanh",
    "absolute",
    "qround",
    "qfloor",
    "qceiling",
    "qtruncate",
    "PdgRounding",
    "round_to_pdg",
    "q_eq",
    "q_ne",
    "q_lt",
    "q_le",
    "q_gt",
    "q_ge",
    "q_eq0",
    "q_ne0",
    "q_lt0",
    "q_le0",
    "q_gt0",
    "q_ge0",
    "quantity_equal",
    "quantity_equal_approx",
]
