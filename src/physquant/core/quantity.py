"""
physquant.core.quantity
=======================

Defines the uncertainty types and the `Quantity` value object.

A quantity is a ``(value, error, unit)`` triple:

- ``value`` is a float in the quantity's own unit (no hidden SI magnitude);
- ``error`` is an :class:`Uncertainty`, either :class:`AbsoluteError`
  (same scale as the value) or :class:`RelativeError` (fraction of the value);
- ``unit`` is a :class:`~physquant.core.unit.Unit`, empty when dimensionless.

Quantities are immutable; every operation returns a new one. Plain numbers
are accepted wherever a quantity is expected and behave as dimensionless,
error-free quantities (see :func:`as_quantity`).

``==`` on quantities is *structural* (same value, same error encoding, same
unit). Statistical comparisons that account for the uncertainty live in
:mod:`physquant.core.operations` (``q_eq``, ``q_lt``, …); the ordering
operators ``<``, ``<=``, ``>``, ``>=`` delegate to them at the configured
confidence level.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from physquant.core.exceptions import InvalidArgumentError
from physquant.core.unit import DIMENSIONLESS, Unit, UnitLike, render_unit, units_equal
from physquant.core.utils import Number, is_number

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from physquant.units.registry import UnitCatalog


# --- Uncertainty --------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Uncertainty:
    """Non-negative uncertainty magnitude; subclasses fix its interpretation."""

    magnitude: float = 0.0

    def __post_init__(self) -> None:
        if not is_number(self.magnitude):
            raise InvalidArgumentError(f"Uncertainty must be a real number, got {self.magnitude!r}")
        magnitude = float(self.magnitude)
        if not math.isfinite(magnitude) or magnitude < 0.0:
            raise InvalidArgumentError(
                f"Uncertainty must be finite and non-negative, got {self.magnitude!r}"
            )
        object.__setattr__(self, "magnitude", magnitude)

    def __bool__(self) -> bool:
        return self.magnitude != 0.0

    def absolute(self, value: float) -> float:
        raise NotImplementedError

    def relative(self, value: float) -> float:
        raise NotImplementedError

    def scaled(self, factor: float) -> "Uncertainty":
        """Uncertainty of ``factor * x`` given this uncertainty of ``x``."""
        raise NotImplementedError

    @property
    def raw(self) -> float:
        """Signed encoding: absolute errors as-is, relative errors negated."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class AbsoluteError(Uncertainty):
    def absolute(self, value: float) -> float:
        return self.magnitude

    def relative(self, value: float) -> float:
        if value == 0:
            return math.inf if self.magnitude else 0.0
        return self.magnitude / abs(value)

    def scaled(self, factor: float) -> "AbsoluteError":
        return AbsoluteError(self.magnitude * abs(factor))

    @property
    def raw(self) -> float:
        return self.magnitude


@dataclass(frozen=True, slots=True)
class RelativeError(Uncertainty):
    def absolute(self, value: float) -> float:
        return abs(self.magnitude * value)

    def relative(self, value: float) -> float:
        return self.magnitude

    def scaled(self, factor: float) -> "RelativeError":
        # relative uncertainty is scale invariant
        return self

    @property
    def raw(self) -> float:
        return -self.magnitude


NO_ERROR = AbsoluteError(0.0)

ErrorLike = Union[Uncertainty, int, float]


def as_uncertainty(error: ErrorLike, relative: bool = False) -> Uncertainty:
    if isinstance(error, Uncertainty):
        return error
    if relative:
        return RelativeError(error)
    return AbsoluteError(error)


# --- Quantity -----------------------------------------------------------------

@dataclass(frozen=True, slots=True, eq=False)
class Quantity:
    """A value with an uncertainty and a unit."""

    value: float
    error: Uncertainty = NO_ERROR
    unit: Unit = DIMENSIONLESS

    def __post_init__(self) -> None:
        if not is_number(self.value):
            raise InvalidArgumentError(f"Quantity value must be a real number, got {self.value!r}")
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "error", as_uncertainty(self.error))
        object.__setattr__(self, "unit", Unit(self.unit))

    # --- accessors ---
    @property
    def error_raw(self) -> float:
        return self.error.raw

    @property
    def absolute_error(self) -> float:
        return self.error.absolute(self.value)

    @property
    def relative_error(self) -> float:
        return self.error.relative(self.value)

    @property
    def has_error(self) -> bool:
        return bool(self.error)

    @property
    def has_unit(self) -> bool:
        return len(self.unit) > 0

    @property
    def is_unitless(self) -> bool:
        return len(self.unit) == 0

    def without_error(self) -> "Quantity":
        return Quantity(self.value, NO_ERROR, self.unit)

    def without_unit(self) -> "Quantity":
        return Quantity(self.value, self.error, DIMENSIONLESS)

    def to(self, target: UnitLike, catalog: "UnitCatalog | None" = None) -> "Quantity":
        from physquant.core.operations import convert
        return convert(self, target, catalog)

    # --- structural equality ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return (
            self.value == other.value
            and self.error_raw == other.error_raw
            and units_equal(self.unit, other.unit)
        )

    def __hash__(self) -> int:
        return hash((self.value, self.error_raw, self.unit))

    # --- arithmetic sugar ---
    def __add__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.add(self, other)

    def __radd__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.add(other, self)

    def __sub__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.subtract(self, other)

    def __rsub__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.subtract(other, self)

    def __mul__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        if isinstance(other, Unit):
            return Quantity(self.value, self.error, self.unit * other)
        return ops.multiply(self, other)

    def __rmul__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.multiply(other, self)

    def __truediv__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        if isinstance(other, Unit):
            return Quantity(self.value, self.error, self.unit / other)
        return ops.divide(self, other)

    def __rtruediv__(self, other: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.divide(other, self)

    def __pow__(self, exponent: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.general_power(self, exponent)

    def __rpow__(self, base: Any) -> "Quantity":
        from physquant.core import operations as ops
        return ops.general_power(base, self)

    def __neg__(self) -> "Quantity":
        from physquant.core import operations as ops
        return ops.subtract(self)

    def __pos__(self) -> "Quantity":
        return self

    def __abs__(self) -> "Quantity":
        from physquant.core import operations as ops
        return ops.absolute(self)

    # --- statistical ordering at the configured confidence ---
    def __lt__(self, other: Any) -> bool:
        from physquant.core import operations as ops
        return ops.q_lt(self, other)

    def __le__(self, other: Any) -> bool:
        from physquant.core import operations as ops
        return ops.q_le(self, other)

    def __gt__(self, other: Any) -> bool:
        from physquant.core import operations as ops
        return ops.q_gt(self, other)

    def __ge__(self, other: Any) -> bool:
        from physquant.core import operations as ops
        return ops.q_ge(self, other)

    # --- display ---
    def __repr__(self) -> str:
        return f"Quantity(value={self.value!r}, error={self.error!r}, unit={render_unit(self.unit)!r})"

    def __str__(self) -> str:
        text = f"{self.value:.15g}"
        if self.has_error:
            if isinstance(self.error, RelativeError):
                text += f" ± {self.error.magnitude * 100:.15g}%"
            else:
                text += f" ± {self.error.magnitude:.15g}"
        if self.has_unit:
            text += f" {render_unit(self.unit)}"
        return text


# --- Construction & coercion --------------------------------------------------

def make_quantity(
    value: Number,
    error: ErrorLike = 0,
    unit: UnitLike = (),
    *,
    relative: bool = False,
) -> Quantity:
    """Build a quantity; ``relative=True`` reads ``error`` as a fraction of the value.

    A negative numeric error is rejected rather than reinterpreted.
    """
    return Quantity(value, as_uncertainty(error, relative), Unit(unit))


def as_quantity(x: Any) -> Quantity:
    """The shared coercion: quantities pass through, plain numbers become dimensionless."""
    if isinstance(x, Quantity):
        return x
    if is_number(x):
        return Quantity(float(x), NO_ERROR, DIMENSIONLESS)
    raise TypeError(f"Cannot use {type(x).__name__} as a quantity")


# --- Query surface ------------------------------------------------------------

def value(x: Any) -> float:
    return as_quantity(x).value


def absolute_error(x: Any) -> float:
    return as_quantity(x).absolute_error


def relative_error(x: Any) -> float:
    return as_quantity(x).relative_error


def has_error(x: Any) -> bool:
    return as_quantity(x).has_error


def has_unit(x: Any) -> bool:
    return as_quantity(x).has_unit


def is_unitless(x: Any) -> bool:
    return as_quantity(x).is_unitless


__all__ = [
    "Uncertainty",
    "AbsoluteError",
    "RelativeError",
    "NO_ERROR",
    "as_uncertainty",
    "Quantity",
    "make_quantity",
    "as_quantity",
    "value",
    "absolute_error",
    "relative_error",
    "has_error",
    "has_unit",
    "is_unitless",
]
