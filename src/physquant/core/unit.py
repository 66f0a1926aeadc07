# physquant.core.unit

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, TypeAlias, Union

from physquant.core.exceptions import InvalidArgumentError, OperationUndefinedError
from physquant.core.utils import is_integral, is_number

# --- Public typing -----------------------------------------------------------
# A factor spec is either a bare name (power 1) or a (name, power) pair.
FactorSpec: TypeAlias = Union[str, "UnitFactor", Tuple[str, int]]
UnitLike: TypeAlias = Union["Unit", FactorSpec, Iterable[FactorSpec], None]


@dataclass(frozen=True, slots=True)
class UnitFactor:
    """One named dimension raised to a non-zero integer power, e.g. ``metre^2``."""

    name: str
    power: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgumentError(f"Unit factor name must be a non-empty string, got {self.name!r}")
        if isinstance(self.power, bool) or not isinstance(self.power, int):
            if isinstance(self.power, float) and is_integral(self.power):
                object.__setattr__(self, "power", int(self.power))
            else:
                raise InvalidArgumentError(f"Unit factor power must be an integer, got {self.power!r}")
        if self.power == 0:
            raise InvalidArgumentError(f"Unit factor '{self.name}' cannot have power 0")

    def __repr__(self) -> str:
        return self.name if self.power == 1 else f"{self.name}^{self.power}"


def _as_factor(spec: FactorSpec) -> UnitFactor:
    if isinstance(spec, UnitFactor):
        return spec
    if isinstance(spec, str):
        return UnitFactor(spec, 1)
    if isinstance(spec, tuple) and len(spec) == 2:
        return UnitFactor(spec[0], spec[1])
    raise InvalidArgumentError(f"Cannot interpret {spec!r} as a unit factor")


# --- Core object -------------------------------------------------------------

class Unit(tuple):
    """
    Immutable sequence of :class:`UnitFactor`.

    The empty unit is dimensionless (rendered ``"1"``). Construction does not
    reduce; every algebraic operation does, so the result of ``*``, ``/`` and
    ``**`` never carries two factors with the same name. Equality is
    order-independent and compares reduced forms.
    """

    __slots__ = ()

    def __new__(cls, data: UnitLike = ()) -> "Unit":
        if isinstance(data, Unit):
            return tuple.__new__(cls, data)
        if data is None:
            return tuple.__new__(cls, ())
        if isinstance(data, (str, UnitFactor)):
            return tuple.__new__(cls, (_as_factor(data),))
        if (
            isinstance(data, tuple)
            and len(data) == 2
            and isinstance(data[0], str)
            and isinstance(data[1], (int, float))
            and not isinstance(data[1], bool)
        ):
            # a single (name, power) pair; UnitFactor validates the power
            return tuple.__new__(cls, (_as_factor(data),))
        return tuple.__new__(cls, tuple(_as_factor(s) for s in data))

    # --- Algebra (operator overloads) ---
    def __mul__(self, other: UnitLike) -> "Unit":  # type: ignore[override]
        return multiply_units(self, Unit(other))

    def __rmul__(self, other: Any) -> Any:
        # 3 * metre -> Quantity; anything else must not fall back to tuple repetition
        if is_number(other):
            from physquant.core.quantity import Quantity
            return Quantity(other, unit=self)
        return NotImplemented

    def __truediv__(self, other: UnitLike) -> "Unit":
        return divide_units(self, Unit(other))

    def __rtruediv__(self, other: Any) -> "Unit":
        if other == 1:
            return divide_units(self)
        return NotImplemented

    def __pow__(self, n: int, modulo: Any | None = None) -> "Unit":
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Unit.")
        return power_unit(self, n)

    def __add__(self, other: Any) -> "Unit":
        """Block tuple concatenation; use ``*`` to combine units."""
        return NotImplemented

    def __radd__(self, other: Any) -> "Unit":
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return units_equal(self, other)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return not units_equal(self, other)

    def __hash__(self) -> int:
        return hash(frozenset(reduce_unit(self)))

    # --- Helpers ---
    @property
    def is_dimensionless(self) -> bool:
        return len(reduce_unit(self)) == 0

    def names(self) -> List[str]:
        return [f.name for f in self]

    def __repr__(self) -> str:
        return f"Unit({render_unit(self)!r})"

    def __str__(self) -> str:
        return render_unit(self)


def make_unit(*specs: FactorSpec) -> Unit:
    """Build a unit from ``(name, power)`` pairs or bare names: ``make_unit(("metre", 1), ("second", -2))``."""
    return Unit(specs)


DIMENSIONLESS: Unit = Unit()


# --- Algebra -----------------------------------------------------------------

def reduce_unit(unit: UnitLike) -> Unit:
    """Sum powers of equally named factors and drop the ones that cancel.

    The first occurrence of a name fixes its position in the result.
    """
    powers: Dict[str, int] = {}
    for factor in Unit(unit):
        powers[factor.name] = powers.get(factor.name, 0) + factor.power
    return tuple.__new__(Unit, tuple(UnitFactor(n, p) for n, p in powers.items() if p != 0))


def units_equal(a: UnitLike, b: UnitLike) -> bool:
    """Same multiset of (name, power) after reduction, independent of order."""
    ra = set(reduce_unit(a))
    rb = set(reduce_unit(b))
    return len(ra) == len(rb) and ra <= rb and rb <= ra


def multiply_units(*units: UnitLike) -> Unit:
    factors: List[UnitFactor] = []
    for u in units:
        factors.extend(Unit(u))
    return reduce_unit(factors)


def invert_unit(unit: UnitLike) -> Unit:
    return Unit(UnitFactor(f.name, -f.power) for f in Unit(unit))


def divide_units(*units: UnitLike) -> Unit:
    """``u1 / u2 / …``; a single argument yields its inverse."""
    if not units:
        return DIMENSIONLESS
    if len(units) == 1:
        return reduce_unit(invert_unit(units[0]))
    first, *rest = units
    return multiply_units(first, *(invert_unit(u) for u in rest))


def power_unit(unit: UnitLike, n: int) -> Unit:
    if isinstance(n, bool) or not is_integral(n):
        raise InvalidArgumentError(f"Unit exponent must be an integer, got {n!r}")
    n = int(n)
    if n == 0:
        return DIMENSIONLESS
    return reduce_unit(UnitFactor(f.name, f.power * n) for f in reduce_unit(unit))


def root_unit(unit: UnitLike, n: int) -> Unit:
    """Take the ``n``-th root; every power must be divisible by ``n``."""
    if isinstance(n, bool) or not is_integral(n) or int(n) <= 0:
        raise InvalidArgumentError(f"Root degree must be a positive integer, got {n!r}")
    n = int(n)
    reduced = reduce_unit(unit)
    if any(f.power % n for f in reduced):
        raise OperationUndefinedError(
            f"Cannot take root of degree {n} of unit '{render_unit(reduced)}': "
            "the result would have fractional powers."
        )
    return Unit(UnitFactor(f.name, f.power // n) for f in reduced)


def render_unit(unit: UnitLike) -> str:
    """Canonical text form, positive powers first: ``"metre / second ^ 2"``."""
    factors = sorted(Unit(unit), key=lambda f: f.power < 0)
    if not factors:
        return "1"
    parts: List[str] = []
    for f in factors:
        prefix = "/ " if f.power < 0 else ""
        if abs(f.power) == 1:
            parts.append(f"{prefix}{f.name}")
        else:
            parts.append(f"{prefix}{f.name} ^ {abs(f.power)}")
    return " ".join(parts)


__all__ = [
    "FactorSpec",
    "UnitLike",
    "UnitFactor",
    "Unit",
    "DIMENSIONLESS",
    "make_unit",
    "reduce_unit",
    "units_equal",
    "multiply_units",
    "invert_unit",
    "divide_units",
    "power_unit",
    "root_unit",
    "render_unit",
]
